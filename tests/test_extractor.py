"""Integration tests for the PageExtractor API."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pagekeep import (
    EventType,
    ExtractionMethod,
    ExtractionMode,
    ExtractionRequest,
    FetchError,
    PageExtractor,
    PagekeepConfig,
    ProfileName,
    extract_blocking,
)
from pagekeep.http import HttpResponse
from pagekeep.models.config import ReadabilityConfig

MARKER = "<!-- ...(truncated) -->"


def html_response(html: str, content_type: str = "text/html; charset=utf-8") -> HttpResponse:
    return HttpResponse(
        status_code=200,
        content=html.encode("utf-8"),
        content_type=content_type,
        headers={"Content-Type": content_type},
        url="https://example.com/post",
    )


@pytest.fixture
def mock_http_client():
    """Create mock HTTP client."""
    client = AsyncMock()
    client.decode_content = MagicMock(side_effect=lambda response: response.content.decode("utf-8"))
    return client


@pytest.fixture
def long_html():
    paragraph = "lorem ipsum " * 8
    return "<html><body><article>" + "".join(f"<p>{paragraph}</p>" for _ in range(2100)) + "</article></body></html>"


class TestServerSide:
    """Tests for server-side extraction."""

    @pytest.mark.asyncio
    async def test_readable_page(self, mock_http_client, article_html, fixed_clock):
        """Test that a readable page gets article fields and cleaned HTML."""
        mock_http_client.get.return_value = html_response(article_html)
        events = []

        async with PageExtractor(http_client=mock_http_client, clock=fixed_clock) as extractor:
            content = await extractor.extract(ExtractionRequest(url="https://example.com/post"), emit=events.append)

        assert content.link == "https://example.com/post"
        assert content.extraction_method == ExtractionMethod.CLIENT_READABILITY_HTML
        assert content.title == "Why Gardens Matter"
        assert content.site_name == "Green Streets"
        assert content.published_time == datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)
        assert "Community gardens" in content.text_content
        assert content.html_content.startswith("<!DOCTYPE html>")
        assert "<script" not in content.html_content
        assert content.capture_quality == "full"

        types = [e.type for e in events]
        assert types[:3] == [EventType.EXTRACTION_STARTED, EventType.FETCH_STARTED, EventType.FETCH_COMPLETED]
        assert types[-1] == EventType.EXTRACTION_COMPLETED
        assert EventType.READABILITY_COMPLETED in types
        assert EventType.NORMALIZE_COMPLETED in types
        assert events[-1].extraction_method == "client-readability-html"

    @pytest.mark.asyncio
    async def test_unreadable_page(self, mock_http_client, link_html):
        """Test that an unreadable page still gets cleaned HTML."""
        mock_http_client.get.return_value = html_response(link_html)

        async with PageExtractor(http_client=mock_http_client) as extractor:
            content = await extractor.extract(ExtractionRequest(url="https://example.com/shop"))

        assert content.extraction_method == ExtractionMethod.CLIENT_HTML
        assert content.title is None
        assert content.text_content is None
        assert "Product 3" in content.html_content
        assert content.capture_quality == "partial"

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, mock_http_client):
        """Test that a 503 reaches the caller as FetchError."""
        mock_http_client.get.side_effect = FetchError(503, "Service Unavailable")

        async with PageExtractor(http_client=mock_http_client) as extractor:
            with pytest.raises(FetchError) as exc_info:
                await extractor.extract(ExtractionRequest(url="https://example.com/post"))

        assert exc_info.value.status == 503

    @pytest.mark.asyncio
    async def test_non_html_is_link_only(self, mock_http_client):
        """Test that a non-HTML response degrades to a link-only capture."""
        mock_http_client.get.return_value = html_response("%PDF-1.7", content_type="application/pdf")

        async with PageExtractor(http_client=mock_http_client) as extractor:
            content = await extractor.extract(ExtractionRequest(url="https://example.com/file.pdf"))

        assert content.to_dict() == {"link": "https://example.com/file.pdf", "extractionMethod": "server-side"}
        assert content.capture_quality == "link-only"

    @pytest.mark.asyncio
    async def test_requires_context(self):
        """Test that server-side mode needs an initialized HTTP client."""
        extractor = PageExtractor()

        with pytest.raises(RuntimeError):
            await extractor.extract(ExtractionRequest(url="https://example.com/post"))

    @pytest.mark.asyncio
    async def test_configured_timeout_passed(self, mock_http_client, link_html):
        mock_http_client.get.return_value = html_response(link_html)
        config = PagekeepConfig(network={"timeout": 12.5})

        async with PageExtractor(config, http_client=mock_http_client) as extractor:
            await extractor.extract(ExtractionRequest(url="https://example.com/shop"))

        mock_http_client.get.assert_awaited_once_with("https://example.com/shop", timeout=12.5)


class TestClientMode:
    """Tests for client-supplied HTML."""

    @pytest.mark.asyncio
    async def test_client_html_not_fetched(self, mock_http_client, article_html):
        async with PageExtractor(http_client=mock_http_client) as extractor:
            content = await extractor.extract(ExtractionRequest.for_html("https://example.com/post", article_html))

        mock_http_client.get.assert_not_called()
        assert content.extraction_method == ExtractionMethod.CLIENT_READABILITY_HTML

    @pytest.mark.asyncio
    async def test_client_mode_requires_html(self):
        request = ExtractionRequest(url="https://example.com/post", mode=ExtractionMode.CLIENT)

        with pytest.raises(ValueError):
            await PageExtractor().extract(request)

    @pytest.mark.asyncio
    async def test_no_full_content_skips_readability(self, article_html):
        """Test that full_content=False keeps only the cleaned HTML."""
        request = ExtractionRequest.for_html("https://example.com/post", article_html, full_content=False)
        content = await PageExtractor().extract(request)

        assert content.extraction_method == ExtractionMethod.CLIENT_HTML
        assert content.title is None
        assert content.html_content is not None

    @pytest.mark.asyncio
    async def test_readability_disabled_in_config(self, article_html):
        config = PagekeepConfig(readability=ReadabilityConfig(enabled=False))
        content = await PageExtractor(config).extract(ExtractionRequest.for_html("https://example.com/post", article_html))

        assert content.extraction_method == ExtractionMethod.CLIENT_HTML

    @pytest.mark.asyncio
    async def test_readability_fault_keeps_html(self, article_html):
        """Test that an algorithm fault only leaves article fields absent."""
        algorithm = MagicMock()
        algorithm.probably_readable.side_effect = RuntimeError("scorer crashed")
        events = []

        content = await PageExtractor(algorithm=algorithm).extract(
            ExtractionRequest.for_html("https://example.com/post", article_html),
            emit=events.append,
        )

        assert content.extraction_method == ExtractionMethod.CLIENT_HTML
        assert content.html_content is not None
        assert any(e.type == EventType.READABILITY_FAILED for e in events)

    @pytest.mark.asyncio
    async def test_empty_html_is_link_only(self):
        content = await PageExtractor().extract(ExtractionRequest.for_html("https://example.com/post", ""))

        assert content.extraction_method == ExtractionMethod.SERVER_SIDE
        assert content.capture_quality == "link-only"

    @pytest.mark.asyncio
    async def test_long_page_truncated(self, long_html):
        """Test that a 200k-char page yields a bounded prefix with one marker."""
        request = ExtractionRequest.for_html("https://example.com/long", long_html, full_content=False)
        content = await PageExtractor().extract(request)

        assert content.html_content.endswith(MARKER)
        assert content.html_content.count(MARKER) == 1
        assert content.html_content.startswith("<!DOCTYPE html><html><head></head><body><article>lorem ipsum")

    @pytest.mark.asyncio
    async def test_profile_budget(self, long_html):
        """Test that the compact profile lowers the budget."""
        config = PagekeepConfig(profile=ProfileName.COMPACT)
        request = ExtractionRequest.for_html("https://example.com/long", long_html, full_content=False)
        content = await PageExtractor(config).extract(request)

        assert len(content.html_content) < 25_000


class TestExtractBlocking:
    """Tests for the synchronous wrapper."""

    def test_client_html(self, article_html):
        content = extract_blocking("https://example.com/post", html=article_html)

        assert content.extraction_method == ExtractionMethod.CLIENT_READABILITY_HTML
        assert content.title == "Why Gardens Matter"

    def test_config_kwargs(self, article_html):
        content = extract_blocking(
            "https://example.com/post",
            html=article_html,
            full_content=False,
            normalizer={"max_chars": 50},
        )

        assert content.html_content.endswith(MARKER)

    @pytest.mark.asyncio
    async def test_refuses_running_loop(self):
        with pytest.raises(RuntimeError, match="async context"):
            extract_blocking("https://example.com/post", html="<p>x</p>")
