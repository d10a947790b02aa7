"""Main PageExtractor class: one request in, one PageContent out."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from types import TracebackType
from typing import Callable

from ..concurrency import ConcurrencyManager
from ..extraction.normalizer import HtmlNormalizer
from ..extraction.protocols import ReadabilityAlgorithm
from ..extraction.readability import LxmlReadability, ReadabilityExtractor
from ..http import AsyncHttpClient, HttpClient
from ..models.config import PagekeepConfig
from ..models.content import ExtractionMode, ExtractionRequest, PageContent
from ..models.events import EventType, ExtractionEvent
from ..models.profiles import apply_profile
from ..pipeline.base import EventEmitter, ExtractionPipeline, PageContext, PipelineStep
from ..pipeline.steps import FetchStep, NormalizeStep, ReadabilityStep
from ..security.url_validator import UrlValidator

logger = logging.getLogger(__name__)


class PageExtractor:
    """
    Primary API for pagekeep.

    Turns an ExtractionRequest into a PageContent. The readability and
    normalizer stages are independent: either may fail and the other's
    fields are still returned. Only a FetchError in server-side mode
    reaches the caller.

    Example:
        config = PagekeepConfig(profile=ProfileName.BOOKMARK)

        async with PageExtractor(config) as extractor:
            content = await extractor.extract(ExtractionRequest(url="https://example.com/post"))

        print(content.extraction_method.value, content.capture_quality)
    """

    def __init__(
        self,
        config: PagekeepConfig | None = None,
        algorithm: ReadabilityAlgorithm | None = None,
        http_client: HttpClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the PageExtractor.

        Args:
            config: Configuration. Profile defaults will be applied automatically.
            algorithm: Readability implementation (readability-lxml if None)
            http_client: HTTP client to use instead of an owned AsyncHttpClient
            clock: Time source for the published-time fallback
        """
        self.config = apply_profile(config or PagekeepConfig())

        self._readability = ReadabilityExtractor(
            algorithm=algorithm or LxmlReadability(self.config.readability),
            clock=clock,
        )
        self._normalizer = HtmlNormalizer(self.config.normalizer)
        self._concurrency = ConcurrencyManager(max_workers=self.config.performance.cpu_workers)
        self._url_validator = UrlValidator(block_private_ips=self.config.network.block_private_ips)

        # Components (initialized in __aenter__ unless injected)
        self._http_client: HttpClient | None = http_client
        self._owns_http_client = http_client is None
        self._fetch_step: FetchStep | None = None
        if http_client is not None:
            self._fetch_step = self._build_fetch_step(http_client)

    def _build_fetch_step(self, http_client: HttpClient) -> FetchStep:
        return FetchStep(
            http_client,
            url_validator=self._url_validator,
            timeout=self.config.network.timeout,
        )

    async def __aenter__(self) -> PageExtractor:
        """Enter async context and initialize components."""
        if self._owns_http_client:
            network = self.config.network
            client = AsyncHttpClient(
                user_agent=network.user_agent,
                accept=network.accept,
                accept_language=network.accept_language,
                max_content_size=network.max_content_size,
                proxy=network.proxy,
                default_timeout=network.timeout,
            )
            await client.__aenter__()
            self._http_client = client
            self._fetch_step = self._build_fetch_step(client)

        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and cleanup resources."""
        if self._owns_http_client and isinstance(self._http_client, AsyncHttpClient):
            await self._http_client.__aexit__(exc_type, exc_val, exc_tb)
            self._http_client = None
            self._fetch_step = None

        self._concurrency.shutdown(wait=exc_type is None)

    def _build_pipeline(self, mode: ExtractionMode) -> ExtractionPipeline:
        critical: list[PipelineStep] = []
        if mode == ExtractionMode.SERVER_SIDE:
            if self._fetch_step is None:
                raise RuntimeError("Extractor not initialized. Use 'async with' context manager.")
            critical.append(self._fetch_step)

        optional: list[PipelineStep] = []
        if self.config.readability.enabled:
            optional.append(ReadabilityStep(self._readability, self._concurrency))
        optional.append(NormalizeStep(self._normalizer, self._concurrency))

        return ExtractionPipeline(critical_steps=critical, optional_steps=optional)

    async def extract(
        self,
        request: ExtractionRequest,
        emit: EventEmitter | None = None,
    ) -> PageContent:
        """
        Extract one page.

        Args:
            request: What to extract and how
            emit: Optional callback for pipeline events

        Returns:
            PageContent; fields of stages that failed are absent

        Raises:
            FetchError: If the page cannot be fetched in server-side mode
            ValueError: If client mode is requested without HTML
        """
        if request.mode == ExtractionMode.CLIENT and request.html is None:
            raise ValueError("Client-mode extraction requires the page HTML")

        start_time = time.monotonic()
        if emit:
            emit(
                ExtractionEvent(
                    type=EventType.EXTRACTION_STARTED,
                    url=request.url,
                    message=f"Extracting {request.url} ({request.mode.value})",
                )
            )

        ctx = PageContext(url=request.url, mode=request.mode, full_content=request.full_content)
        if request.mode == ExtractionMode.CLIENT:
            ctx.html = request.html

        pipeline = self._build_pipeline(request.mode)
        ctx = await pipeline.execute(ctx, emit)

        # Merge by field presence; article first so the method reads *-html
        content = ctx.content
        if ctx.article is not None:
            content.apply_article(ctx.article)
        if ctx.cleaned_html is not None:
            content.apply_html(ctx.cleaned_html)

        duration = time.monotonic() - start_time
        logger.info(
            f"Extracted {request.url}: {content.extraction_method.value} "
            f"({content.capture_quality}) in {duration:.2f}s"
        )

        if emit:
            emit(
                ExtractionEvent(
                    type=EventType.EXTRACTION_COMPLETED,
                    url=request.url,
                    extraction_method=content.extraction_method.value,
                    truncated=ctx.truncated,
                    message=f"Capture {content.capture_quality}",
                )
            )

        return content


def extract_blocking(
    url: str,
    html: str | None = None,
    full_content: bool = True,
    on_event: EventEmitter | None = None,
    **kwargs: object,
) -> PageContent:
    """
    Blocking extraction with optional event callback.

    This is a convenience wrapper for sync code that can't use async/await.
    For async code, use the PageExtractor class directly.

    WARNING: Do not call from within an existing event loop (e.g., Jupyter,
    asyncio-based frameworks). Use the async PageExtractor API instead.

    Args:
        url: The page URL
        html: Page HTML; when given, the page is not fetched (client mode)
        full_content: Whether to attempt readability extraction
        on_event: Optional callback for events
        **kwargs: Additional config options passed to PagekeepConfig

    Returns:
        The extracted PageContent

    Example:
        content = extract_blocking(
            "https://example.com/post",
            profile=ProfileName.COMPACT,
        )
        print(content.to_json(indent=2))
    """
    # Detect if we're already in an async context
    try:
        asyncio.get_running_loop()
        raise RuntimeError("extract_blocking() called from async context. Use 'async with PageExtractor()' instead.")
    except RuntimeError as e:
        if "no running event loop" not in str(e).lower():
            raise

    config = PagekeepConfig(**kwargs)  # type: ignore[arg-type]
    if html is None:
        request = ExtractionRequest(url=url, full_content=full_content)
    else:
        request = ExtractionRequest.for_html(url, html, full_content=full_content)

    async def _run() -> PageContent:
        async with PageExtractor(config) as extractor:
            return await extractor.extract(request, emit=on_event)

    return asyncio.run(_run())
