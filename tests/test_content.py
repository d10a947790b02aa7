"""Tests for content records, events and text helpers."""

import json
from datetime import datetime, timezone

from pagekeep.extraction.text import clean_up_text, fallback_excerpt
from pagekeep.models.content import (
    ArticleRecord,
    ExtractionMethod,
    ExtractionMode,
    ExtractionRequest,
    PageContent,
)
from pagekeep.models.events import EventType, ExtractionEvent

PUBLISHED = datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)


def make_record(**overrides) -> ArticleRecord:
    fields = {
        "title": "Title",
        "lang": "en",
        "site_name": "Site",
        "published_time": PUBLISHED,
        "excerpt": "Excerpt",
        "text_content": "Body",
    }
    fields.update(overrides)
    return ArticleRecord(**fields)


class TestExtractionMethod:
    """Tests for extraction method transitions."""

    def test_with_html(self):
        assert ExtractionMethod.SERVER_SIDE.with_html() == ExtractionMethod.CLIENT_HTML
        assert ExtractionMethod.CLIENT_READABILITY.with_html() == ExtractionMethod.CLIENT_READABILITY_HTML
        assert ExtractionMethod.CLIENT_HTML.with_html() == ExtractionMethod.CLIENT_HTML

    def test_values(self):
        assert [m.value for m in ExtractionMethod] == [
            "server-side",
            "client-readability",
            "client-readability-html",
            "client-html",
        ]


class TestExtractionRequest:
    """Tests for ExtractionRequest."""

    def test_defaults(self):
        request = ExtractionRequest(url="https://example.com")

        assert request.mode == ExtractionMode.SERVER_SIDE
        assert request.full_content is True
        assert request.html is None

    def test_for_html(self):
        request = ExtractionRequest.for_html("https://example.com", "<p>x</p>", full_content=False)

        assert request.mode == ExtractionMode.CLIENT
        assert request.html == "<p>x</p>"
        assert request.full_content is False


class TestPageContent:
    """Tests for PageContent."""

    def test_link_only(self):
        content = PageContent(link="https://example.com")

        assert content.extraction_method == ExtractionMethod.SERVER_SIDE
        assert content.capture_quality == "link-only"
        assert content.to_dict() == {"link": "https://example.com", "extractionMethod": "server-side"}

    def test_article_then_html(self):
        """Test the method tag after both stages succeed."""
        content = PageContent(link="https://example.com")
        content.apply_article(make_record())
        assert content.extraction_method == ExtractionMethod.CLIENT_READABILITY

        content.apply_html("<!DOCTYPE html><html><head></head><body></body></html>")
        assert content.extraction_method == ExtractionMethod.CLIENT_READABILITY_HTML
        assert content.capture_quality == "full"

    def test_html_only(self):
        content = PageContent(link="https://example.com")
        content.apply_html("<html></html>")

        assert content.extraction_method == ExtractionMethod.CLIENT_HTML
        assert content.capture_quality == "partial"

    def test_to_dict_uses_api_keys(self):
        """Test camelCase keys and ISO timestamps."""
        content = PageContent(link="https://example.com")
        content.apply_article(make_record(site_name="Green Streets"))
        content.apply_html("<html></html>")

        data = content.to_dict()
        assert data["siteName"] == "Green Streets"
        assert data["publishedTime"] == "2024-03-05T10:00:00+00:00"
        assert data["textContent"] == "Body"
        assert data["htmlContent"] == "<html></html>"
        assert data["extractionMethod"] == "client-readability-html"
        assert "site_name" not in data
        assert "capturedAt" not in data

    def test_to_json(self):
        content = PageContent(link="https://example.com/ü")

        assert json.loads(content.to_json()) == content.to_dict()
        assert "ü" in content.to_json()

    def test_equality_ignores_capture_time(self):
        first = PageContent(link="https://example.com")
        second = PageContent(link="https://example.com", captured_at=datetime(2000, 1, 1, tzinfo=timezone.utc))

        assert first == second


class TestExtractionEvent:
    """Tests for ExtractionEvent."""

    def test_timestamp_is_utc(self):
        event = ExtractionEvent(type=EventType.FETCH_STARTED, url="https://example.com")
        assert event.timestamp.tzinfo == timezone.utc

    def test_is_error(self):
        assert ExtractionEvent(type=EventType.FETCH_FAILED).is_error
        assert ExtractionEvent(type=EventType.NORMALIZE_FAILED).is_error
        assert not ExtractionEvent(type=EventType.READABILITY_SKIPPED).is_error


class TestTextHelpers:
    """Tests for text clean-up helpers."""

    def test_clean_up_text(self):
        assert clean_up_text("  Fish &amp; Chips\n\n\t at  the pier ") == "Fish & Chips at the pier"

    def test_clean_up_empty(self):
        assert clean_up_text(None) == ""
        assert clean_up_text("") == ""

    def test_fallback_excerpt_short(self):
        assert fallback_excerpt("Short text.") == "Short text."

    def test_fallback_excerpt_cut_at_word(self):
        text = "word " * 100
        excerpt = fallback_excerpt(text)

        assert len(excerpt) <= 200
        assert excerpt.endswith("word")
        assert text.startswith(excerpt)
