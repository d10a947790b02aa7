"""Records produced and consumed by the extraction pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ExtractionMode(str, Enum):
    """Where the HTML comes from."""

    SERVER_SIDE = "server-side"
    CLIENT = "client"


class ExtractionMethod(str, Enum):
    """Provenance tag recording which extraction stages succeeded."""

    SERVER_SIDE = "server-side"
    CLIENT_READABILITY = "client-readability"
    CLIENT_READABILITY_HTML = "client-readability-html"
    CLIENT_HTML = "client-html"

    def with_html(self) -> ExtractionMethod:
        """Return the method tag after cleaned HTML was attached."""
        if self is ExtractionMethod.CLIENT_READABILITY:
            return ExtractionMethod.CLIENT_READABILITY_HTML
        if self is ExtractionMethod.SERVER_SIDE:
            return ExtractionMethod.CLIENT_HTML
        return self


@dataclass(frozen=True)
class RawDocument:
    """
    HTML payload plus its source URL.

    Attributes:
        url: The requested page URL
        html: Decoded HTML text
        status_code: HTTP status (None when supplied by a client)
        content_type: Content-Type header value, if fetched
        final_url: URL after redirects, if fetched
    """

    url: str
    html: str
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    final_url: Optional[str] = None


@dataclass(frozen=True)
class ArticleRecord:
    """Structured article produced by the readability extractor."""

    title: str
    lang: str
    site_name: str
    published_time: datetime
    excerpt: str
    text_content: str


@dataclass(frozen=True)
class ExtractionRequest:
    """
    A single extraction request.

    Attributes:
        url: Canonical page URL (becomes PageContent.link)
        html: Page HTML, required in client mode
        mode: Fetch the URL server-side, or use the supplied HTML
        full_content: Whether to attempt readability extraction
    """

    url: str
    html: Optional[str] = None
    mode: ExtractionMode = ExtractionMode.SERVER_SIDE
    full_content: bool = True

    @classmethod
    def for_html(cls, url: str, html: str, full_content: bool = True) -> ExtractionRequest:
        return cls(url=url, html=html, mode=ExtractionMode.CLIENT, full_content=full_content)


# Field name -> bookmark API key
_API_KEYS = {
    "link": "link",
    "extraction_method": "extractionMethod",
    "title": "title",
    "excerpt": "excerpt",
    "lang": "lang",
    "site_name": "siteName",
    "published_time": "publishedTime",
    "text_content": "textContent",
    "html_content": "htmlContent",
}


@dataclass
class PageContent:
    """
    Record handed back to the caller for submission to the bookmark API.

    Only ``link`` and ``extraction_method`` are mandatory; every content
    field is independently optional.
    """

    link: str
    extraction_method: ExtractionMethod = ExtractionMethod.SERVER_SIDE
    title: Optional[str] = None
    excerpt: Optional[str] = None
    lang: Optional[str] = None
    site_name: Optional[str] = None
    published_time: Optional[datetime] = None
    text_content: Optional[str] = None
    html_content: Optional[str] = None
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)

    @property
    def has_article(self) -> bool:
        return self.text_content is not None or self.title is not None

    @property
    def has_html(self) -> bool:
        return self.html_content is not None

    @property
    def capture_quality(self) -> str:
        """Coarse capture level used for user-facing status messages."""
        if self.has_article and self.has_html:
            return "full"
        if self.has_article or self.has_html:
            return "partial"
        return "link-only"

    def apply_article(self, article: ArticleRecord) -> None:
        """Populate article fields and upgrade the extraction method."""
        self.title = article.title
        self.excerpt = article.excerpt
        self.lang = article.lang
        self.site_name = article.site_name
        self.published_time = article.published_time
        self.text_content = article.text_content
        self.extraction_method = ExtractionMethod.CLIENT_READABILITY

    def apply_html(self, html_content: str) -> None:
        """Attach cleaned HTML and append ``-html`` to the extraction method."""
        self.html_content = html_content
        self.extraction_method = self.extraction_method.with_html()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the bookmark API shape, omitting absent fields."""
        result: dict[str, Any] = {}
        for attr, key in _API_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, ExtractionMethod):
                value = value.value
            elif isinstance(value, datetime):
                value = value.isoformat()
            result[key] = value
        return result

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
