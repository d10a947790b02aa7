"""Document-level metadata read from meta tags and JSON-LD."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# JSON-LD types that describe the page's article
_ARTICLE_TYPES = {"article", "newsarticle", "blogposting", "report", "scholarlyarticle", "techarticle", "recipe"}


@dataclass(frozen=True)
class DocumentMetadata:
    """Metadata declared by the document itself."""

    title: Optional[str] = None
    lang: Optional[str] = None
    description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    site_name: Optional[str] = None
    published_time: Optional[str] = None
    jsonld_headline: Optional[str] = None
    jsonld_published: Optional[str] = None
    jsonld_description: Optional[str] = None
    jsonld_publisher: Optional[str] = None
    content_language: Optional[str] = None


def _safe_string(value: Any) -> Optional[str]:
    """Convert a metadata value to a stripped string, or None if empty."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = value[0]
    if isinstance(value, dict):
        value = value.get("name") or value.get("@value")
    text = str(value).strip() if value is not None else ""
    return text or None


def _meta_content(soup: BeautifulSoup, **attrs: Any) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if isinstance(tag, Tag):
        return _safe_string(tag.get("content"))
    return None


def _iter_jsonld(soup: BeautifulSoup) -> list[dict[str, Any]]:
    """Collect JSON-LD objects, flattening lists and @graph containers."""
    items: list[dict[str, Any]] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.debug(f"Skipping unparsable JSON-LD block: {e}")
            continue
        stack = data if isinstance(data, list) else [data]
        for item in stack:
            if not isinstance(item, dict):
                continue
            graph = item.get("@graph")
            if isinstance(graph, list):
                items.extend(g for g in graph if isinstance(g, dict))
            items.append(item)
    return items


def _is_article(item: dict[str, Any]) -> bool:
    types = item.get("@type")
    if isinstance(types, str):
        types = [types]
    if not isinstance(types, list):
        return False
    return any(isinstance(t, str) and t.lower() in _ARTICLE_TYPES for t in types)


def extract_metadata(soup: BeautifulSoup) -> DocumentMetadata:
    """
    Read title, language and Open Graph / article / JSON-LD metadata.

    Args:
        soup: Parsed document (not modified)

    Returns:
        DocumentMetadata with whatever the page declares
    """
    title_tag = soup.find("title")
    title = _safe_string(title_tag.get_text()) if isinstance(title_tag, Tag) else None

    html_tag = soup.find("html")
    lang = _safe_string(html_tag.get("lang")) if isinstance(html_tag, Tag) else None

    headline = published = jsonld_description = publisher = None
    for item in _iter_jsonld(soup):
        if not _is_article(item):
            continue
        headline = headline or _safe_string(item.get("headline") or item.get("name"))
        published = published or _safe_string(item.get("datePublished"))
        jsonld_description = jsonld_description or _safe_string(item.get("description"))
        publisher = publisher or _safe_string(item.get("publisher"))

    content_language = _meta_content(soup, **{"http-equiv": re.compile(r"^content-language$", re.IGNORECASE)})
    if content_language is None:
        locale = _meta_content(soup, property="og:locale")
        content_language = locale.replace("_", "-") if locale else None

    return DocumentMetadata(
        title=title,
        lang=lang,
        description=_meta_content(soup, name="description"),
        og_title=_meta_content(soup, property="og:title"),
        og_description=_meta_content(soup, property="og:description"),
        site_name=_meta_content(soup, property="og:site_name"),
        published_time=_meta_content(soup, property="article:published_time"),
        jsonld_headline=headline,
        jsonld_published=published,
        jsonld_description=jsonld_description,
        jsonld_publisher=publisher,
        content_language=content_language,
    )
