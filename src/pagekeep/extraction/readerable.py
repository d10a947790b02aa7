"""Cheap structural pre-check deciding whether a page looks like an article."""

import math
import re

from bs4 import BeautifulSoup, Tag

UNLIKELY_CANDIDATES_RE = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|footer|gdpr|"
    r"header|legends|menu|related|remark|replies|rss|shoutbox|sidebar|skyscraper|social|sponsor|"
    r"supplemental|ad-break|agegate|pagination|pager|popup|yom-remote",
    re.IGNORECASE,
)
MAYBE_CANDIDATE_RE = re.compile(r"and|article|body|column|content|main|mathjax|shadow", re.IGNORECASE)
_HIDDEN_STYLE_RE = re.compile(r"display\s*:\s*none", re.IGNORECASE)


def _is_node_visible(node: Tag) -> bool:
    style = node.get("style")
    if style and _HIDDEN_STYLE_RE.search(str(style)):
        return False
    if node.has_attr("hidden"):
        return False
    aria_hidden = node.get("aria-hidden")
    if aria_hidden is not None and str(aria_hidden).lower() == "true":
        classes = node.get("class") or []
        return "fallback-image" in classes
    return True


def _class_and_id(node: Tag) -> str:
    classes = node.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    return f"{' '.join(classes)} {node.get('id') or ''}"


def _candidate_nodes(soup: BeautifulSoup) -> list[Tag]:
    """Paragraph-like nodes: p, pre, article, and divs directly holding a br."""
    nodes: list[Tag] = list(soup.find_all(["p", "pre", "article"]))
    seen = {id(node) for node in nodes}
    for br in soup.select("div > br"):
        parent = br.parent
        if isinstance(parent, Tag) and id(parent) not in seen:
            seen.add(id(parent))
            nodes.append(parent)
    return nodes


def is_probably_readable(
    soup: BeautifulSoup,
    min_content_length: int = 140,
    min_score: float = 20.0,
) -> bool:
    """
    Decide whether a document probably contains an article.

    Each visible, likely-content paragraph node with at least
    ``min_content_length`` characters adds ``sqrt(length - min_content_length)``
    to a score; the document is readable once the score exceeds ``min_score``.
    List-item paragraphs and nodes whose class/id look like chrome (menus,
    comments, sidebars) are ignored.

    Args:
        soup: Parsed document (not modified)
        min_content_length: Minimum node text length that counts
        min_score: Score that must be exceeded

    Returns:
        True if the document is probably readable
    """
    score = 0.0
    for node in _candidate_nodes(soup):
        if not _is_node_visible(node):
            continue

        match_string = _class_and_id(node)
        if UNLIKELY_CANDIDATES_RE.search(match_string) and not MAYBE_CANDIDATE_RE.search(match_string):
            continue

        if node.name == "p" and node.find_parent("li") is not None:
            continue

        text_length = len(node.get_text().strip())
        if text_length < min_content_length:
            continue

        score += math.sqrt(text_length - min_content_length)
        if score > min_score:
            return True

    return False
