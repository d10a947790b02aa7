"""Plain-text helpers shared by the extraction stages."""

import html
import re

_WHITESPACE_RE = re.compile(r"\s+")


def clean_up_text(text: str | None) -> str:
    """Unescape entities and collapse whitespace runs to single spaces."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", html.unescape(text)).strip()


def fallback_excerpt(text: str, length: int = 200) -> str:
    """First ``length`` characters of ``text``, cut back to a word boundary."""
    text = clean_up_text(text)
    if len(text) <= length:
        return text
    cut = text[:length]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut
