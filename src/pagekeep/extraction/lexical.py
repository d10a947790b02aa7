"""Regex-level removal of active content before any DOM is built."""

import re
from collections.abc import Sequence

from ..models.config import STRIPPED_ATTRIBUTES, TRACKING_ATTRIBUTES

_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style[^>]*>.*?</style\s*>", re.IGNORECASE | re.DOTALL)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")


def _name_pattern(name: str) -> str:
    """Translate an attribute name with ``*`` wildcards into a regex fragment."""
    return r"[^\s=>]*".join(re.escape(part) for part in name.split("*"))


def _tracking_tag_pattern(names: Sequence[str]) -> re.Pattern[str]:
    alternatives = "|".join(_name_pattern(name) for name in names)
    return re.compile(rf"<[^>]*?(?:{alternatives})[^>]*>", re.IGNORECASE)


def _attribute_pattern(names: Sequence[str]) -> re.Pattern[str]:
    alternatives = "|".join(_name_pattern(name) for name in names)
    return re.compile(rf'(?<!\s)\s+(?:{alternatives})="[^"]*"', re.IGNORECASE)


def attribute_name_matcher(names: Sequence[str]) -> re.Pattern[str]:
    """Regex matching a whole attribute name against any of ``names``."""
    alternatives = "|".join(_name_pattern(name) for name in names) or r"(?!)"
    return re.compile(rf"^(?:{alternatives}|on.*)$", re.IGNORECASE)


class LexicalStripper:
    """
    Strips scripts, styles, comments, tracking tags and presentational
    attributes from raw HTML text.

    Each removed span is replaced by a single space and whitespace runs are
    collapsed afterwards, so removed boundaries never glue words together.
    Only double-quoted attribute values are stripped.

    Example:
        stripper = LexicalStripper()
        stripper.strip('<p class="lead">Hi</p><!-- x --><a onclick="go()">more</a>')
        # -> '<p >Hi</p> more</a>'
    """

    def __init__(
        self,
        tracking_attributes: Sequence[str] = TRACKING_ATTRIBUTES,
        stripped_attributes: Sequence[str] = STRIPPED_ATTRIBUTES,
    ) -> None:
        self._patterns: list[re.Pattern[str]] = [_SCRIPT_RE, _STYLE_RE, _COMMENT_RE]
        if tracking_attributes:
            self._patterns.append(_tracking_tag_pattern(tracking_attributes))
        if stripped_attributes:
            self._patterns.append(_attribute_pattern(stripped_attributes))

    def strip(self, html: str) -> str:
        cleaned = html
        for pattern in self._patterns:
            cleaned = pattern.sub(" ", cleaned)
        return _WHITESPACE_RE.sub(" ", cleaned).strip()


def strip_active_content(html: str) -> str:
    """Strip with the default tracking and attribute lists."""
    return LexicalStripper().strip(html)
