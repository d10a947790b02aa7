"""Reduction of raw HTML to a bounded, whitelisted fragment."""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

import soupsieve
from bs4 import BeautifulSoup, CData, NavigableString, Tag
from bs4.builder import ParserRejectedMarkup
from soupsieve import SelectorSyntaxError

from ..errors import MalformedInputError
from ..models.config import NormalizerConfig
from .lexical import LexicalStripper, attribute_name_matcher

logger = logging.getLogger(__name__)

# Removed with their content before whitelisting, whatever the noise lists say
ACTIVE_TAGS = ("script", "style", "noscript", "template", "iframe", "object", "embed")

# Unwrapped without a separating space
INLINE_TAGS = frozenset(
    {
        "a",
        "abbr",
        "b",
        "bdi",
        "bdo",
        "cite",
        "code",
        "data",
        "dfn",
        "em",
        "font",
        "i",
        "kbd",
        "mark",
        "q",
        "s",
        "samp",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "time",
        "u",
        "var",
    }
)

_HIDDEN_STYLE_RE = re.compile(r"display\s*:\s*none|visibility\s*:\s*hidden", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class NormalizationResult:
    """
    Outcome of one normalization.

    Attributes:
        html: Standalone cleaned HTML document
        text_length: Rendered (trimmed) text length of the body
        truncated: Whether trailing nodes were dropped to fit the budget
        main_content_found: Whether a main content element was isolated
    """

    html: str
    text_length: int
    truncated: bool
    main_content_found: bool


def _text_length(node: object) -> int:
    """Length of the text a node contributes to ``get_text()``."""
    if isinstance(node, Tag):
        return len(node.get_text())
    if type(node) in (NavigableString, CData):
        return len(node)  # type: ignore[arg-type]
    return 0


def _is_hidden(tag: Tag) -> bool:
    if tag.has_attr("hidden"):
        return True
    if str(tag.get("aria-hidden", "")).lower() == "true":
        return True
    style = tag.get("style")
    return bool(style) and _HIDDEN_STYLE_RE.search(str(style)) is not None


def _trim_trailing(node: Tag, budget: int) -> None:
    """
    Drop trailing children of ``node`` until its text fits ``budget``.

    A trailing element is descended into when dropping it whole would
    undershoot the budget, so the kept text is always a document-order
    prefix and no text node is cut in half.
    """
    total = _text_length(node)
    while node.contents and total > budget:
        last = node.contents[-1]
        size = _text_length(last)
        others = total - size
        if isinstance(last, Tag) and last.contents and others < budget:
            _trim_trailing(last, budget - others)
            total = others + _text_length(last)
            continue
        last.extract()
        total = others


class HtmlNormalizer:
    """
    Produces cleaned HTML in three order-dependent stages.

    1. Lexical strip: regex removal of scripts, styles, comments, tracking
       tags and presentational attributes (see LexicalStripper).
    2. Main-content isolation: the largest element matching any content
       selector is kept if its text is longer than
       ``min_main_content_chars``; targeted noise is removed from it.
       Otherwise the whole page is kept and stripped of a longer,
       conservative noise list.
    3. Whitelist and truncation: hidden and active elements are dropped,
       non-whitelisted elements are unwrapped in place, and trailing nodes
       are removed until the rendered text fits ``max_chars``.

    Hidden-element detection reads inline ``style`` only where it survived
    stage 1, i.e. single-quoted or unquoted values; double-quoted styles
    are already gone, and elements hidden that way are kept.

    Example:
        normalizer = HtmlNormalizer(NormalizerConfig(max_chars=50_000))
        cleaned = normalizer.normalize(page_html)
    """

    def __init__(self, config: Optional[NormalizerConfig] = None) -> None:
        """
        Initialize the normalizer.

        Args:
            config: Normalizer policy (defaults if None)

        Raises:
            ValueError: If a configured selector is not valid CSS
        """
        self.config = config or NormalizerConfig()
        self._stripper = LexicalStripper(
            tracking_attributes=self.config.tracking_attributes,
            stripped_attributes=self.config.stripped_attributes,
        )
        self._allowed_tags = frozenset(self.config.allowed_tags)
        self._dropped_attributes = attribute_name_matcher(
            [*self.config.tracking_attributes, *self.config.stripped_attributes]
        )
        try:
            self._content_selectors = [(s, soupsieve.compile(s)) for s in self.config.content_selectors]
            self._main_noise = [soupsieve.compile(s) for s in self.config.main_noise_selectors]
            self._page_noise = [soupsieve.compile(s) for s in self.config.page_noise_selectors]
        except SelectorSyntaxError as e:
            raise ValueError(f"Invalid selector in normalizer config: {e}") from e

    def _decode(self, html: Union[str, bytes]) -> str:
        """Accept text or bytes, sniffing a meta charset for bytes."""
        if isinstance(html, str):
            return html
        if isinstance(html, bytes):
            head = html[:2048].decode("latin-1", errors="ignore")
            charset_match = re.search(r'charset=["\']?([^"\'\s>;]+)', head, re.IGNORECASE)
            encoding = charset_match.group(1).strip() if charset_match else "utf-8"
            try:
                return html.decode(encoding, errors="replace")
            except LookupError:
                return html.decode("utf-8", errors="replace")
        raise MalformedInputError(f"Expected HTML text, got {type(html).__name__}")

    def _parse(self, html: str) -> BeautifulSoup:
        try:
            return BeautifulSoup(html, "html.parser")
        except (ParserRejectedMarkup, AssertionError) as e:
            raise MalformedInputError(f"Could not parse HTML: {e}") from e

    def _remove_noise(self, root: Tag, selectors: list) -> int:
        removed = 0
        for selector in selectors:
            for el in selector.select(root):
                if el.decomposed:
                    continue
                el.decompose()
                removed += 1
        return removed

    def find_main_content(self, soup: BeautifulSoup) -> Optional[Tag]:
        """
        Pick the main content element.

        Every match of every content selector is ranked by trimmed text
        length; the first element with the greatest length wins. It is
        accepted if that length exceeds ``min_main_content_chars``, or if
        the element holds all of the document's text. The second case is
        what a truncated cleaned document looks like, so re-normalizing it
        keeps the noise policy of the first pass.

        Args:
            soup: Parsed (lexically stripped) document

        Returns:
            The main content element, or None to use the whole document
        """
        best: Optional[Tag] = None
        best_length = 0
        best_selector = None
        for name, selector in self._content_selectors:
            for element in selector.select(soup):
                length = len(element.get_text().strip())
                if length > best_length:
                    best, best_length, best_selector = element, length, name

        if best is not None and best_length > self.config.min_main_content_chars:
            logger.debug(f"Main content matched {best_selector!r} with {best_length} chars")
            return best

        if best is not None and best_length == len(soup.get_text().strip()):
            logger.debug(f"Main content matched {best_selector!r} holding the whole document")
            return best

        logger.debug(f"No main content above {self.config.min_main_content_chars} chars (best: {best_length})")
        return None

    def isolate(self, soup: BeautifulSoup) -> tuple[BeautifulSoup, bool]:
        """
        Run the main-content isolation stage.

        Returns:
            (working document, whether main content was found)
        """
        main_content = self.find_main_content(soup)
        if main_content is not None:
            working = self._parse(str(main_content))
            removed = self._remove_noise(working, self._main_noise)
            logger.debug(f"Removed {removed} noise elements from main content")
            return working, True

        removed = self._remove_noise(soup, self._page_noise)
        logger.debug(f"Removed {removed} noise elements from whole page")
        return soup, False

    def apply_whitelist(self, container: Tag) -> None:
        """
        Drop hidden and active elements, then unwrap every tag not in the whitelist.

        Kept tags lose event handlers and any attribute the lexical stage
        would have stripped had it been double-quoted.
        """
        for el in container.find_all(ACTIVE_TAGS):
            if not el.decomposed:
                el.decompose()

        for el in container.find_all(True):
            if not el.decomposed and _is_hidden(el):
                el.decompose()

        for node in container.find_all(string=lambda s: type(s) not in (NavigableString, CData)):
            node.extract()

        for el in container.find_all(True):
            if el.name in self._allowed_tags:
                for attr in [a for a in el.attrs if self._dropped_attributes.match(a)]:
                    del el[attr]
                continue
            if el.name not in INLINE_TAGS:
                el.insert_after(" ")
            el.unwrap()

    def truncate(self, body: Tag, max_chars: int) -> bool:
        """
        Remove trailing nodes until the body's trimmed text fits ``max_chars``.

        Returns:
            True if anything was removed
        """
        if len(body.get_text().strip()) <= max_chars:
            return False
        _trim_trailing(body, max_chars)
        return True

    def normalize_document(self, html: Union[str, bytes], max_chars: Optional[int] = None) -> NormalizationResult:
        """
        Normalize HTML and report what happened.

        Args:
            html: Raw HTML text (or bytes)
            max_chars: Rendered-text budget (config default if None)

        Returns:
            NormalizationResult with the cleaned document

        Raises:
            MalformedInputError: If the input is not parseable HTML
        """
        budget = self.config.max_chars if max_chars is None else max_chars
        text = self._decode(html)

        stripped = self._stripper.strip(text)
        if not stripped:
            raise MalformedInputError("Document is empty after stripping active content")

        soup = self._parse(stripped)
        working, main_found = self.isolate(soup)

        body_element = working.find("body")
        if isinstance(body_element, Tag):
            container: Tag = body_element
        else:
            # Body start tag was stripped (e.g. <body onload=...>); head must not leak into it
            container = working
            head = working.find("head")
            if isinstance(head, Tag):
                head.decompose()
        self.apply_whitelist(container)

        output = BeautifulSoup("", "html.parser")
        body = output.new_tag("body")
        output.append(body)
        for node in list(container.contents):
            body.append(node.extract())

        truncated = self.truncate(body, budget)
        inner = _WHITESPACE_RE.sub(" ", body.decode_contents()).strip()
        cleaned = f"<!DOCTYPE html><html><head></head><body>{inner}</body></html>"
        if truncated:
            cleaned += self.config.truncation_marker

        text_length = len(body.get_text().strip())
        logger.debug(
            f"Normalized {len(text)} chars of HTML to {len(cleaned)} "
            f"({text_length} chars of text, truncated={truncated})"
        )
        return NormalizationResult(
            html=cleaned,
            text_length=text_length,
            truncated=truncated,
            main_content_found=main_found,
        )

    def normalize(self, html: Union[str, bytes], max_chars: Optional[int] = None) -> str:
        """
        Normalize HTML to a cleaned standalone document.

        Args:
            html: Raw HTML text (or bytes)
            max_chars: Rendered-text budget (config default if None)

        Returns:
            Cleaned HTML string

        Raises:
            MalformedInputError: If the input is not parseable HTML
        """
        return self.normalize_document(html, max_chars).html
