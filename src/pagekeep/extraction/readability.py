"""Article extraction built on a pluggable readability algorithm."""

import copy
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag
from dateutil import parser as dateparser
from readability import Document

from ..errors import ExtractionError
from ..models.config import ReadabilityConfig
from ..models.content import ArticleRecord
from .metadata import extract_metadata
from .protocols import Article, ReadabilityAlgorithm
from .readerable import is_probably_readable
from .text import clean_up_text, fallback_excerpt

logger = logging.getLogger(__name__)

# Shortest first paragraph accepted as an excerpt
_MIN_EXCERPT_PARAGRAPH = 40


def parse_published_time(*candidates: Optional[str]) -> Optional[datetime]:
    """
    Parse the first candidate that is a valid date.

    Naive values are taken to be UTC.

    Returns:
        Timezone-aware datetime, or None if no candidate parses
    """
    for value in candidates:
        if not value:
            continue
        try:
            parsed = dateparser.parse(value)
        except (ValueError, OverflowError):
            logger.debug(f"Unparsable published time: {value!r}")
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return None


class LxmlReadability:
    """
    Default ReadabilityAlgorithm backed by readability-lxml.

    The pre-check is the paragraph-density heuristic in
    ``is_probably_readable``; the full parse runs readability-lxml for the
    article body and reads title, excerpt, language, site name and publish
    time from Open Graph, JSON-LD and content-language metadata.
    """

    def __init__(self, config: Optional[ReadabilityConfig] = None) -> None:
        self.config = config or ReadabilityConfig()

    def probably_readable(self, soup: BeautifulSoup) -> bool:
        return is_probably_readable(
            soup,
            min_content_length=self.config.min_content_length,
            min_score=self.config.min_score,
        )

    def parse(self, soup: BeautifulSoup, url: Optional[str] = None) -> Optional[Article]:
        meta = extract_metadata(soup)

        document = Document(str(soup), url=url, retry_length=self.config.char_threshold)
        content = document.summary(html_partial=True)
        content_soup = BeautifulSoup(content, "html.parser")
        text = clean_up_text(content_soup.get_text(" "))
        if not text:
            return None

        excerpt = meta.og_description or meta.jsonld_description or meta.description
        if not excerpt:
            for paragraph in content_soup.find_all("p"):
                candidate = clean_up_text(paragraph.get_text(" "))
                if len(candidate) >= _MIN_EXCERPT_PARAGRAPH:
                    excerpt = candidate
                    break

        return Article(
            title=meta.og_title or meta.jsonld_headline or document.short_title() or None,
            content=content,
            text_content=text,
            excerpt=excerpt,
            lang=meta.content_language,
            site_name=meta.jsonld_publisher,
            published_time=meta.jsonld_published,
        )


class ReadabilityExtractor:
    """
    Produces an ArticleRecord from a parsed document.

    The algorithm's cheap ``probably_readable`` check always runs first; a
    page that fails it never reaches the full parse. The full parse works
    on a copy of the tree, so the caller's document is left untouched.

    ``extract`` returns None when the page is not readable (a normal
    outcome) and raises ExtractionError only for unexpected faults.

    Example:
        extractor = ReadabilityExtractor()
        soup = BeautifulSoup(html, "html.parser")
        article = extractor.extract(soup, url="https://example.com/post")
        if article is None:
            print("not an article")
    """

    def __init__(
        self,
        algorithm: Optional[ReadabilityAlgorithm] = None,
        config: Optional[ReadabilityConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            algorithm: Readability implementation (LxmlReadability if None)
            config: Readability thresholds, used to build the default algorithm
            clock: Returns the capture time used when no publish date parses
        """
        self._algorithm = algorithm or LxmlReadability(config)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def extract_html(self, html: str, url: Optional[str] = None) -> Optional[ArticleRecord]:
        """Parse ``html`` and extract from it."""
        return self.extract(BeautifulSoup(html, "html.parser"), url=url)

    def extract(self, soup: BeautifulSoup, url: Optional[str] = None) -> Optional[ArticleRecord]:
        """
        Extract the article from a document.

        Args:
            soup: Parsed document (not modified)
            url: Page URL

        Returns:
            ArticleRecord, or None if the page is not readable

        Raises:
            ExtractionError: If the algorithm fails unexpectedly
        """
        try:
            readable = self._algorithm.probably_readable(soup)
        except Exception as e:
            raise ExtractionError(f"Readability pre-check failed: {e}") from e

        if not readable:
            logger.info(f"Page is not readable: {url}")
            return None

        try:
            article = self._algorithm.parse(copy.copy(soup), url)
        except Exception as e:
            raise ExtractionError(f"Readability parse failed: {e}") from e

        if article is None:
            logger.info(f"Readability found no article content: {url}")
            return None

        return self._to_record(article, soup)

    def _to_record(self, article: Article, soup: BeautifulSoup) -> ArticleRecord:
        """Map algorithm output to an ArticleRecord, filling gaps from the document."""
        meta = extract_metadata(soup)

        text = clean_up_text(article.text_content)
        if not text:
            body = soup.find("body")
            text = clean_up_text((body if isinstance(body, Tag) else soup).get_text(" "))

        title = clean_up_text(article.title) or clean_up_text(meta.title)
        excerpt = clean_up_text(article.excerpt) or clean_up_text(meta.description) or fallback_excerpt(text)
        site_name = clean_up_text(article.site_name) or clean_up_text(meta.site_name) or clean_up_text(meta.title)
        published = parse_published_time(article.published_time, meta.published_time) or self._clock()

        return ArticleRecord(
            title=title,
            lang=(article.lang or meta.lang or "").strip(),
            site_name=site_name,
            published_time=published,
            excerpt=excerpt,
            text_content=text,
        )
