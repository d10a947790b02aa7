"""Protocol definitions for pluggable extraction algorithms."""

from dataclasses import dataclass
from typing import Optional, Protocol

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class Article:
    """
    Raw output of a readability algorithm.

    Fields are None (or empty) when the algorithm could not determine them;
    the ReadabilityExtractor applies document-level fallbacks.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    text_content: Optional[str] = None
    excerpt: Optional[str] = None
    lang: Optional[str] = None
    site_name: Optional[str] = None
    published_time: Optional[str] = None


class ReadabilityAlgorithm(Protocol):
    """
    Protocol for article extraction algorithms.

    ``probably_readable`` is a cheap structural pre-check; ``parse`` is the
    full extraction and may modify the tree it is given.
    """

    def probably_readable(self, soup: BeautifulSoup) -> bool:
        """
        Decide whether the document looks like an article.

        Args:
            soup: Parsed document (not modified)

        Returns:
            True if full parsing is worthwhile
        """
        ...

    def parse(self, soup: BeautifulSoup, url: Optional[str] = None) -> Optional[Article]:
        """
        Extract the article from the document.

        Args:
            soup: Parsed document (may be modified)
            url: Page URL, for resolving relative links

        Returns:
            Article, or None if no article content was found
        """
        ...
