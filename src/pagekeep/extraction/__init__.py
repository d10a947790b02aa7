"""Article extraction and HTML normalization."""

from .lexical import LexicalStripper, strip_active_content
from .metadata import DocumentMetadata, extract_metadata
from .normalizer import HtmlNormalizer, NormalizationResult
from .protocols import Article, ReadabilityAlgorithm
from .readability import LxmlReadability, ReadabilityExtractor, parse_published_time
from .readerable import is_probably_readable
from .text import clean_up_text, fallback_excerpt

__all__ = [
    "Article",
    "DocumentMetadata",
    "HtmlNormalizer",
    "LexicalStripper",
    "LxmlReadability",
    "NormalizationResult",
    "ReadabilityAlgorithm",
    "ReadabilityExtractor",
    "clean_up_text",
    "extract_metadata",
    "fallback_excerpt",
    "is_probably_readable",
    "parse_published_time",
    "strip_active_content",
]
