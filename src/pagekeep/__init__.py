"""
pagekeep - Capture web pages as bookmark payloads.

Usage:
    from pagekeep import ExtractionRequest, PageExtractor, PagekeepConfig

    async with PageExtractor(PagekeepConfig()) as extractor:
        content = await extractor.extract(ExtractionRequest(url="https://example.com/post"))
        print(content.to_json())
"""

__version__ = "1.0.0"

from .core.extractor import PageExtractor, extract_blocking
from .errors import ExtractionError, FetchError, MalformedInputError, PagekeepError
from .extraction import HtmlNormalizer, ReadabilityExtractor
from .models.config import (
    NetworkConfig,
    NormalizerConfig,
    PagekeepConfig,
    PerformanceConfig,
    ProfileName,
    ReadabilityConfig,
)
from .models.content import (
    ArticleRecord,
    ExtractionMethod,
    ExtractionMode,
    ExtractionRequest,
    PageContent,
    RawDocument,
)
from .models.events import EventType, ExtractionEvent

__all__ = [
    "__version__",
    # Core
    "PageExtractor",
    "extract_blocking",
    "HtmlNormalizer",
    "ReadabilityExtractor",
    # Config
    "PagekeepConfig",
    "ProfileName",
    "NetworkConfig",
    "NormalizerConfig",
    "ReadabilityConfig",
    "PerformanceConfig",
    # Content
    "ArticleRecord",
    "ExtractionMethod",
    "ExtractionMode",
    "ExtractionRequest",
    "PageContent",
    "RawDocument",
    # Events
    "EventType",
    "ExtractionEvent",
    # Errors
    "PagekeepError",
    "FetchError",
    "ExtractionError",
    "MalformedInputError",
]
