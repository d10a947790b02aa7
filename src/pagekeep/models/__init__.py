"""Pagekeep configuration, content and event models."""

from .config import (
    ByteSize,
    NetworkConfig,
    NormalizerConfig,
    PagekeepConfig,
    PerformanceConfig,
    ProfileName,
    ReadabilityConfig,
)
from .content import (
    ArticleRecord,
    ExtractionMethod,
    ExtractionMode,
    ExtractionRequest,
    PageContent,
    RawDocument,
)
from .events import EventType, ExtractionEvent
from .profiles import PROFILES, apply_profile

__all__ = [
    # Config
    "ByteSize",
    "NetworkConfig",
    "NormalizerConfig",
    "PagekeepConfig",
    "PerformanceConfig",
    "ProfileName",
    "ReadabilityConfig",
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
    # Profiles
    "PROFILES",
    "apply_profile",
]
