"""Pipeline steps for extraction operations."""

from .fetch import FetchStep
from .normalize import NormalizeStep
from .readability import ReadabilityStep

__all__ = [
    "FetchStep",
    "NormalizeStep",
    "ReadabilityStep",
]
