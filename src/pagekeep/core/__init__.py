"""Core extraction API."""

from .extractor import PageExtractor, extract_blocking

__all__ = ["PageExtractor", "extract_blocking"]
