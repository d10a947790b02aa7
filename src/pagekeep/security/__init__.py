"""Security helpers for pagekeep."""

from .url_validator import UrlValidationResult, UrlValidator

__all__ = ["UrlValidationResult", "UrlValidator"]
