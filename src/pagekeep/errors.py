"""Exceptions raised by the extraction pipeline."""

from __future__ import annotations

from typing import Union

FetchStatus = Union[int, str]


class PagekeepError(Exception):
    """Base exception for pagekeep errors."""


class FetchError(PagekeepError):
    """
    Raised when a page cannot be retrieved.

    Attributes:
        status: HTTP status code, or one of "timeout", "network",
            "invalid-url", "too-large"
        cause: Underlying exception, if any
    """

    def __init__(self, status: FetchStatus, cause: BaseException | str | None = None) -> None:
        self.status = status
        self.cause = cause
        message = f"Fetch failed ({status})"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)

    @property
    def is_timeout(self) -> bool:
        return self.status == "timeout"


class ExtractionError(PagekeepError):
    """Raised on an unexpected fault inside article extraction."""


class MalformedInputError(PagekeepError):
    """Raised when input cannot be parsed as an HTML document."""
