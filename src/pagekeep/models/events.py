"""Event types emitted while a page is being extracted."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted during an extraction."""

    # Lifecycle events
    EXTRACTION_STARTED = "extraction_started"
    EXTRACTION_COMPLETED = "extraction_completed"

    # Fetch stage
    FETCH_STARTED = "fetch_started"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"

    # Readability stage
    READABILITY_COMPLETED = "readability_completed"
    READABILITY_SKIPPED = "readability_skipped"
    READABILITY_FAILED = "readability_failed"

    # Normalizer stage
    NORMALIZE_COMPLETED = "normalize_completed"
    NORMALIZE_FAILED = "normalize_failed"


@dataclass
class ExtractionEvent:
    """
    Event emitted during an extraction.

    Example:
        def on_event(event: ExtractionEvent) -> None:
            if event.is_error:
                print(f"{event.type.value}: {event.error}")

        await extractor.extract(request, emit=on_event)
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Common fields
    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    # Typed payload fields for specific events
    status_code: Optional[int] = None
    bytes_downloaded: Optional[int] = None
    content_type: Optional[str] = None
    text_chars: Optional[int] = None
    truncated: Optional[bool] = None
    extraction_method: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type in (
            EventType.FETCH_FAILED,
            EventType.READABILITY_FAILED,
            EventType.NORMALIZE_FAILED,
        )
