"""FetchStep - HTTP fetching pipeline step."""

import logging
from typing import Optional

from ...errors import FetchError
from ...http.protocols import HttpClient
from ...models.content import RawDocument
from ...models.events import EventType, ExtractionEvent
from ...security.url_validator import UrlValidator
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)

# Allowed content types for HTML documents
ALLOWED_CONTENT_TYPES = frozenset(
    {
        "text/html",
        "application/xhtml+xml",
        "text/xml",
        "application/xml",
    }
)


class FetchStep:
    """
    Pipeline step that fetches the page HTML server-side.

    Populates:
        ctx.html: Decoded HTML text ("" for non-HTML responses)
        ctx.status_code: HTTP status code
        ctx.content_type: Content-Type header value
        ctx.final_url: URL after redirects

    A response that is not HTML is kept with empty HTML, so the page
    degrades to a link-only capture instead of failing.

    Raises FetchError for:
        - URLs rejected by the validator ("invalid-url")
        - Network errors and timeouts
        - 4xx/5xx responses
        - Content size exceeded

    Example:
        async with AsyncHttpClient() as http_client:
            fetch_step = FetchStep(http_client)
            document = await fetch_step.fetch("https://example.com/post")
    """

    name = "fetch"

    def __init__(
        self,
        http_client: HttpClient,
        url_validator: Optional[UrlValidator] = None,
        timeout: Optional[float] = None,
        validate_content_type: bool = True,
    ) -> None:
        """
        Initialize the fetch step.

        Args:
            http_client: HTTP client implementing HttpClient protocol
            url_validator: Validator run before any I/O (http/https only if None)
            timeout: Request timeout in seconds (client default if None)
            validate_content_type: If True, treat non-HTML content as empty
        """
        self._client = http_client
        self._validator = url_validator or UrlValidator()
        self._timeout = timeout
        self._validate_content_type = validate_content_type

    def _is_valid_content_type(self, content_type: str) -> bool:
        """
        Check if content type is allowed.

        Args:
            content_type: Content-Type header value

        Returns:
            True if content type is allowed, False otherwise
        """
        if not content_type:
            return True  # Allow if not specified

        # Extract base content type (ignore charset, etc.)
        base_type = content_type.lower().split(";")[0].strip()
        return base_type in ALLOWED_CONTENT_TYPES

    async def fetch(self, url: str, emit: Optional[EventEmitter] = None) -> RawDocument:
        """
        Fetch a page and decode its HTML.

        Args:
            url: The URL to fetch
            emit: Optional callback to emit events

        Returns:
            RawDocument with the decoded HTML

        Raises:
            FetchError: If the URL is invalid or the page cannot be retrieved
        """
        if emit:
            emit(
                ExtractionEvent(
                    type=EventType.FETCH_STARTED,
                    url=url,
                    message=f"Fetching {url}",
                )
            )

        try:
            validation = self._validator.validate(url)
            if not validation.is_valid:
                raise FetchError("invalid-url", validation.rejection_reason)

            response = await self._client.get(url, timeout=self._timeout)

            if self._validate_content_type and not self._is_valid_content_type(response.content_type):
                logger.warning(f"Not an HTML document ({response.content_type}): {url}")
                html = ""
            else:
                html = self._client.decode_content(response)

        except FetchError as e:
            logger.error(f"Fetch error for {url}: {e}")

            if emit:
                emit(
                    ExtractionEvent(
                        type=EventType.FETCH_FAILED,
                        url=url,
                        error=str(e),
                        status_code=e.status if isinstance(e.status, int) else None,
                        message=f"Fetch failed: {e}",
                    )
                )

            # Re-raise to let the caller handle it
            raise

        logger.debug(f"Fetched {url}: {len(response.content)} bytes")

        if emit:
            emit(
                ExtractionEvent(
                    type=EventType.FETCH_COMPLETED,
                    url=url,
                    status_code=response.status_code,
                    bytes_downloaded=len(response.content),
                    content_type=response.content_type,
                    message=f"Fetched {len(response.content)} bytes",
                )
            )

        return RawDocument(
            url=url,
            html=html,
            status_code=response.status_code,
            content_type=response.content_type,
            final_url=response.url,
        )

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the fetch step.

        Args:
            ctx: Page context with URL to fetch
            emit: Optional callback to emit events

        Returns:
            PageContext with html, status_code, content_type populated
        """
        document = await self.fetch(ctx.url, emit)

        ctx.html = document.html
        ctx.status_code = document.status_code
        ctx.content_type = document.content_type
        ctx.final_url = document.final_url
        return ctx
