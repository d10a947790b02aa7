"""Async HTTP client that looks like a regular browser."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Optional

import aiohttp
from charset_normalizer import from_bytes as detect_encoding

from ..errors import FetchError
from ..models.config import DEFAULT_ACCEPT, DEFAULT_ACCEPT_LANGUAGE, DEFAULT_USER_AGENT
from .protocols import HttpResponse

logger = logging.getLogger(__name__)


class AsyncHttpClient:
    """
    Async HTTP client for fetching single pages.

    Features:
    - Browser-like User-Agent, Accept and Accept-Language headers
    - Content size limits to prevent memory exhaustion
    - Intelligent encoding detection
    - Timeout controls, reported as FetchError(status="timeout")

    The client never retries; retry policy belongs to the caller.

    Example:
        async with AsyncHttpClient(default_timeout=10) as client:
            response = await client.get("https://example.com")
            print(client.decode_content(response))
    """

    CHUNK_SIZE = 8192

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        accept: str = DEFAULT_ACCEPT,
        accept_language: str = DEFAULT_ACCEPT_LANGUAGE,
        max_content_size: int = 10 * 1024 * 1024,
        proxy: str | None = None,
        default_timeout: float = 5.0,
        connection_limit: int = 100,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            user_agent: User-Agent header sent with every request
            accept: Accept header
            accept_language: Accept-Language header
            max_content_size: Maximum response size in bytes
            proxy: Proxy URL (http://)
            default_timeout: Default total request timeout in seconds
            connection_limit: Size of the outbound connection pool
        """
        self._headers = {
            "User-Agent": user_agent,
            "Accept": accept,
            "Accept-Language": accept_language,
            "Upgrade-Insecure-Requests": "1",
        }
        self._max_content_size = max_content_size
        self._proxy = proxy
        self._default_timeout = default_timeout
        self._connection_limit = connection_limit

        self._session: aiohttp.ClientSession | None = None

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        connector = aiohttp.TCPConnector(
            limit=self._connection_limit,
            ttl_dns_cache=300,
        )
        self._session = aiohttp.ClientSession(
            connector=connector,
            headers=self._headers,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    def _decode_content(self, content: bytes, content_type: str) -> str:
        """
        Decode content with intelligent encoding detection.

        Fallback chain:
        1. Content-Type header charset
        2. charset-normalizer detection
        3. UTF-8 with replacement

        Args:
            content: Raw bytes content
            content_type: Content-Type header value

        Returns:
            Decoded string
        """
        encoding = None
        if content_type:
            for part in content_type.split(";"):
                part = part.strip()
                if part.lower().startswith("charset="):
                    encoding = part.split("=", 1)[1].strip().strip("\"'")
                    break

        if encoding:
            try:
                return content.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"Failed to decode with declared encoding: {encoding}")

        best_match = detect_encoding(content).best()
        if best_match is not None:
            logger.debug(f"Detected encoding: {best_match.encoding}")
            return str(best_match)

        return content.decode("utf-8", errors="replace")

    async def get(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> HttpResponse:
        """
        Perform a single HTTP GET request.

        Args:
            url: The URL to fetch
            timeout: Request timeout in seconds (uses default if None)
            headers: Optional additional headers

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            FetchError: On timeout ("timeout"), network failure ("network"),
                oversized body ("too-large") or a status outside 2xx/3xx
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        timeout_val = timeout or self._default_timeout

        try:
            async with self._session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=timeout_val),
                headers=headers,
                proxy=self._proxy,
                allow_redirects=True,
            ) as response:
                if response.status >= 400:
                    raise FetchError(response.status, response.reason)

                content_length = response.headers.get("Content-Length")
                if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
                    raise FetchError("too-large", f"Content-Length {content_length} bytes")

                content = b""
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    content += chunk
                    if len(content) > self._max_content_size:
                        raise FetchError("too-large", f">{self._max_content_size} bytes")

                return HttpResponse(
                    status_code=response.status,
                    content=content,
                    content_type=response.headers.get("Content-Type", ""),
                    headers=dict(response.headers),
                    url=str(response.url),
                )

        except asyncio.TimeoutError as e:
            logger.warning(f"Timed out after {timeout_val}s fetching {url}")
            raise FetchError("timeout", e) from e
        except aiohttp.ClientError as e:
            logger.warning(f"HTTP fetch error for {url}: {e}")
            raise FetchError("network", e) from e

    def decode_content(self, response: HttpResponse) -> str:
        """
        Decode response content to string.

        Args:
            response: HttpResponse to decode

        Returns:
            Decoded string content
        """
        return self._decode_content(response.content, response.content_type)
