"""URL validation applied before any outbound request."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from urllib.parse import urlparse


@dataclass
class UrlValidationResult:
    """Result of URL validation."""

    is_valid: bool
    rejection_reason: str | None = None

    @staticmethod
    def valid() -> UrlValidationResult:
        """Create a valid result."""
        return UrlValidationResult(is_valid=True)

    @staticmethod
    def invalid(reason: str) -> UrlValidationResult:
        """Create an invalid result with reason."""
        return UrlValidationResult(is_valid=False, rejection_reason=reason)


class UrlValidator:
    """
    Validates page URLs before they are fetched.

    Only http(s) URLs with a host and at most MAX_URL_LENGTH characters
    are accepted. Server deployments can also block private, loopback and
    link-local addresses to avoid being used as an internal proxy.

    Example:
        validator = UrlValidator()
        result = validator.validate("ftp://example.com/file")
        if not result.is_valid:
            print(f"Rejected: {result.rejection_reason}")
    """

    DEFAULT_ALLOWED_SCHEMES = frozenset({"http", "https"})
    MAX_URL_LENGTH = 2048
    LOCALHOST_NAMES = {"localhost", "localhost.localdomain"}

    def __init__(
        self,
        allowed_schemes: set[str] | frozenset[str] | None = None,
        block_private_ips: bool = False,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the URL validator.

        Args:
            allowed_schemes: Set of allowed URL schemes (default: http, https)
            block_private_ips: Whether to block private/internal hosts
            logger: Optional logger for validation messages
        """
        self.allowed_schemes = allowed_schemes or self.DEFAULT_ALLOWED_SCHEMES
        self.block_private_ips = block_private_ips
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, url: str) -> UrlValidationResult:
        """
        Validate a URL.

        Args:
            url: The URL to validate

        Returns:
            UrlValidationResult with is_valid and optional rejection_reason
        """
        if not url:
            return UrlValidationResult.invalid("Empty URL")
        if len(url) > self.MAX_URL_LENGTH:
            return UrlValidationResult.invalid(f"URL longer than {self.MAX_URL_LENGTH} characters")

        try:
            parsed = urlparse(url)
            hostname = parsed.hostname
        except ValueError:
            return UrlValidationResult.invalid("Invalid URL format")

        if parsed.scheme.lower() not in self.allowed_schemes:
            return UrlValidationResult.invalid(f"Scheme '{parsed.scheme}' not allowed")

        if not hostname:
            return UrlValidationResult.invalid("URL has no host")

        if self.block_private_ips:
            if hostname.lower() in self.LOCALHOST_NAMES:
                return UrlValidationResult.invalid("Localhost URLs not allowed")
            ip_result = self._check_ip_address(hostname)
            if ip_result is not None:
                return ip_result

        return UrlValidationResult.valid()

    def _check_ip_address(self, hostname: str) -> UrlValidationResult | None:
        """Return a rejection if hostname is a non-public IP literal."""
        try:
            ip = ipaddress.ip_address(hostname)
        except ValueError:
            # A domain name, not an IP literal
            return None

        if ip.is_private:
            return UrlValidationResult.invalid(f"Private IP address '{hostname}' not allowed")
        if ip.is_loopback:
            return UrlValidationResult.invalid(f"Loopback IP address '{hostname}' not allowed")
        if ip.is_link_local:
            return UrlValidationResult.invalid(f"Link-local IP address '{hostname}' not allowed")
        if ip.is_reserved:
            return UrlValidationResult.invalid(f"Reserved IP address '{hostname}' not allowed")
        return None

    def is_valid(self, url: str) -> bool:
        """Quick check if URL is valid."""
        return self.validate(url).is_valid
