"""Pydantic configuration models for pagekeep."""

from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

# Candidate selectors for the main content region, evaluated in order
CONTENT_SELECTORS = [
    "main",
    "article",
    ".post-content",
    ".entry-content",
    ".content",
    '[role="main"]',
    ".post",
    ".hrecipe",
    '[itemtype*="Recipe"]',
]

# Noise removed from inside an isolated main content element
MAIN_NOISE_SELECTORS = [
    "script",
    "style",
    "noscript",
    ".advertisement",
    ".ads",
    ".ad-container",
    ".social-share",
    ".share-buttons",
    '[aria-hidden="true"]',
]

# Noise removed from the whole page when no main content element qualifies
PAGE_NOISE_SELECTORS = [
    "script",
    "style",
    "noscript",
    "iframe",
    "embed",
    "object",
    "nav",
    "header",
    "footer",
    '[role="navigation"]',
    '[role="banner"]',
    '[role="contentinfo"]',
    '[aria-hidden="true"]',
    ".advertisement",
    ".ads",
    ".ad-container",
    ".sidebar-ads",
    ".social-share",
    ".share-buttons",
    ".social-media",
    ".cookie-notice",
    ".newsletter-signup",
]

# Tags kept by the whitelist stage; everything else is unwrapped
ALLOWED_TAGS = [
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "title",
    "meta",
    "header",
    "nav",
    "main",
    "article",
    "section",
    "aside",
    "footer",
    "table",
    "tr",
    "td",
    "th",
    "thead",
    "tbody",
    "tfoot",
    "caption",
    "colgroup",
    "col",
    "ul",
    "ol",
    "li",
    "dl",
    "dd",
    "dt",
]

# Attributes whose presence drops the whole opening tag ("*" is a wildcard)
TRACKING_ATTRIBUTES = ["data-track*", "data-analytics*", "onclick", "onload", "onerror"]

# Presentational and tracking attributes stripped lexically ("*" is a wildcard)
STRIPPED_ATTRIBUTES = [
    "class",
    "id",
    "style",
    "data-*",
    "onclick",
    "onload",
    "onerror",
    "width",
    "height",
    "align",
    "bgcolor",
    "border",
    "cellpadding",
    "cellspacing",
    "valign",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.9"


class ProfileName(str, Enum):
    """Built-in configuration profiles."""

    BOOKMARK = "bookmark"
    ARCHIVE = "archive"
    COMPACT = "compact"
    CUSTOM = "custom"


class ByteSize(int):
    """
    Custom type that parses human-readable byte sizes.

    Accepts:
        - Integers (bytes)
        - Strings like '200kb', '1mb', '5gb'

    Examples:
        >>> ByteSize._parse('200kb')
        204800
        >>> ByteSize._parse('1mb')
        1048576
        >>> ByteSize._parse(1024)
        1024
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> Any:
        from pydantic_core import core_schema

        return core_schema.no_info_plain_validator_function(cls._parse)

    @classmethod
    def _parse(cls, v: Any) -> int:
        if isinstance(v, int):
            return v
        if isinstance(v, str):
            v = v.lower().strip()
            # Order matters: check longer suffixes first
            units = [("gb", 1024**3), ("mb", 1024**2), ("kb", 1024), ("b", 1)]
            for unit, mult in units:
                if v.endswith(unit):
                    num_str = v[: -len(unit)].strip()
                    try:
                        return int(float(num_str) * mult)
                    except ValueError as err:
                        raise ValueError(f"Invalid number in byte size: {v}") from err
            try:
                return int(v)
            except ValueError:
                pass
        raise ValueError(f"Invalid byte size: {v}. Use format like '200kb', '1mb', or integer bytes.")


class NetworkConfig(BaseModel):
    """Configuration for the server-side fetcher."""

    user_agent: str = Field(DEFAULT_USER_AGENT, description="Browser-like User-Agent header")
    accept: str = Field(DEFAULT_ACCEPT, description="Accept header")
    accept_language: str = Field(DEFAULT_ACCEPT_LANGUAGE, description="Accept-Language header")
    timeout: float = Field(5.0, gt=0, description="Total request timeout in seconds")
    max_content_size: ByteSize = Field(
        ByteSize(10 * 1024 * 1024),
        description="Maximum response size (e.g., '10mb')",
    )
    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")
    block_private_ips: bool = Field(
        False,
        description="Reject URLs pointing at private, loopback or link-local addresses",
    )

    model_config = {"extra": "forbid"}


class NormalizerConfig(BaseModel):
    """Policy for the HTML normalizer."""

    max_chars: int = Field(100_000, ge=1, description="Rendered-text budget for cleaned HTML")
    min_main_content_chars: int = Field(
        500,
        ge=0,
        description="A main content candidate must have more text than this",
    )
    content_selectors: list[str] = Field(default_factory=lambda: list(CONTENT_SELECTORS))
    main_noise_selectors: list[str] = Field(default_factory=lambda: list(MAIN_NOISE_SELECTORS))
    page_noise_selectors: list[str] = Field(default_factory=lambda: list(PAGE_NOISE_SELECTORS))
    allowed_tags: list[str] = Field(default_factory=lambda: list(ALLOWED_TAGS))
    tracking_attributes: list[str] = Field(default_factory=lambda: list(TRACKING_ATTRIBUTES))
    stripped_attributes: list[str] = Field(default_factory=lambda: list(STRIPPED_ATTRIBUTES))
    truncation_marker: str = Field("<!-- ...(truncated) -->", description="Appended when output is cut")

    model_config = {"extra": "forbid"}

    @field_validator("allowed_tags")
    @classmethod
    def _lowercase_tags(cls, v: list[str]) -> list[str]:
        return [tag.lower() for tag in v]


class ReadabilityConfig(BaseModel):
    """Thresholds for the readability extractor."""

    enabled: bool = Field(True, description="Attempt article extraction at all")
    min_content_length: int = Field(
        140,
        ge=0,
        description="Minimum text length of a node to count towards the readable score",
    )
    min_score: float = Field(20.0, ge=0, description="Score a page must exceed to be probably readable")
    char_threshold: int = Field(
        500,
        ge=0,
        description="Minimum article length passed to the readability algorithm",
    )

    model_config = {"extra": "forbid"}


class PerformanceConfig(BaseModel):
    """Configuration for performance tuning."""

    cpu_workers: int = Field(
        4,
        ge=1,
        description="Thread pool workers for CPU-bound parsing",
    )

    model_config = {"extra": "forbid"}


class PagekeepConfig(BaseModel):
    """
    Root configuration model for pagekeep.

    Example:
        config = PagekeepConfig(
            profile=ProfileName.ARCHIVE,
            normalizer=NormalizerConfig(max_chars=250_000),
        )

    YAML format:
        profile: bookmark
        network:
          timeout: 10
        normalizer:
          max_chars: 50000
    """

    profile: ProfileName = Field(
        ProfileName.CUSTOM,
        description="Built-in profile to apply (bookmark, archive, compact, custom)",
    )

    # Nested configuration sections
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    readability: ReadabilityConfig = Field(default_factory=ReadabilityConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "PagekeepConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "PagekeepConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
