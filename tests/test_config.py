"""Tests for configuration models and profiles."""

import pytest
from pagekeep.models.config import (
    ALLOWED_TAGS,
    ByteSize,
    NetworkConfig,
    NormalizerConfig,
    PagekeepConfig,
    ProfileName,
)
from pagekeep.models.profiles import PROFILES, apply_profile
from pydantic import ValidationError


class TestPagekeepConfig:
    """Tests for PagekeepConfig."""

    def test_default_config(self):
        """Test creating default config."""
        config = PagekeepConfig()

        assert config.profile == ProfileName.CUSTOM
        assert config.normalizer.max_chars == 100_000
        assert config.normalizer.min_main_content_chars == 500
        assert config.normalizer.allowed_tags == ALLOWED_TAGS
        assert config.readability.enabled is True
        assert config.network.timeout == 5.0
        assert config.performance.cpu_workers == 4
        assert config.log_level == "INFO"

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            PagekeepConfig(unknown_option=True)

    def test_nested_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            PagekeepConfig(normalizer={"max_char": 10})

    def test_invalid_budget(self):
        with pytest.raises(ValidationError):
            NormalizerConfig(max_chars=0)

    def test_allowed_tags_lowercased(self):
        assert NormalizerConfig(allowed_tags=["H1", "Table"]).allowed_tags == ["h1", "table"]

    def test_byte_size_strings(self):
        """Test human-readable content size limits."""
        assert NetworkConfig(max_content_size="2mb").max_content_size == 2 * 1024 * 1024
        assert NetworkConfig(max_content_size="200kb").max_content_size == 200 * 1024
        assert NetworkConfig(max_content_size=1024).max_content_size == 1024

    def test_byte_size_invalid(self):
        with pytest.raises(ValueError):
            ByteSize._parse("lots")

    def test_yaml_roundtrip(self):
        """Test config serialization to and from YAML."""
        config = PagekeepConfig(profile=ProfileName.ARCHIVE, normalizer={"max_chars": 1234})
        loaded = PagekeepConfig.from_yaml(config.to_yaml())

        assert loaded.model_dump() == config.model_dump()

    def test_yaml_partial(self):
        yaml_str = """
profile: compact
network:
  timeout: 10
  max_content_size: 5mb
normalizer:
  content_selectors: ["#story"]
"""
        config = PagekeepConfig.from_yaml(yaml_str)

        assert config.profile == ProfileName.COMPACT
        assert config.network.timeout == 10
        assert config.network.max_content_size == 5 * 1024 * 1024
        assert config.normalizer.content_selectors == ["#story"]

    def test_empty_yaml(self):
        assert PagekeepConfig.from_yaml("").model_dump() == PagekeepConfig().model_dump()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "pagekeep.yaml"
        path.write_text("log_level: DEBUG\n")

        assert PagekeepConfig.from_yaml_file(path).log_level == "DEBUG"


class TestProfiles:
    """Tests for built-in profiles."""

    def test_every_profile_defined(self):
        assert set(PROFILES) == set(ProfileName)

    def test_custom_unchanged(self):
        config = PagekeepConfig()
        assert apply_profile(config) is config

    def test_archive_profile(self):
        """Test that the archive profile raises budgets."""
        config = apply_profile(PagekeepConfig(profile=ProfileName.ARCHIVE))

        assert config.normalizer.max_chars == 500_000
        assert config.normalizer.min_main_content_chars == 250
        assert config.network.timeout == 30.0
        assert config.network.max_content_size == 50 * 1024 * 1024

    def test_compact_profile(self):
        assert apply_profile(PagekeepConfig(profile=ProfileName.COMPACT)).normalizer.max_chars == 20_000

    def test_explicit_values_win(self):
        """Test that user values take precedence over profile values."""
        config = apply_profile(
            PagekeepConfig(
                profile=ProfileName.ARCHIVE,
                normalizer=NormalizerConfig(max_chars=1234),
            )
        )

        assert config.normalizer.max_chars == 1234
        assert config.normalizer.min_main_content_chars == 250

    def test_explicit_values_from_yaml_win(self):
        config = apply_profile(PagekeepConfig.from_yaml("profile: archive\nnetwork:\n  timeout: 3\n"))

        assert config.network.timeout == 3
        assert config.normalizer.max_chars == 500_000
