"""Tests for the command-line interface."""

import json

import pytest
from pagekeep.cli import build_config, build_request, create_parser, main
from pagekeep.models.config import ProfileName
from pagekeep.models.content import ExtractionMode


@pytest.fixture
def parser():
    return create_parser()


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self, parser):
        args = parser.parse_args(["https://example.com/post"])

        assert args.url == "https://example.com/post"
        assert args.mode is None
        assert args.html_file is None
        assert args.no_full_content is False

    def test_modes_exclusive(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["https://example.com", "--client", "--server-side"])

    def test_unknown_profile(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["https://example.com", "--profile", "huge"])


class TestBuildConfig:
    """Tests for config assembly from flags."""

    def test_flags(self, parser):
        args = parser.parse_args(
            ["https://example.com", "--profile", "archive", "--max-chars", "999", "--timeout", "2", "-v"]
        )
        config = build_config(args)

        assert config.profile == ProfileName.ARCHIVE
        assert config.normalizer.max_chars == 999
        assert config.network.timeout == 2.0
        assert config.log_level == "DEBUG"

    def test_flags_override_file(self, parser, tmp_path):
        path = tmp_path / "pagekeep.yaml"
        path.write_text("network:\n  timeout: 9\n  user_agent: FileAgent/1.0\n")
        args = parser.parse_args(["https://example.com", "--config", str(path), "--timeout", "3"])

        config = build_config(args)

        assert config.network.timeout == 3.0
        assert config.network.user_agent == "FileAgent/1.0"

    def test_non_mapping_file(self, parser, tmp_path):
        path = tmp_path / "pagekeep.yaml"
        path.write_text("- just\n- a list\n")
        args = parser.parse_args(["https://example.com", "--config", str(path)])

        with pytest.raises(ValueError):
            build_config(args)


class TestBuildRequest:
    """Tests for request assembly from flags."""

    def test_server_side_default(self, parser):
        request = build_request(parser.parse_args(["https://example.com", "--no-full-content"]))

        assert request.mode == ExtractionMode.SERVER_SIDE
        assert request.full_content is False

    def test_html_file_implies_client(self, parser, tmp_path):
        path = tmp_path / "page.html"
        path.write_text("<p>hello</p>", encoding="utf-8")

        request = build_request(parser.parse_args(["https://example.com", "--html-file", str(path)]))

        assert request.mode == ExtractionMode.CLIENT
        assert request.html == "<p>hello</p>"

    def test_client_without_file(self, parser):
        with pytest.raises(ValueError, match="--html-file"):
            build_request(parser.parse_args(["https://example.com", "--client"]))

    def test_server_side_with_file(self, parser):
        with pytest.raises(ValueError):
            build_request(parser.parse_args(["https://example.com", "--server-side", "--html-file", "x.html"]))


class TestMain:
    """End-to-end CLI runs without network access."""

    def test_json_on_stdout(self, tmp_path, capsys, article_html):
        path = tmp_path / "page.html"
        path.write_text(article_html, encoding="utf-8")

        exit_code = main(["https://example.com/post", "--html-file", str(path), "-q"])

        assert exit_code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["link"] == "https://example.com/post"
        assert payload["extractionMethod"] == "client-readability-html"
        assert payload["title"] == "Why Gardens Matter"

    def test_json_keeps_emoji_codes(self, tmp_path, capsys):
        """Test that :name: sequences in page text reach stdout unchanged."""
        path = tmp_path / "page.html"
        path.write_text("<p>Great :thumbs_up: :smile: post</p>", encoding="utf-8")

        exit_code = main(["https://example.com/post", "--html-file", str(path), "-q", "--no-full-content"])

        assert exit_code == 0
        payload = json.loads(capsys.readouterr().out)
        assert "Great :thumbs_up: :smile: post" in payload["htmlContent"]

    def test_output_file(self, tmp_path, link_html):
        page = tmp_path / "page.html"
        page.write_text(link_html, encoding="utf-8")
        output = tmp_path / "out.json"

        exit_code = main(["https://example.com/shop", "--html-file", str(page), "-o", str(output), "-q"])

        assert exit_code == 0
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["extractionMethod"] == "client-html"
        assert "Product 7" in payload["htmlContent"]

    def test_fetch_error_exit_code(self):
        """Test that a rejected URL exits with status 1."""
        assert main(["file:///etc/passwd", "-q"]) == 1

    def test_bad_config_exit_code(self, tmp_path):
        path = tmp_path / "pagekeep.yaml"
        path.write_text("unknown_option: true\n")

        assert main(["https://example.com", "--config", str(path), "-q"]) == 1
