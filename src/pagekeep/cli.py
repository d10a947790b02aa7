"""Command-line interface for pagekeep."""

import argparse
import asyncio
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .core.extractor import PageExtractor
from .errors import FetchError
from .logging_config import setup_logging
from .models.config import PagekeepConfig, ProfileName
from .models.content import ExtractionMode, ExtractionRequest
from .models.events import EventType, ExtractionEvent


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="pagekeep",
        description="Capture a web page as a bookmark payload (JSON on stdout)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch and extract a page
  pagekeep https://example.com/post

  # Clean HTML the browser already loaded
  pagekeep https://example.com/post --html-file page.html

  # Read HTML from stdin, skip article extraction
  curl -s https://example.com | pagekeep https://example.com --html-file - --no-full-content

  # Larger budget for archiving
  pagekeep https://example.com/post --profile archive
        """,
    )

    parser.add_argument(
        "url",
        help="Page URL (the bookmark link)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Profile / config
    parser.add_argument(
        "--profile",
        "-p",
        choices=[p.value for p in ProfileName],
        default=None,
        help="Preset profile (default: custom)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML config file; command-line flags take precedence",
    )

    # Source
    source_group = parser.add_argument_group("source")
    mode = source_group.add_mutually_exclusive_group()
    mode.add_argument(
        "--server-side",
        dest="mode",
        action="store_const",
        const=ExtractionMode.SERVER_SIDE,
        help="Fetch the URL (default without --html-file)",
    )
    mode.add_argument(
        "--client",
        dest="mode",
        action="store_const",
        const=ExtractionMode.CLIENT,
        help="Use HTML supplied with --html-file (default with --html-file)",
    )
    source_group.add_argument(
        "--html-file",
        type=str,
        default=None,
        metavar="FILE",
        help="Read page HTML from FILE ('-' for stdin)",
    )

    # Extraction
    extraction_group = parser.add_argument_group("extraction")
    extraction_group.add_argument(
        "--max-chars",
        type=int,
        default=None,
        metavar="N",
        help="Rendered-text budget for cleaned HTML (default: 100000)",
    )
    extraction_group.add_argument(
        "--no-full-content",
        action="store_true",
        help="Skip article extraction, keep cleaned HTML only",
    )

    # Network settings
    network_group = parser.add_argument_group("network settings")
    network_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Request timeout (default: 5)",
    )
    network_group.add_argument(
        "--proxy",
        type=str,
        metavar="URL",
        help="Proxy URL",
    )
    network_group.add_argument(
        "--user-agent",
        type=str,
        help="Custom User-Agent string",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        metavar="FILE",
        help="Write JSON to FILE instead of stdout",
    )
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress status output",
    )

    return parser


def _merge_section(config_data: dict[str, Any], section: str, values: dict[str, Any]) -> None:
    if values:
        config_data.setdefault(section, {}).update(values)


def build_config(args: argparse.Namespace) -> PagekeepConfig:
    """
    Build the configuration from an optional YAML file and flags.

    Raises:
        ValidationError: If the resulting config is invalid
        OSError: If the config file cannot be read
        yaml.YAMLError: If the config file is not valid YAML
    """
    config_data: dict[str, Any] = {}
    if args.config:
        config_data = yaml.safe_load(args.config.read_text()) or {}
        if not isinstance(config_data, dict):
            raise ValueError(f"Config file must contain a mapping: {args.config}")

    if args.profile:
        config_data["profile"] = args.profile

    if args.max_chars is not None:
        _merge_section(config_data, "normalizer", {"max_chars": args.max_chars})

    network_kwargs: dict[str, Any] = {}
    if args.timeout is not None:
        network_kwargs["timeout"] = args.timeout
    if args.proxy:
        network_kwargs["proxy"] = args.proxy
    if args.user_agent:
        network_kwargs["user_agent"] = args.user_agent
    _merge_section(config_data, "network", network_kwargs)

    # Log level
    if args.verbose:
        config_data["log_level"] = "DEBUG"
    elif args.quiet:
        config_data["log_level"] = "ERROR"

    return PagekeepConfig.model_validate(config_data)


def build_request(args: argparse.Namespace) -> ExtractionRequest:
    """
    Build the extraction request from flags.

    Raises:
        ValueError: If the source flags contradict each other
        OSError: If the HTML file cannot be read
    """
    mode = args.mode
    if mode is None:
        mode = ExtractionMode.CLIENT if args.html_file else ExtractionMode.SERVER_SIDE

    if mode == ExtractionMode.SERVER_SIDE:
        if args.html_file:
            raise ValueError("--html-file cannot be combined with --server-side")
        return ExtractionRequest(url=args.url, full_content=not args.no_full_content)

    if not args.html_file:
        raise ValueError("--client requires --html-file")
    if args.html_file == "-":
        html = sys.stdin.read()
    else:
        html = Path(args.html_file).read_text(encoding="utf-8", errors="replace")
    return ExtractionRequest.for_html(args.url, html, full_content=not args.no_full_content)


def run_extractor(args: argparse.Namespace) -> int:
    """Run one extraction with given arguments."""
    console = Console(stderr=True)

    try:
        config = build_config(args)
    except (ValidationError, ValueError, OSError, yaml.YAMLError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    try:
        request = build_request(args)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    setup_logging(config.log_level, str(config.log_file) if config.log_file else None)

    def on_event(event: ExtractionEvent) -> None:
        if args.quiet:
            return
        if event.is_error and event.type != EventType.FETCH_FAILED:
            console.print(f"[yellow]Degraded:[/yellow] {event.type.value} - {event.error}")
        elif args.verbose and event.message:
            console.print(f"[dim]{event.type.value}:[/dim] {event.message}")

    async def run() -> int:
        if not args.quiet:
            console.print(f"[bold blue]pagekeep[/bold blue] v{__version__}")
            console.print(f"Profile: {config.profile.value}")
            console.print(f"Target: {request.url} ({request.mode.value})")

        try:
            async with PageExtractor(config) as extractor:
                status = nullcontext() if args.quiet else console.status("[cyan]Extracting...", spinner="dots")
                with status:
                    content = await extractor.extract(request, emit=on_event)
        except FetchError as e:
            console.print(f"[red]Fetch failed:[/red] {e}")
            return 1
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            if args.verbose:
                console.print_exception()
            return 1

        payload = content.to_json(indent=2)
        if args.output:
            args.output.write_text(payload + "\n", encoding="utf-8")
        else:
            Console(soft_wrap=True, highlight=False, emoji=False).print(payload, markup=False)

        if not args.quiet:
            console.print(
                f"[green]Captured[/green] {content.extraction_method.value} "
                f"({content.capture_quality})"
            )
        return 0

    return asyncio.run(run())


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_extractor(args)


if __name__ == "__main__":
    sys.exit(main())
