"""
urldedupe CLI - Command Line Interface

Entry point for deduplicating URL lists, showing version information and
checking for updates. Diagnostics go to stderr; stdout carries only URLs.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from urldedupe import __version__
from urldedupe.core.config import build_config, find_default_config, load_config_file
from urldedupe.core.constants import PROJECT_URL, UPDATE_TIMEOUT, VERSION_URL
from urldedupe.core.exceptions import ConfigError, DedupeIOError, UpdateCheckError
from urldedupe.engine.deduper import StreamingDeduper, open_input, open_output


# Create CLI app
app = typer.Typer(
    name="urldedupe",
    help="urldedupe - Remove duplicate and similar URLs from large lists",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for diagnostics, kept off stdout
console = Console(stderr=True)

EXIT_IO_ERROR = 1
EXIT_CONFIG_ERROR = 2


def setup_logging(verbose: bool) -> None:
    """Route log records to the stderr console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def show_banner() -> None:
    banner = Text()
    banner.append("urldedupe", style="bold white")
    banner.append(f" v{__version__}\n", style="bold cyan")
    banner.append("Collapse URLs that point at the same resource", style="white")
    console.print(Panel.fit(banner, border_style="cyan"))


# ============================================================================
# Main Commands
# ============================================================================

@app.command()
def run(
    urls: Optional[Path] = typer.Option(
        None,
        "--urls",
        "-u",
        help="File containing URLs (reads stdin if omitted or '-')",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (writes stdout if omitted or '-')",
    ),
    query_strings_only: Optional[bool] = typer.Option(
        None,
        "--query-strings-only/--no-query-strings-only",
        "-qs",
        help="Only include URLs that have query parameters",
    ),
    filter_extensions: Optional[str] = typer.Option(
        None,
        "--filter-extensions",
        "-fe",
        help="Exclude URLs whose path ends with these extensions (csv)",
    ),
    match_extensions: Optional[str] = typer.Option(
        None,
        "--match-extensions",
        "-me",
        help="Only include URLs whose path ends with these extensions (csv); overrides --filter-extensions",
    ),
    regex_normalize: Optional[bool] = typer.Option(
        None,
        "--regex-normalize/--no-regex-normalize",
        "-r",
        help="Treat GUIDs and integers in paths as interchangeable",
    ),
    lang_country_normalize: Optional[bool] = typer.Option(
        None,
        "--lang-country-normalize/--no-lang-country-normalize",
        "-l",
        help="Treat the first language/region path segment as interchangeable",
    ),
    language_codes: Optional[str] = typer.Option(
        None,
        "--language-codes",
        help="Language/region codes to normalize (csv); replaces the built-in set",
    ),
    mode: Optional[str] = typer.Option(
        None,
        "--mode",
        "-m",
        help="Enable presets (csv): r=regex, s=similar, qs=query strings, ne=no static extensions, l=language",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file (flags take precedence)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
) -> None:
    """
    Deduplicate a list of URLs.

    Writes the first spelling of every distinct URL in input order.
    """
    setup_logging(verbose)
    logger = logging.getLogger("urldedupe")

    try:
        config_path = config or find_default_config()
        file_values = load_config_file(config_path) if config_path else {}
        if config_path:
            logger.debug(f"Loaded config from {config_path}")

        dedupe_config = build_config(
            file_values,
            query_string_only=query_strings_only,
            filter_extensions=filter_extensions,
            match_extensions=match_extensions,
            regex_normalize=regex_normalize,
            lang_country_normalize=lang_country_normalize,
            language_codes=language_codes,
            modes=mode,
        )
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    logger.debug(f"Using {dedupe_config}")

    input_path = urls or file_values.get("input")
    output_path = output or file_values.get("output")

    try:
        with open_input(input_path) as source, open_output(output_path) as sink:
            stats = StreamingDeduper(dedupe_config).run(source, sink)
    except DedupeIOError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_IO_ERROR)

    logger.info(f"Wrote {stats.emitted} of {stats.read} lines")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold cyan]urldedupe[/bold cyan] version [yellow]{__version__}[/yellow]")


@app.command()
def banner() -> None:
    """Show the urldedupe banner."""
    show_banner()


@app.command()
def update(
    url: str = typer.Option(
        VERSION_URL,
        "--url",
        help="Location of the published VERSION file",
    ),
    timeout: float = typer.Option(
        UPDATE_TIMEOUT,
        "--timeout",
        "-t",
        help="Request timeout in seconds",
    ),
) -> None:
    """Check for a newer release."""
    from urldedupe.core.updates import check_for_updates

    try:
        status = asyncio.run(check_for_updates(__version__, url, timeout=timeout))
    except UpdateCheckError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    if status.update_available:
        console.print(
            f"[yellow]A new version is available:[/yellow] {status.latest} "
            f"(current: {status.current})"
        )
        console.print(f"Update from: {PROJECT_URL}")
    else:
        console.print(f"[green]You are using the latest version:[/green] {status.current}")


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
