"""
CLI Main Application - Typer app for exercising providers by hand.

Each command resolves a provider from the registry, runs one operation and
prints the result as a Rich table or as the host's JSON shape.
"""

import sys
import json
import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

import typer
from rich.table import Table

from anisource import __version__
from anisource.core.exceptions import AniSourceError
from anisource.core.models import EpisodeDetails, HostModel, MediaInfo, SearchOptions
from anisource.core.plugin_manager import ProviderRegistry
from anisource.plugins.common.utils import extract_slug
from anisource.ui import get_console, handle_error, display_warning
from anisource.cli.context import get_registry, set_config_dir


T = TypeVar("T")

# Create main Typer application
app = typer.Typer(
    name="anisource",
    help="🎌 Debugging CLI for the hanime and yhdm streaming providers",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_debug = False


def _version_callback(value: bool) -> None:
    if value:
        get_console().print(f"[title]AniSource[/title] version [success]{__version__}[/success]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version information and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory path",
        file_okay=False,
        dir_okay=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode with detailed logging",
    ),
) -> None:
    """
    🎌 AniSource - search, list episodes and resolve streams from the
    command line.
    """
    global _debug
    _debug = debug

    setup_logging(debug)
    set_config_dir(config_dir)


def setup_logging(debug: bool = False) -> None:
    """
    Set up application logging.

    Args:
        debug: Enable debug logging
    """
    level = logging.DEBUG if debug else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )
    logging.getLogger("anisource").setLevel(level)

    # Reduce noise from third-party libraries
    if not debug:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)


def _run(operation: Callable[[ProviderRegistry], Awaitable[T]], context: str) -> T:
    """Run an async operation against the registry and render failures."""

    async def runner() -> T:
        registry = get_registry()
        try:
            return await operation(registry)
        finally:
            await registry.cleanup()

    try:
        return asyncio.run(runner())
    except AniSourceError as e:
        handle_error(e, context, show_traceback=_debug)
        raise typer.Exit(1)


def _echo_json(items: List[HostModel]) -> None:
    typer.echo(json.dumps([item.to_host() for item in items], ensure_ascii=False, indent=2))


@app.command(name="providers")
def list_providers() -> None:
    """🔌 List registered providers."""
    table = Table(title="Providers", title_style="title")
    table.add_column("Name", style="info")
    table.add_column("Display name")
    table.add_column("Website", style="url")

    for name in ProviderRegistry.available():
        metadata = ProviderRegistry.provider_class(name).metadata
        table.add_row(name, metadata.name, metadata.website or "")

    get_console().print(table)


@app.command(name="search")
def search(
    provider: str = typer.Argument(..., help="Provider name"),
    query: str = typer.Argument(..., help="Search query"),
    english: Optional[str] = typer.Option(None, "--english", help="English title used for matching"),
    as_json: bool = typer.Option(False, "--json", help="Print results as host JSON"),
) -> None:
    """🔍 Search a provider."""
    opts = SearchOptions(
        query=query,
        media=MediaInfo(romaji_title=query, english_title=english),
    )

    async def operation(registry: ProviderRegistry) -> Any:
        return await registry.get(provider).search(opts)

    results = _run(operation, f"Searching {provider} for '{query}'")

    if as_json:
        _echo_json(results)
        return
    if not results:
        display_warning(f"No results for '{query}' on {provider}")
        return

    table = Table(title=f"Results for '{query}'", title_style="title")
    table.add_column("ID", style="info")
    table.add_column("Title")
    table.add_column("URL", style="url")
    for result in results:
        table.add_row(result.id, result.title, result.url)
    get_console().print(table)


@app.command(name="episodes")
def episodes(
    provider: str = typer.Argument(..., help="Provider name"),
    show_id: str = typer.Argument(..., metavar="ID", help="Show identifier from search"),
    as_json: bool = typer.Option(False, "--json", help="Print episodes as host JSON"),
) -> None:
    """📺 List the episodes of a show."""

    async def operation(registry: ProviderRegistry) -> Any:
        return await registry.get(provider).find_episodes(show_id)

    found = _run(operation, f"Listing episodes of {show_id} on {provider}")

    if as_json:
        _echo_json(found)
        return
    if not found:
        display_warning(f"No episodes found for {show_id} on {provider}")
        return

    table = Table(title=f"Episodes of {show_id}", title_style="title")
    table.add_column("#", justify="right", style="info")
    table.add_column("Title")
    table.add_column("URL", style="url")
    for episode in found:
        table.add_row(str(episode.number), episode.title or "", episode.url)
    get_console().print(table)


@app.command(name="server")
def server(
    provider: str = typer.Argument(..., help="Provider name"),
    episode_url: str = typer.Argument(..., help="Episode page URL"),
    episode_id: Optional[str] = typer.Option(None, "--id", help="Episode identifier"),
    number: int = typer.Option(1, "--number", min=1, help="Episode number"),
    server_name: Optional[str] = typer.Option(None, "--server", help="Server name from the provider settings"),
    as_json: bool = typer.Option(False, "--json", help="Print the server as host JSON"),
) -> None:
    """🎬 Resolve the video source of an episode."""
    episode = EpisodeDetails(
        id=episode_id or extract_slug(episode_url) or episode_url.rstrip('/').rsplit('/', 1)[-1],
        number=number,
        url=episode_url,
    )

    async def operation(registry: ProviderRegistry) -> Any:
        instance = registry.get(provider)
        chosen = server_name or instance.get_settings().episode_servers[0]
        return await instance.find_episode_server(episode, chosen)

    result = _run(operation, f"Resolving {episode_url} on {provider}")

    if as_json:
        _echo_json([result])
        return
    if result.is_empty:
        display_warning(f"No video source found on {result.server}")
        return

    table = Table(title=f"Server {result.server}", title_style="title")
    table.add_column("Type", style="info")
    table.add_column("Quality")
    table.add_column("URL", style="url")
    table.add_column("Subtitles", justify="right")
    for source in result.video_sources:
        table.add_row(str(source.type), source.quality, source.url, str(len(source.subtitles)))
    get_console().print(table)


def cli_main() -> None:
    """
    Main CLI entry point for the anisource command.
    """
    try:
        app()
    except KeyboardInterrupt:
        get_console().print("\n[warning]Operation cancelled by user[/warning]")
        sys.exit(130)


# Export main components
__all__ = ["app", "cli_main", "setup_logging"]
