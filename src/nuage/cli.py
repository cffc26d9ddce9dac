"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
from rich import print
from rich.markup import escape

from .appctx import AppContext
from .errors import CatalogError, FetchError, NuageError, SettingsError
from .gui.factories.viewmodel_factory import ViewModelFactory
from .gui.navigation import NavigationDetail
from .gui.ui.rows import Row
from .gui.utils.console_logger import ensure_console_logger
from .gui.viewmodels.feed_list_viewmodel import FeedListViewModel
from .settings.manager import SettingsManager

app = typer.Typer(help="Browse streaming feeds page by page")
settings_app = typer.Typer(help="Inspect and change user settings")
app.add_typer(settings_app, name="settings")


class Feed(str, Enum):
    stream = "stream"
    likes = "likes"
    history = "history"
    following = "following"
    playlist = "playlist"


def _settings_option() -> Any:
    return typer.Option(
        None,
        "--settings",
        envvar="NUAGE_SETTINGS",
        help="Settings file to use instead of the per-user default.",
    )


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CatalogError, SettingsError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except NuageError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _load_settings(path: Optional[Path]) -> SettingsManager:
    manager = SettingsManager(path)
    manager.load()
    return manager


def _context(settings_path: Optional[Path], verbose: bool = False) -> AppContext:
    if verbose:
        ensure_console_logger(logging.getLogger("nuage"), "nuage-cli", level=logging.DEBUG)
    return AppContext(settings=_load_settings(settings_path))


def _print_row(index: int, row: Row) -> None:
    if row.header:
        print(f"[dim]{escape(row.header)}[/dim]")
    title = f"[bold]{escape(row.title)}[/bold]"
    if row.subtitle:
        title += f" — {escape(row.subtitle)}"
    print(f"{index:>4}. {title}")
    for detail in row.details:
        print(f"      [dim]{escape(detail)}[/dim]")


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@app.command()
@_handle_errors
def browse(
    catalog: Path = typer.Argument(..., exists=True, dir_okay=False),
    feed: Feed = typer.Option(Feed.stream, "--feed", "-f", help="Feed to page through."),
    playlist_id: Optional[str] = typer.Option(None, "--playlist-id", help="Playlist for --feed playlist."),
    track_id: Optional[str] = typer.Option(None, "--track-id", help="Show the comments of a track instead."),
    pages: int = typer.Option(1, "--pages", "-n", min=1, help="Number of pages to load."),
    play: Optional[int] = typer.Option(None, "--play", min=0, help="Play the row at this index."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    settings_path: Optional[Path] = _settings_option(),
) -> None:
    """Page through a feed and print its rows."""

    ctx = _context(settings_path, verbose)
    ctx.open_catalog(catalog)
    factory = ViewModelFactory(ctx)

    if track_id is not None:
        vm: FeedListViewModel = factory.comment_list(track_id)
    elif feed is Feed.playlist:
        if not playlist_id:
            raise typer.BadParameter("--feed playlist needs --playlist-id")
        vm = factory.feed_for(NavigationDetail.playlist(playlist_id, playlist_id))
    else:
        vm = factory.feed_for(NavigationDetail.from_kind(feed.value))

    vm.start()
    for _ in range(pages - 1):
        if not vm.load_more():
            break

    for index in range(vm.count.value):
        _print_row(index, vm.row_at(index))

    error = vm.publisher.error.value
    if vm.is_empty.value:
        print("[yellow]Nothing here yet")
    elif vm.exhausted.value:
        print(f"[green]{vm.count.value} rows, end of feed")
    elif error is None:
        print(f"[green]{vm.count.value} rows, more available")

    if play is not None:
        if play >= vm.count.value:
            raise typer.BadParameter(f"--play {play} is beyond the {vm.count.value} loaded rows")
        vm.activate(play)
        current = getattr(ctx.player, "current_track", None)
        if current is not None:
            print(f"[green]Now playing {escape(current.title)} by {escape(current.user.display_name)}")

    vm.dispose()
    if error is not None:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(1)


@app.command()
@_handle_errors
def playlists(
    catalog: Path = typer.Argument(..., exists=True, dir_okay=False),
    settings_path: Optional[Path] = _settings_option(),
) -> None:
    """List the playlists in the signed-in user's library."""

    ctx = _context(settings_path)
    client = ctx.open_catalog(catalog)
    try:
        entries = client.library_playlists()
    except FetchError as exc:
        raise CatalogError(str(exc)) from exc
    if not entries:
        print("[yellow]No playlists")
        return
    for playlist in entries:
        print(
            f"[bold]{escape(playlist.id)}[/bold]  {escape(playlist.title)}"
            f" [dim]({playlist.track_count} tracks)[/dim]"
        )


@settings_app.command("show")
@_handle_errors
def settings_show(settings_path: Optional[Path] = _settings_option()) -> None:
    """Print the current settings."""

    manager = _load_settings(settings_path)
    print(f"[dim]{escape(str(manager.path))}[/dim]")
    print(escape(json.dumps(manager.as_dict(), indent=2, sort_keys=True)))


@settings_app.command("set")
@_handle_errors
def settings_set(
    key: str,
    value: str,
    settings_path: Optional[Path] = _settings_option(),
) -> None:
    """Set a dotted settings KEY to VALUE (parsed as JSON when possible)."""

    manager = _load_settings(settings_path)
    manager.set(key, _parse_value(value))
    print(f"[green]Set {escape(key)} = {escape(json.dumps(manager.get(key)))}")


@app.command()
def gui(catalog: Optional[Path] = typer.Argument(None, exists=True, dir_okay=False)) -> None:
    """Launch the Qt client."""

    from .gui.main import main

    argv = [sys.argv[0]]
    if catalog is not None:
        argv.append(str(catalog))
    raise typer.Exit(main(argv))


if __name__ == "__main__":  # pragma: no cover
    app()
