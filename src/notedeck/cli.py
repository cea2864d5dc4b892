"""Command line interface for notedeck."""

from __future__ import annotations

import difflib
import logging
import shlex
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax

from notedeck.config import (
    ConfigError,
    ConfigManager,
    NoteDeckConfig,
    flatten_for_env,
    resolve_with_precedence,
)
from notedeck.index import NoteIndex
from notedeck.render import GlyphCache, LayoutEngine
from notedeck.view import SORT_KEYS, ConsoleSurface, SortController, ViewController, ViewState

console = Console()

LOGGER = logging.getLogger(__name__)

KEY_BINDINGS: dict[str, str] = {
    "j": "next",
    "n": "next",
    "k": "previous",
    "p": "previous",
    "g": "reload",
    "r": "refresh",
    "i": "toggle_icons",
    "d": "toggle_date",
    "t": "toggle_tags",
    "s": "reverse",
    "o": "cycle_sort",
    "\r": "open",
    "\n": "open",
    "q": "quit",
}


def _configure_logging(level: str, verbose: int) -> None:
    """Configure root logging from the config level, raised by ``-v`` flags."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    if verbose:
        resolved = min(resolved, logging.INFO if verbose == 1 else logging.DEBUG)
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", level=resolved)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def _load_config(ctx: click.Context, overrides: dict[str, Any] | None = None) -> NoteDeckConfig:
    """Load the effective configuration and set up logging.

    Raises:
        click.ClickException: If the configuration cannot be loaded.
    """
    try:
        config = ConfigManager().load(cli_overrides=overrides)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _configure_logging(config.logging.level, (ctx.obj or {}).get("verbose", 0))
    return config


def build_controller(
    config: NoteDeckConfig,
    directories: Sequence[Path | str],
    surface: ConsoleSurface,
) -> ViewController:
    """Wire index, glyph cache, layout, and view state from ``config``."""
    glyphs = GlyphCache.from_settings(config.glyphs)
    return ViewController(
        NoteIndex.from_settings(config.notes, default_icon=config.glyphs.default_icon),
        LayoutEngine.from_settings(glyphs, config.layout),
        directories=directories,
        sorter=SortController(),
        surface=surface,
        state=ViewState.from_settings(config.view),
    )


def _view_overrides(
    sort: Optional[str],
    ascending: bool,
    no_icons: bool,
    no_date: bool,
    no_tags: bool,
) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if sort:
        overrides["view.sort_key"] = sort
    if ascending:
        overrides["view.descending"] = False
    if no_icons:
        overrides["view.show_icons"] = False
    if no_date:
        overrides["view.show_date"] = False
    if no_tags:
        overrides["view.show_tags"] = False
    return overrides


def _report_skipped(controller: ViewController) -> None:
    for message in controller.index.errors:
        console.print(f"[yellow]Skipped {message}[/yellow]", highlight=False)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="notedeck")
@click.option("-v", "--verbose", count=True, help="Increase logging verbosity.")
@click.pass_context
def cli(ctx: click.Context, verbose: int) -> None:
    """notedeck lists note files from several directories as a sorted, two-line view."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


_directories_argument = click.argument(
    "directories", nargs=-1, type=click.Path(file_okay=False, path_type=Path)
)


@cli.command("list")
@_directories_argument
@click.option("--sort", type=click.Choice(SORT_KEYS), help="Field used to order notes.")
@click.option("--ascending", is_flag=True, help="List oldest (or A-Z) first.")
@click.option("--no-icons", is_flag=True, help="Hide the icon column.")
@click.option("--no-date", is_flag=True, help="Hide the date column.")
@click.option("--no-tags", is_flag=True, help="Hide the tag column.")
@click.option("--width", type=click.IntRange(min=1), help="Render width in cells.")
@click.pass_context
def list_notes(
    ctx: click.Context,
    directories: tuple[Path, ...],
    sort: Optional[str],
    ascending: bool,
    no_icons: bool,
    no_date: bool,
    no_tags: bool,
    width: Optional[int],
) -> None:
    """Render the note list once and exit.

    DIRECTORIES default to ``notes.directories`` from the configuration.
    """
    config = _load_config(ctx, _view_overrides(sort, ascending, no_icons, no_date, no_tags))
    target = Console(width=width) if width else console
    surface = ConsoleSurface(target, selection_style=config.view.selection_style)
    controller = build_controller(config, directories or config.notes.directories, surface)

    controller.reload()
    _report_skipped(controller)
    if not surface.line_count:
        console.print("[yellow]No notes found.[/yellow]")
        return
    surface.paint(highlight_selection=False)


@cli.command()
@_directories_argument
@click.pass_context
def browse(ctx: click.Context, directories: tuple[Path, ...]) -> None:
    """Browse notes interactively.

    Keys: j/n next, k/p previous, enter open, g reload, r refresh,
    i/d/t toggle icons/date/tags, s reverse order, o cycle sort field, q quit.
    """
    config = _load_config(ctx)
    surface = ConsoleSurface(
        console, selection_style=config.view.selection_style, clear_on_paint=True
    )
    controller = build_controller(config, directories or config.notes.directories, surface)
    controller.reload()

    def _open_selected() -> None:
        path = controller.resolve_selected_path()
        if path is None:
            return
        click.edit(filename=str(path))
        controller.reload()

    actions: dict[str, Callable[[], Any]] = {
        "next": controller.select_next,
        "previous": controller.select_previous,
        "reload": controller.reload,
        "refresh": controller.refresh,
        "toggle_icons": controller.toggle_icons,
        "toggle_date": controller.toggle_date,
        "toggle_tags": controller.toggle_tags,
        "reverse": controller.reverse_sort_order,
        "cycle_sort": lambda: controller.sort_by(
            SortController.next_key(controller.state.sort_key)
        ),
        "open": _open_selected,
    }

    while True:
        controller.on_resize()
        surface.paint()
        direction = "desc" if controller.state.descending else "asc"
        console.print(
            f"[dim]{len(controller.index)} notes, sorted by "
            f"{controller.state.sort_key} ({direction})[/dim]"
        )
        action = KEY_BINDINGS.get(click.getchar())
        if action == "quit":
            break
        if action is not None:
            actions[action]()


@cli.group()
def config() -> None:
    """Manage the notedeck configuration file."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.option(
    "--as-env",
    is_flag=True,
    help="Print the configuration as NOTEDECK__ environment variable assignments.",
)
def config_view(no_env: bool, as_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_env:
        for key, value in flatten_for_env(effective).items():
            click.echo(f"{key}={shlex.quote(value)}")
        return

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML literal assigned to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value addressed by a dotted KEY (e.g. ``view.sort_key``)."""
    manager = ConfigManager()
    manager.ensure_exists()

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must be a dotted path such as 'layout.margin'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        node = file_data
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[segments[-1]] = parsed_value
        resolve_with_precedence(defaults=NoteDeckConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    before = manager.read_text().splitlines()
    manager.save(file_data)
    after = manager.read_text().splitlines()
    diff = [
        line
        for line in difflib.unified_diff(
            before, after, fromfile="config.yaml (before)", tofile="config.yaml (after)", lineterm=""
        )
        if not line.startswith(("-# Last updated", "+# Last updated"))
    ]
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
