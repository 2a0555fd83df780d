import functools
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from click.shell_completion import CompletionItem, get_completion_class
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from tmark import __version__
from tmark.config import Config
from tmark.director import SessionDirector
from tmark.errors import TmarkError, UnknownAliasError
from tmark.multiplexer import TmuxMultiplexer
from tmark.porter import BookmarkPorter
from tmark.search import search_entries
from tmark.storage import AliasStorage

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


class AppState:
    """Objects shared by the commands of a single invocation"""

    def __init__(self, home: Optional[Path] = None):
        self.home = home
        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        # built on first use so help and completion never touch the home directory
        if self._config is None:
            self._config = Config(self.home)
        return self._config

    def storage(self) -> AliasStorage:
        return AliasStorage(
            self.config.store_dir,
            fuzzy_threshold=self.config.get("fuzzy_threshold", 60),
        )

    def director(self) -> SessionDirector:
        multiplexer = TmuxMultiplexer(binary=self.config.get("tmux_binary", "tmux"))
        return SessionDirector(
            self.storage(),
            multiplexer,
            prefix=self.config.get("session_prefix", ""),
        )


def reports_errors(f):
    """Print a TmarkError for the user and exit with its code"""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except TmarkError as e:
            err_console.print(f"[red]✗[/] {escape(str(e))}")
            if isinstance(e, UnknownAliasError) and e.suggestions:
                err_console.print(f"[dim]Did you mean: {escape(', '.join(e.suggestions))}?[/]")
            sys.exit(e.exit_code)

    return wrapper


def complete_alias(ctx, param, incomplete) -> List[CompletionItem]:
    """Complete alias arguments from the store"""
    home = ctx.find_root().params.get("home")
    try:
        entries = AppState(home).storage().list_all()
    except TmarkError:
        return []
    return [
        CompletionItem(entry.alias, help=entry.path)
        for entry in entries
        if entry.alias.startswith(incomplete)
    ]


@click.group()
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="TMARK_HOME",
    help="Directory holding the bookmark store (default: ~/.tmark)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.version_option(version=__version__, prog_name="tmark")
@click.pass_context
def main(ctx, home, verbose):
    """tmark - bookmark directories and jump into tmux sessions for them"""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )
    ctx.obj = AppState(home)


@main.command()
@click.argument("alias", shell_complete=complete_alias)
@click.argument("path", required=False)
@click.pass_obj
@reports_errors
def add(state, alias, path):
    """Bookmark PATH (default: current directory) as ALIAS.

    An existing ALIAS is overwritten.
    """
    storage = state.storage()
    existed = storage.exists(alias)
    entry = storage.add(alias, path)
    verb = "Updated" if existed else "Added"
    console.print(f"[green]✔[/] {verb} [cyan]{escape(entry.alias)}[/] → {escape(entry.path)}")


@main.command()
@click.argument("alias", shell_complete=complete_alias)
@click.pass_obj
@reports_errors
def remove(state, alias):
    """Remove the bookmark ALIAS"""
    entry = state.storage().remove(alias)
    console.print(f"[green]✔[/] Removed [cyan]{escape(entry.alias)}[/] ({escape(entry.path)})")


main.add_command(remove, name="rm")


@main.command()
@click.argument("alias", shell_complete=complete_alias)
@click.option("--detached", "-d", is_flag=True, help="Only make sure the session exists, don't attach")
@click.pass_obj
@reports_errors
def go(state, alias, detached):
    """Attach to the tmux session for ALIAS, creating it if needed"""
    target = state.director().go(alias, attach=not detached)
    console.print(
        f"[green]✔[/] Session [cyan]{escape(target.session_name)}[/] is running in {escape(target.path)}"
    )


@main.command(name="list")
@click.option("--table", "as_table", is_flag=True, help="Render bookmarks as a table")
@click.pass_obj
@reports_errors
def list_bookmarks(state, as_table):
    """List all bookmarks, one per line"""
    entries = state.storage().list_all()
    if not entries:
        console.print("[yellow]No bookmarks found.[/] Add one with 'tmark add ALIAS [PATH]'")
        return

    show_missing = state.config.get("show_missing", True)

    if as_table:
        table = Table(title=f"Bookmarks ({len(entries)} total)")
        table.add_column("Alias", style="cyan", no_wrap=True)
        table.add_column("Path", style="green")
        for entry in entries:
            path = escape(entry.path)
            if show_missing and not Path(entry.path).is_dir():
                path += " [red](missing)[/]"
            table.add_row(escape(entry.alias), path)
        console.print(table)
        return

    for entry in entries:
        line = str(entry)
        if show_missing and not Path(entry.path).is_dir():
            line += " (missing)"
        click.echo(line)


@main.command(name="path")
@click.argument("alias", shell_complete=complete_alias)
@click.pass_obj
@reports_errors
def print_path(state, alias):
    """Print the directory bookmarked as ALIAS"""
    click.echo(state.storage().get(alias).path)


@main.command()
@click.argument("term")
@click.pass_obj
@reports_errors
def search(state, term):
    """Fuzzy search bookmarks by alias and path"""
    threshold = state.config.get("fuzzy_threshold", 60)
    results = search_entries(term, state.storage().list_all(), threshold=threshold)
    if not results:
        console.print(f"[yellow]No bookmarks match '{escape(term)}'[/]")
        return
    for entry, _score in results:
        click.echo(str(entry))


@main.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--format", "-f", "fmt", type=click.Choice(["json", "yaml"]), default=None,
              help="Output format (default: from file extension, else json)")
@click.pass_obj
@reports_errors
def export(state, file, fmt):
    """Export all bookmarks to FILE"""
    if fmt is None:
        fmt = "yaml" if file.suffix in [".yaml", ".yml"] else "json"
    success, message = BookmarkPorter(state.storage()).export_to_file(file, format=fmt)
    if not success:
        err_console.print(f"[red]✗[/] {escape(message)}")
        sys.exit(1)
    console.print(f"[green]✔[/] {escape(message)}")


@main.command(name="import")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--replace", is_flag=True, help="Drop existing bookmarks that are not in FILE")
@click.pass_obj
@reports_errors
def import_bookmarks(state, file, replace):
    """Import bookmarks from a JSON or YAML export"""
    success, message = BookmarkPorter(state.storage()).import_from_file(file, replace=replace)
    if not success:
        err_console.print(f"[red]✗[/] {escape(message)}")
        sys.exit(1)
    console.print(f"[green]✔[/] {escape(message)}")


@main.command()
@click.argument("shell", type=click.Choice(["bash", "zsh", "fish"]))
def completion(shell):
    """Print the shell completion script for bash, zsh or fish.

    Examples:
      eval "$(tmark completion bash)"
      tmark completion fish > ~/.config/fish/completions/tmark.fish
    """
    completion_cls = get_completion_class(shell)
    script = completion_cls(main, {}, "tmark", "_TMARK_COMPLETE").source()
    click.echo(script)


@main.command(name="help")
@click.pass_context
def help_command(ctx):
    """Show this message"""
    click.echo(ctx.parent.get_help())


if __name__ == "__main__":
    main()
