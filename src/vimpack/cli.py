"""Command-line interface for vimpack."""

from __future__ import annotations

import logging
import os
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from vimpack import __version__
from vimpack.commands import (
    install_plugins,
    list_plugins,
    regenerate_loader,
    uninstall_plugins,
    update_plugins,
)
from vimpack.commands.update import parse_skip
from vimpack.config import PackConfig
from vimpack.errors import PackError
from vimpack.package.model import validate_load_command

console = Console()


def _setup_logging(verbose: bool) -> None:
    """Route vimpack log records to the rich console."""
    logger = logging.getLogger("vimpack")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(console=console, show_time=False, show_path=verbose, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _die(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    sys.exit(1)


def _resolve_threads(threads: int | None) -> int:
    count = threads if threads is not None else (os.cpu_count() or 1)
    if count < 1:
        _die("Threads should be greater than 0")
    return count


def _check_load_command(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return value
    try:
        validate_load_command(value)
    except PackError as e:
        raise click.BadParameter(str(e)) from e
    return value


def _print_failures(title: str, errors: dict[str, BaseException]) -> None:
    if not errors:
        return
    table = Table(title=title)
    table.add_column("Plugin", style="cyan")
    table.add_column("Reason", style="red")
    for name in sorted(errors):
        table.add_row(name, str(errors[name]))
    console.print(table)


@click.group()
@click.version_option(__version__, prog_name="vimpack")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """vimpack - manage Vim 8 native packages."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = PackConfig.from_env()


@cli.command()
@click.option("--packfile", "-p", is_flag=True, help="Only regenerate the _pack file from the packfile")
@click.option("--skip", "-s", default="", help="Comma separated list of plugins to skip")
@click.option("--threads", "-j", type=int, help="Update plugins concurrently")
@click.argument("plugins", nargs=-1)
@click.pass_context
def update(
    ctx: click.Context,
    packfile: bool,
    skip: str,
    threads: int | None,
    plugins: tuple[str, ...],
) -> None:
    """Update plugins."""
    config: PackConfig = ctx.obj["config"]

    try:
        if packfile:
            count = regenerate_loader(config)
            console.print(f"[green]Regenerated _pack file for {count} plugins[/green]")
            return

        workers = _resolve_threads(threads)
        result = update_plugins(config, plugins, workers, parse_skip(skip))
    except PackError as e:
        _die(str(e))

    console.print(f"[green]Updated {len(result.updated)} plugins[/green]")
    _print_failures("Not updated", result.errors)


@cli.command()
@click.option("--all", "-a", "remove_config", is_flag=True, help="Also remove config files")
@click.argument("plugins", nargs=-1, required=True)
@click.pass_context
def uninstall(ctx: click.Context, remove_config: bool, plugins: tuple[str, ...]) -> None:
    """Uninstall plugins."""
    try:
        removed = uninstall_plugins(ctx.obj["config"], plugins, remove_config)
    except PackError as e:
        _die(str(e))

    for name in removed:
        console.print(f"[green]✓[/green] Removed {name}")


@cli.command()
@click.option("--opt", "-o", is_flag=True, help="Install as an optional (packadd) plugin")
@click.option("--category", "-c", default="default", help="Package category")
@click.option(
    "--on",
    "load_command",
    callback=_check_load_command,
    help="Command that loads this optional plugin",
)
@click.option("--local", is_flag=True, help="Plugin is managed locally, not by git")
@click.option("--threads", "-j", type=int, help="Install plugins concurrently")
@click.argument("plugins", nargs=-1)
@click.pass_context
def install(
    ctx: click.Context,
    opt: bool,
    category: str,
    load_command: str | None,
    local: bool,
    threads: int | None,
    plugins: tuple[str, ...],
) -> None:
    """Install plugins, or every plugin in the packfile missing on disk."""
    try:
        workers = _resolve_threads(threads)
        result = install_plugins(
            ctx.obj["config"],
            plugins,
            workers,
            category=category,
            opt=opt,
            load_command=load_command,
            local=local,
        )
    except PackError as e:
        _die(str(e))

    console.print(f"[green]Installed {len(result.installed)} plugins[/green]")
    _print_failures("Not installed", result.errors)


@cli.command(name="list")
@click.option("--start", "start_only", is_flag=True, help="Only list start plugins")
@click.option("--opt", "opt_only", is_flag=True, help="Only list optional plugins")
@click.pass_context
def list_command(ctx: click.Context, start_only: bool, opt_only: bool) -> None:
    """List plugins in the packfile."""
    try:
        packages = list_plugins(ctx.obj["config"], start_only, opt_only)
    except PackError as e:
        _die(str(e))

    table = Table(title="Plugins")
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="white")
    table.add_column("Type", style="green")
    table.add_column("Load on", style="yellow")

    for package in packages:
        kind = "opt" if package.opt else "start"
        if package.local:
            kind += " (local)"
        table.add_row(package.name, package.category, kind, package.load_command or "")

    console.print(table)


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
