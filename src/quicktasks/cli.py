"""CLI interface for quicktasks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from quicktasks import __version__
from quicktasks.config import CONFIG_FILE, ConfigError, QuickTasksConfig
from quicktasks.logging_setup import setup_logging
from quicktasks.screens import Screen
from quicktasks.shell import TaskShell
from quicktasks.store import QuickTasksError, TaskStore, seed_tasks

console = Console()
logger = logging.getLogger(__name__)

SCREEN_CHOICES = {screen.name.lower(): screen for screen in Screen}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="quicktasks")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: .quicktasks/config.json)",
)
@click.option("--demo", is_flag=True, help="Start with the sample tasks")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured log level",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    demo: bool,
    log_level: str | None,
) -> None:
    """quicktasks - a tiny task tracker for the terminal.

    Tasks live in memory for the length of the session.

    \b
    Usage:
      quicktasks                 # Start the interactive shell
      quicktasks --demo          # Start with two sample tasks
      quicktasks run script.txt  # Run shell commands from a file
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    # config commands read or replace the file themselves, even a broken one
    if ctx.invoked_subcommand == "config":
        setup_logging(log_level or logging.WARNING)
        return

    if config_path is not None and not config_path.exists():
        console.print(f"[red]Config file not found:[/red] {config_path}")
        ctx.exit(1)

    config = _load_config(ctx, config_path)
    setup_logging(log_level or config.logging.level, config.logging.file)

    ctx.obj["config"] = config
    ctx.obj["demo"] = demo or config.seed_sample_tasks

    # If no subcommand, start the shell
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


def _load_config(ctx: click.Context, path: Path | None) -> QuickTasksConfig:
    """Load the config, exiting with status 1 if it's invalid."""
    try:
        return QuickTasksConfig.load(path)
    except ConfigError as e:
        console.print(f"[red]Invalid config:[/red] {e.path}")
        console.print(e.detail, style="dim", highlight=False, markup=False)
        ctx.exit(1)


def _build_store(ctx: click.Context) -> TaskStore:
    """Create the session's store from the loaded config."""
    config: QuickTasksConfig = ctx.obj["config"]

    store = TaskStore.from_config(config.store, show_motivation=config.display.show_motivation)
    if ctx.obj["demo"]:
        seed_tasks(store)
        logger.info("Seeded %d sample tasks", len(store))

    return store


@main.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Start the interactive shell."""
    config: QuickTasksConfig = ctx.obj["config"]

    task_shell = TaskShell(_build_store(ctx), config.display, console)
    console.print("[dim]Type 'help' for commands, 'quit' to leave.[/dim]")
    task_shell.run()
    console.print("[dim]Bye.[/dim]")


@main.command("run")
@click.argument("script", type=click.File("r"))
@click.option(
    "--screen",
    type=click.Choice(list(SCREEN_CHOICES)),
    help="Screen to print at the end (default: the last one shown)",
)
@click.pass_context
def run_command(ctx: click.Context, script: IO[str], screen: str | None) -> None:
    """Run shell commands from SCRIPT and print the final screen.

    One command per line; blank lines and lines starting with # are skipped.
    Use - to read from stdin.

    Example:

        printf 'add Buy milk\\ndone 1\\n' | quicktasks run - --screen stats
    """
    config: QuickTasksConfig = ctx.obj["config"]

    task_shell = TaskShell(_build_store(ctx), config.display, console, live=False)
    task_shell.run_script(script)

    if screen is not None:
        task_shell.screen = SCREEN_CHOICES[screen]

    try:
        task_shell.render()
    except QuickTasksError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        ctx.exit(1)


@main.group("config")
def config_group() -> None:
    """Inspect or create the configuration file."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config = _load_config(ctx, ctx.obj["config_path"])
    console.print_json(config.model_dump_json())


@config_group.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a config file with the default settings."""
    path: Path = ctx.obj["config_path"] or CONFIG_FILE

    if path.exists() and not force:
        console.print(
            f"[yellow]Config already exists:[/yellow] {path}. Use --force to overwrite."
        )
        return

    QuickTasksConfig().save(path)

    console.print(
        Panel.fit(
            "[green]Configuration saved![/green]\n\n"
            f"Config: [cyan]{path}[/cyan]",
            title="quicktasks",
        )
    )
