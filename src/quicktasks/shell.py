"""Interactive shell for quicktasks.

The shell is the presentation layer: it parses command lines, forwards them
to the store as intents and redraws the current screen whenever the store
notifies. It holds no task state of its own.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from quicktasks.config import DisplayConfig
from quicktasks.screens import Screen, build_screen
from quicktasks.store import BlankTitleError, QuickTasksError, TaskStore

logger = logging.getLogger(__name__)

COMMANDS: dict[str, str] = {
    "add <title>": "Add a task",
    "done <n>": "Toggle a task done/open (alias: toggle)",
    "rm <n>": "Delete a task (alias: delete)",
    "tasks": "Show the task list",
    "stats": "Show completion statistics",
    "settings": "Show preferences",
    "motivation on|off": "Show or hide the motivation text",
    "help": "Show this help",
    "quit": "Leave the shell (alias: exit)",
}


class ShellError(QuickTasksError):
    """A command line the shell cannot act on."""


def _prompt_line() -> str:
    return click.prompt("quicktasks", default="", show_default=False, prompt_suffix="> ")


class TaskShell:
    """Line-oriented front end over a TaskStore.

    ``<n>`` arguments are 1-based positions in the current list, or ``#<id>``
    to address a task by id.
    """

    def __init__(
        self,
        store: TaskStore,
        display: DisplayConfig | None = None,
        console: Console | None = None,
        live: bool = True,
    ) -> None:
        """Initialise the shell.

        Args:
            store: The store to drive.
            display: Display settings (motivation text, stats template).
            console: Console to render to.
            live: Redraw the current screen after every store notification.
        """
        self.store = store
        self.display = display or DisplayConfig()
        self.console = console or Console()
        self.screen = Screen.TASKS
        self.running = True
        self._unsubscribe = store.subscribe(self._on_change) if live else None

    def close(self) -> None:
        """Stop listening to the store."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self) -> None:
        self.render()

    def render(self) -> None:
        """Draw the current screen."""
        self.console.print(build_screen(self.screen, self.store, self.display))

    # ---- command handling ----

    def execute(self, line: str) -> None:
        """Run one command line, reporting problems instead of raising."""
        try:
            self._dispatch(line)
        except QuickTasksError as e:
            logger.debug("Command failed: %r (%s)", line, e)
            self.console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)

    def _dispatch(self, line: str) -> None:
        text = line.strip()
        if not text or text.startswith("#"):
            return

        command, _, rest = text.partition(" ")
        command = command.lower()
        rest = rest.strip()

        if command == "add":
            self._add(rest)
        elif command in ("done", "toggle"):
            self.store.toggle_done(self._resolve_id(rest))
        elif command in ("rm", "delete"):
            self.store.delete_task(self._resolve_id(rest))
        elif command == "motivation":
            self._motivation(rest)
        elif command == "tasks":
            self._show(Screen.TASKS)
        elif command == "stats":
            self._show(Screen.STATS)
        elif command == "settings":
            self._show(Screen.SETTINGS)
        elif command == "help":
            self.print_help()
        elif command in ("quit", "exit"):
            self.running = False
        else:
            raise ShellError(f"Unknown command '{command}'. Type 'help' for a list.")

    def _add(self, title: str) -> None:
        try:
            task = self.store.add_task(title)
        except BlankTitleError as e:
            raise ShellError(str(e)) from e

        if task is None:
            self.console.print("[dim]Nothing to add.[/dim]")

    def _motivation(self, value: str) -> None:
        choice = value.lower()
        if choice in ("on", "yes", "true", "1"):
            self.store.set_show_motivation(True)
        elif choice in ("off", "no", "false", "0"):
            self.store.set_show_motivation(False)
        else:
            raise ShellError("Usage: motivation on|off")

    def _show(self, screen: Screen) -> None:
        self.screen = screen
        self.render()

    def _resolve_id(self, ref: str) -> int:
        """Turn a list position or ``#id`` into a task id."""
        if not ref:
            raise ShellError("Missing task number.")

        if ref.startswith("#"):
            try:
                return int(ref[1:])
            except ValueError:
                raise ShellError(f"Invalid task id: {ref}") from None

        try:
            position = int(ref)
        except ValueError:
            raise ShellError(f"Invalid task number: {ref}") from None

        tasks = self.store.list_view()
        if position < 1 or position > len(tasks):
            if not tasks:
                raise ShellError("There are no tasks.")
            raise ShellError(f"Invalid task number. Must be 1-{len(tasks)}")

        return tasks[position - 1].id

    def print_help(self) -> None:
        """Print the command reference."""
        table = Table(title="Commands", show_header=False, box=None)
        table.add_column("Command", style="cyan")
        table.add_column("Description")
        for usage, description in COMMANDS.items():
            table.add_row(usage, description)
        self.console.print(table)

    # ---- loops ----

    def run(self, read_line: Callable[[], str] = _prompt_line) -> None:
        """Read and execute commands until quit or end of input."""
        self.render()
        try:
            while self.running:
                try:
                    line = read_line()
                except (EOFError, click.Abort):
                    break
                self.execute(line)
        finally:
            self.close()

    def run_script(self, lines: Iterable[str]) -> None:
        """Execute commands in order, stopping early on quit."""
        try:
            for line in lines:
                self.execute(line)
                if not self.running:
                    break
        finally:
            self.close()
