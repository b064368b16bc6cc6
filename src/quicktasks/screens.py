"""Screen rendering for the quicktasks terminal front end.

Each builder reads the store's views and returns a Rich renderable. None of
them mutate anything.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from jinja2 import BaseLoader, Environment, TemplateError
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from quicktasks.config import DisplayConfig
from quicktasks.models import TaskStats
from quicktasks.store import QuickTasksError, TaskStore

EMPTY_MESSAGE = "No tasks yet. Add one above."


class StatsTemplateError(QuickTasksError):
    """The stats template can't be parsed or rendered."""


class Screen(Enum):
    """Screens of the app, valued by their title."""

    TASKS = "QuickTasks"
    STATS = "Stats"
    SETTINGS = "Settings"


DEFAULT_STATS_TEMPLATE = """\
Overview

Total tasks: {{ stats.total }}
Done tasks: {{ stats.done }}
Completion: {{ stats.percent }}%
{%- if stats.total and stats.done == stats.total %}

All done!
{%- endif %}
"""

_MINIMAL_STATS_TEMPLATE = """\
{{ stats.done }}/{{ stats.total }} done ({{ stats.percent }}%)
"""


def build_screen(screen: Screen, store: TaskStore, display: DisplayConfig) -> Panel:
    """Build the full panel for a screen, titled like the app bar."""
    if screen is Screen.STATS:
        body = build_stats(store, display)
    elif screen is Screen.SETTINGS:
        body = build_settings(store)
    else:
        body = build_tasks(store, display)

    return Panel(
        body,
        title=f"[bold]{screen.value}[/bold]",
        border_style="cyan",
    )


def build_tasks(store: TaskStore, display: DisplayConfig) -> RenderableType:
    """Build the task list, with the motivation line when enabled."""
    lines: list[RenderableType] = []

    if store.show_motivation:
        lines.append(Text(display.motivation_text, style="bold"))
        lines.append(Text())

    tasks = store.list_view()
    if not tasks:
        lines.append(Text(EMPTY_MESSAGE, style="dim"))
        return Group(*lines)

    table = Table(show_header=True, box=None, pad_edge=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("", width=3)
    table.add_column("Task")
    table.add_column("ID", style="dim")

    for position, task in enumerate(tasks, 1):
        check = Text("[x]", style="green") if task.done else Text("[ ]")
        title = Text(task.title, style="dim strike" if task.done else "")
        table.add_row(str(position), check, title, str(task.id))

    lines.append(table)
    return Group(*lines)


def build_stats(store: TaskStore, display: DisplayConfig) -> RenderableType:
    """Build the overview block and progress bar."""
    stats = store.stats_view()
    overview = render_stats_text(stats, display)

    progress_bar = ProgressBar(
        total=100,
        completed=stats.fraction * 100,
        width=40,
        complete_style="green",
        finished_style="green bold",
    )

    return Group(Text(overview), Text(), progress_bar)


def build_settings(store: TaskStore) -> RenderableType:
    """Build the preferences block."""
    switch = Text("[on] ", style="green bold") if store.show_motivation else Text("[off]", style="dim")
    line = Text()
    line.append_text(switch)
    line.append(" Show motivation text")

    return Group(
        Text("Preferences", style="bold"),
        Text(),
        line,
        Text(),
        Text("Use 'motivation on' or 'motivation off' to change it.", style="dim"),
    )


def render_stats_text(stats: TaskStats, display: DisplayConfig) -> str:
    """Render the stats overview through the configured jinja2 template.

    Raises:
        StatsTemplateError: The template can't be parsed or rendered.
    """
    env = Environment(loader=BaseLoader())
    try:
        template = env.from_string(_get_stats_template(display))
        return template.render(stats=stats).rstrip("\n")
    except TemplateError as e:
        raise StatsTemplateError(f"Stats template failed: {e}") from e


def _get_stats_template(display: DisplayConfig) -> str:
    """Get the template string based on config."""
    if display.stats_template_path:
        custom_path = Path(display.stats_template_path)
        if custom_path.exists():
            return custom_path.read_text()

    if display.stats_template == "minimal":
        return _MINIMAL_STATS_TEMPLATE

    return DEFAULT_STATS_TEMPLATE
