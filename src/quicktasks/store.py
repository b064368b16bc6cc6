"""In-memory task store.

The store is the single source of truth for tasks and the motivation
preference. All writes go through the named intents (``add_task``,
``toggle_done``, ``delete_task``, ``set_show_motivation``) and all reads are
derived views (``list_view``, ``stats_view``). Observers registered with
``subscribe`` are called with no arguments after each mutation and re-read
whatever views they need.

Intents are serialized by a re-entrant lock. Observers run after the lock is
released, so a callback always sees a finished mutation and may itself call
views or further intents.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Literal

from quicktasks.config import StoreConfig
from quicktasks.ids import CounterIdSource, IdSource, make_id_source
from quicktasks.models import Task, TaskStats

logger = logging.getLogger(__name__)

Observer = Callable[[], None]
NotifyPolicy = Literal["always", "on_change"]


class QuickTasksError(Exception):
    """Base error for quicktasks."""


class BlankTitleError(QuickTasksError, ValueError):
    """Raised in strict mode when a task title is empty after trimming."""


class TaskStore:
    """Owns the newest-first task list and the motivation preference."""

    def __init__(
        self,
        id_source: IdSource | None = None,
        *,
        show_motivation: bool = True,
        notify_policy: NotifyPolicy = "always",
        strict_titles: bool = False,
    ) -> None:
        """Initialise an empty store.

        Args:
            id_source: Callable producing a unique int per new task.
                Defaults to a counter starting at 1.
            show_motivation: Initial value of the motivation preference.
            notify_policy: ``"always"`` notifies after toggle/delete even when
                no task matched; ``"on_change"`` notifies only when a task was
                affected. Add and preference changes are unaffected.
            strict_titles: Raise ``BlankTitleError`` for blank titles instead
                of ignoring them.
        """
        self._id_source = id_source or CounterIdSource()
        self._tasks: list[Task] = []
        self._show_motivation = show_motivation
        self._notify_policy = notify_policy
        self._strict_titles = strict_titles
        self._observers: list[Observer] = []
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: StoreConfig,
        show_motivation: bool = True,
        id_source: IdSource | None = None,
    ) -> TaskStore:
        """Build a store from the store section of the configuration."""
        return cls(
            id_source or make_id_source(config),
            show_motivation=show_motivation,
            notify_policy=config.notify_policy,
            strict_titles=config.strict_titles,
        )

    # ---- observers ----

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer and return a function that removes it."""
        with self._lock:
            self._observers.append(observer)

        removed = False

        def unsubscribe() -> None:
            nonlocal removed
            with self._lock:
                if removed:
                    return
                removed = True
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        """Call every observer, then re-raise the first error any of them raised."""
        with self._lock:
            observers = list(self._observers)

        first_error: Exception | None = None
        for observer in observers:
            try:
                observer()
            except Exception as e:
                if first_error is None:
                    first_error = e
                else:
                    logger.warning("Observer %r failed: %s", observer, e)

        if first_error is not None:
            raise first_error

    # ---- intents ----

    def add_task(self, title: str) -> Task | None:
        """Prepend a new open task with the trimmed title.

        Blank titles are ignored (no task, no notification) unless the store
        is strict, in which case ``BlankTitleError`` is raised.
        """
        trimmed = title.strip()
        if not trimmed:
            if self._strict_titles:
                raise BlankTitleError("Task title must not be blank")
            logger.debug("Ignoring blank task title")
            return None

        with self._lock:
            task = Task(id=self._id_source(), title=trimmed)
            self._tasks.insert(0, task)
        logger.debug("Added task id=%s title=%r", task.id, task.title)

        self._notify()
        return task

    def toggle_done(self, task_id: int) -> None:
        """Flip ``done`` on every task with a matching id."""
        with self._lock:
            matched = False
            for index, task in enumerate(self._tasks):
                if task.id == task_id:
                    self._tasks[index] = task.toggled()
                    matched = True

        if matched:
            logger.debug("Toggled task id=%s", task_id)
        else:
            logger.debug("toggle_done: no task with id=%s", task_id)

        self._notify_after_lookup(matched)

    def delete_task(self, task_id: int) -> None:
        """Remove every task with a matching id, preserving order."""
        with self._lock:
            before = len(self._tasks)
            self._tasks = [task for task in self._tasks if task.id != task_id]
            matched = len(self._tasks) != before

        if matched:
            logger.debug("Deleted task id=%s", task_id)
        else:
            logger.debug("delete_task: no task with id=%s", task_id)

        self._notify_after_lookup(matched)

    def set_show_motivation(self, value: bool) -> None:
        """Set the motivation preference."""
        with self._lock:
            self._show_motivation = bool(value)
        logger.debug("show_motivation=%s", self._show_motivation)

        self._notify()

    def _notify_after_lookup(self, matched: bool) -> None:
        if matched or self._notify_policy == "always":
            self._notify()

    # ---- views ----

    @property
    def show_motivation(self) -> bool:
        """Current motivation preference."""
        return self._show_motivation

    @property
    def notify_policy(self) -> NotifyPolicy:
        return self._notify_policy

    def list_view(self) -> tuple[Task, ...]:
        """Snapshot of all tasks, newest first."""
        with self._lock:
            return tuple(self._tasks)

    def stats_view(self) -> TaskStats:
        """Completion statistics for the current tasks."""
        return TaskStats.from_tasks(self.list_view())

    def get(self, task_id: int) -> Task | None:
        """Get the first task with the given id."""
        for task in self.list_view():
            if task.id == task_id:
                return task
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)


SAMPLE_TASKS: tuple[tuple[str, bool], ...] = (
    ("Buy milk", False),
    ("Finish course project", True),
)


def seed_tasks(store: TaskStore, tasks: Iterable[tuple[str, bool]] = SAMPLE_TASKS) -> None:
    """Populate a store through its intents.

    ``tasks`` is given in display order (newest first), so the items are added
    in reverse to end up in that order.
    """
    for title, done in reversed(list(tasks)):
        task = store.add_task(title)
        if task is not None and done:
            store.toggle_done(task.id)
