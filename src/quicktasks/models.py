"""Data models for quicktasks."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace


@dataclass(frozen=True, slots=True)
class Task:
    """A single to-do item.

    Tasks are immutable values. Toggling completion replaces the task in the
    store with a copy, so snapshots handed out by the store never change
    underneath the caller.
    """

    id: int
    title: str
    done: bool = False

    def toggled(self) -> Task:
        """Return a copy with ``done`` flipped."""
        return replace(self, done=not self.done)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    def __str__(self) -> str:
        status = "✓" if self.done else "○"
        return f"[{status}] {self.title}"


@dataclass(frozen=True, slots=True)
class TaskStats:
    """Aggregate completion statistics."""

    total: int = 0
    done: int = 0
    percent: int = 0

    @classmethod
    def from_tasks(cls, tasks: tuple[Task, ...] | list[Task]) -> TaskStats:
        """Compute stats for a task sequence.

        ``percent`` truncates: 1 done of 3 total is 33, never 33.3 or 34.
        """
        total = len(tasks)
        done = sum(1 for task in tasks if task.done)
        percent = 0 if total == 0 else done * 100 // total
        return cls(total=total, done=done, percent=percent)

    @property
    def fraction(self) -> float:
        """Completed share in [0, 1], for progress bars."""
        if self.total == 0:
            return 0.0
        return self.done / self.total

    def to_dict(self) -> dict[str, int]:
        """Convert to the ``{total, done, percent}`` mapping."""
        return {"total": self.total, "done": self.done, "percent": self.percent}
