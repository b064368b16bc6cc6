"""Identity sources for new tasks.

An identity source is any zero-argument callable returning a fresh ``int``.
The store calls it once per created task. Every source here is strictly
increasing or collision-checked, so two tasks created in quick succession
never share an id.
"""

from __future__ import annotations

import threading
import time
import uuid
from collections import deque
from collections.abc import Callable

from quicktasks.config import StoreConfig

IdSource = Callable[[], int]


class CounterIdSource:
    """Strictly increasing integer ids starting at ``start``."""

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value


class ClockIdSource:
    """Millisecond wall-clock ids, bumped past the last issued value.

    If the clock has not advanced (two calls in the same millisecond) or has
    gone backwards, the id is ``last + 1`` instead.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.time
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now_ms = int(self._clock() * 1000)
            value = max(now_ms, self._last + 1)
            self._last = value
            return value


class UuidIdSource:
    """Random positive 63-bit ids derived from uuid4.

    The last ``history`` ids are remembered and never reissued. Older ones are
    forgotten so memory stays bounded over a long session.
    """

    def __init__(
        self,
        factory: Callable[[], uuid.UUID] | None = None,
        history: int = 100_000,
    ) -> None:
        self._factory = factory or uuid.uuid4
        self._history = history
        self._issued: set[int] = set()
        self._recent: deque[int] = deque()
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            while True:
                value = (self._factory().int >> 65) or 1
                if value not in self._issued:
                    break

            self._issued.add(value)
            self._recent.append(value)
            if len(self._recent) > self._history:
                self._issued.discard(self._recent.popleft())
            return value


def make_id_source(config: StoreConfig | None = None) -> IdSource:
    """Build the identity source selected by the store configuration."""
    if config is None:
        config = StoreConfig()

    if config.id_strategy == "clock":
        return ClockIdSource()
    elif config.id_strategy == "uuid":
        return UuidIdSource()
    else:
        return CounterIdSource(start=config.id_start)
