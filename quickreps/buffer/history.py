"""Bounded most-recent-first rep history kept next to a buffer."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator

from quickreps.core.constants import HISTORY_LIMIT


class HistoryCache:
    """Local approximation of the latest sets for one exercise.

    Seeded from the repository on mount, then only grown by successful commits.
    """

    def __init__(self, reps: Iterable[int] = (), limit: int = HISTORY_LIMIT):
        self._reps: deque[int] = deque(reps, maxlen=limit)

    @property
    def limit(self) -> int:
        return self._reps.maxlen

    def seed(self, reps: Iterable[int]) -> None:
        self._reps = deque(reps, maxlen=self._reps.maxlen)

    def prepend(self, reps: int) -> None:
        # Oldest entry falls off the right end once full
        self._reps.appendleft(reps)

    def as_list(self) -> list[int]:
        return list(self._reps)

    def __iter__(self) -> Iterator[int]:
        return iter(self._reps)

    def __len__(self) -> int:
        return len(self._reps)
