"""Suggested quick-tap increments derived from recent sets."""

from collections.abc import Iterable

from quickreps.core.constants import FALLBACK_INCREMENTS, INCREMENT_SPREAD, MIN_INCREMENT


def median_reps(values: Iterable[int]) -> int | None:
    """Median of rep counts; for an even count the two middle values are averaged, .5 rounds up."""
    ordered = sorted(values)
    if not ordered:
        return None
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid] + 1) // 2
    return ordered[mid]


def suggest_increments(recent_reps: Iterable[int]) -> list[int]:
    """
    Three quick-tap amounts [M-2, M, M+2] around the median M of recent reps,
    each at least 1. No history (or a zero median) falls back to [3, 5, 8].
    """
    m = median_reps(recent_reps)
    if not m:
        return list(FALLBACK_INCREMENTS)
    return [max(MIN_INCREMENT, v) for v in (m - INCREMENT_SPREAD, m, m + INCREMENT_SPREAD)]
