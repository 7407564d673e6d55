"""Number pool arithmetic and sampling.

Every function here is total: an inverted range (``start > end``) is
treated as an empty pool instead of raising, so callers in the draw
pipeline never need to guard against it.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional, Protocol

from .types import MAX_RANGE, Settings, ValidationResult


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


def _source(rng: Optional[RandomSource]) -> RandomSource:
    return rng if rng is not None else random


def available_numbers(start: int, end: int, excluded: Iterable[int] = ()) -> List[int]:
    """Return the ascending integers of ``[start, end]`` that are not excluded."""
    if start > end:
        return []
    blocked = set(excluded)
    return [n for n in range(start, end + 1) if n not in blocked]


def sample_one(
    start: int,
    end: int,
    excluded: Iterable[int] = (),
    rng: Optional[RandomSource] = None,
) -> Optional[int]:
    """Pick one number uniformly from the available pool, or ``None`` if it is empty."""
    available = available_numbers(start, end, excluded)
    if not available:
        return None
    return available[_source(rng).randrange(len(available))]


def sample_many(
    start: int,
    end: int,
    count: int,
    excluded: Iterable[int] = (),
    allow_duplicates: bool = False,
    rng: Optional[RandomSource] = None,
) -> List[int]:
    """Draw up to ``count`` numbers.

    Without duplicates every pick is added to a working exclusion set on top
    of ``excluded``. The result is shorter than ``count`` when the pool runs
    out; callers must check its length.
    """
    base = list(excluded)
    working = list(base)
    result: List[int] = []
    for _ in range(max(0, count)):
        number = sample_one(start, end, base if allow_duplicates else working, rng=rng)
        if number is None:
            break
        result.append(number)
        if not allow_duplicates:
            working.append(number)
    return result


def total_range(start: int, end: int) -> int:
    return max(0, end - start + 1)


def remaining_count(
    start: int, end: int, excluded: Iterable[int], allow_duplicates: bool
) -> int:
    if allow_duplicates:
        return total_range(start, end)
    return len(available_numbers(start, end, excluded))


def can_draw(
    start: int,
    end: int,
    draw_count: int,
    excluded: Iterable[int],
    allow_duplicates: bool,
) -> bool:
    return remaining_count(start, end, excluded, allow_duplicates) >= draw_count


def validate_settings(settings: Settings, max_range: int = MAX_RANGE) -> ValidationResult:
    """Check draw settings, returning the message of the first failing rule.

    Rules are evaluated in order: bound ordering, positive draw count, draw
    count against the range size, range size against ``max_range``.
    """
    start = settings.start_number
    end = settings.end_number
    count = settings.draw_count

    if start > end:
        return ValidationResult(
            valid=False,
            error="Start number must be less than or equal to the end number.",
        )
    if count < 1:
        return ValidationResult(valid=False, error="Draw count must be at least 1.")

    size = total_range(start, end)
    if count > size:
        return ValidationResult(
            valid=False, error=f"Draw count cannot exceed the range ({size})."
        )
    if size > max_range:
        return ValidationResult(
            valid=False,
            error=f"Range is too large; at most {max_range} numbers are allowed.",
        )
    return ValidationResult(valid=True)


__all__ = [
    "RandomSource",
    "available_numbers",
    "sample_one",
    "sample_many",
    "total_range",
    "remaining_count",
    "can_draw",
    "validate_settings",
]
