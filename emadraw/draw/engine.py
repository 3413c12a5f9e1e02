"""Exclusion-based random draw engine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .history import coerce_history
from ..exceptions import NothingToDrawError

logger = logging.getLogger(__name__)


class _Exhausted:
    """Sentinel returned when every value in ``[1, bound]`` is already issued."""

    _instance: Optional["_Exhausted"] = None

    def __new__(cls) -> "_Exhausted":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "EXHAUSTED"


EXHAUSTED = _Exhausted()

DrawResult = Union[int, _Exhausted]


@dataclass(frozen=True)
class DrawOutcome:
    """Value object describing a draw after the exhaustion policy was applied.

    Attributes
    ----------
    value : int
        The issued value, always within ``[1, bound]``.
    history : list[str]
        History entries to persist. The last entry is ``str(value)``.
    reset : bool
        ``True`` when the previous history covered the whole pool and was
        cleared before drawing.
    """

    value: int
    history: list[str]
    reset: bool


def draw_excluding(
    history: Iterable[object],
    bound: int,
    max_attempts: int = 10,
    rng: Optional[random.Random] = None,
) -> DrawResult:
    """Draw a uniformly random integer in ``[1, bound]`` that is not in ``history``.

    Parameters
    ----------
    history : Iterable[object]
        Previously issued values. Entries are coerced to ``int`` and anything
        that does not parse counts as ``0``.
    bound : int
        Inclusive upper limit. A bound below 1 leaves nothing to draw.
    max_attempts : int, default: 10
        Number of random picks tried before falling back to a linear scan
        for the smallest free value.
    rng : Optional[random.Random], default: None
        Random source, mostly useful for seeding in tests. The module-level
        generator is used when omitted.

    Returns
    -------
    int or EXHAUSTED
        A value absent from ``history``, or :data:`EXHAUSTED` when
        ``history`` already covers the whole range.
    """

    if bound < 1:
        return EXHAUSTED

    issued = set(coerce_history(history))
    randint = rng.randint if rng is not None else random.randint

    for _ in range(max_attempts):
        candidate = randint(1, bound)
        if candidate not in issued:
            return candidate

    for candidate in range(1, bound + 1):
        if candidate not in issued:
            return candidate

    return EXHAUSTED


def draw_with_reset(
    history: list[str],
    bound: int,
    max_attempts: int = 10,
    rng: Optional[random.Random] = None,
) -> DrawOutcome:
    """Draw the next value and clear ``history`` once the pool is exhausted.

    Raises
    ------
    NothingToDrawError
        If ``bound`` is below 1, so even a fresh pool is empty.
    """

    entries = list(history)
    reset = False
    value = draw_excluding(entries, bound, max_attempts=max_attempts, rng=rng)
    if value is EXHAUSTED:
        logger.debug(f"Pool of {bound} values exhausted; resetting history")
        entries = []
        reset = True
        value = draw_excluding(entries, bound, max_attempts=max_attempts, rng=rng)
        if value is EXHAUSTED:
            raise NothingToDrawError(f"Cannot draw from an empty pool (bound={bound})")

    entries.append(str(value))
    return DrawOutcome(value=value, history=entries, reset=reset)


__all__ = ["DrawOutcome", "DrawResult", "EXHAUSTED", "draw_excluding", "draw_with_reset"]
