"""Non-repeating random draws for EMA categories."""

from .engine import EXHAUSTED, DrawOutcome, draw_excluding, draw_with_reset
from .history import coerce_history, join_history, parse_history, safe_int

__all__ = [
    "EXHAUSTED",
    "DrawOutcome",
    "coerce_history",
    "draw_excluding",
    "draw_with_reset",
    "join_history",
    "parse_history",
    "safe_int",
]
