"""Helpers for reading and writing the comma-joined draw history fields."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence, Union


def safe_int(value: Any, default: int) -> int:
    """Convert ``value`` to ``int`` returning ``default`` when it cannot be parsed.

    Parameters
    ----------
    value : Any
        Raw field value, usually a string read from the participant record.
    default : int
        Value returned for ``None`` or malformed input.
    """

    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def parse_history(raw: Optional[str]) -> list[str]:
    """Split a stored history field into its entries.

    ``None`` and the empty string both mean "no history". Entries are kept
    verbatim so that the joined value written back only differs by the newly
    appended draw.
    """

    if not raw:
        return []
    return raw.split(",")


def join_history(entries: Sequence[Union[str, int]]) -> str:
    """Render history entries as the comma-joined string stored remotely."""

    return ",".join(str(entry) for entry in entries)


def coerce_history(entries: Iterable[Any]) -> list[int]:
    """Coerce every history entry to an integer, substituting 0 for junk."""

    return [safe_int(entry, 0) for entry in entries]


__all__ = ["coerce_history", "join_history", "parse_history", "safe_int"]
