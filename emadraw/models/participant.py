from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class BoundScope(str, Enum):
    """Where the draw bound for a category is read from.

    ``PARTICIPANT`` reads one bound field shared by all categories of a
    participant. ``CATEGORY`` reads ``<bound field><index>`` first and falls
    back to the shared field when the per-category one is absent.
    """

    PARTICIPANT = "participant"
    CATEGORY = "category"


@dataclass(frozen=True)
class FieldNames:
    """Names of the participant custom fields read and written by a run."""

    category_count: str = "ema_categories"
    bound: str = "ema_max"
    history_prefix: str = "ema_metadata"
    issued_prefix: str = "ema_random"
    status: str = "ema_status"

    def history_key(self, index: int) -> str:
        return f"{self.history_prefix}{index}"

    def issued_key(self, index: int) -> str:
        return f"{self.issued_prefix}{index}"

    def bound_key(self, index: int) -> str:
        return f"{self.bound}{index}"


DEFAULT_FIELDS = FieldNames()


@dataclass(frozen=True)
class Participant:
    """A participant record as returned by the directory.

    Attributes
    ----------
    id : str
        Directory-wide unique and stable identifier.
    identifier : Optional[str]
        Human facing participant identifier, when the directory provides one.
    custom_fields : Mapping[str, Optional[str]]
        Custom field values keyed by field name. Presence is not guaranteed.
    """

    id: str
    identifier: Optional[str] = None
    custom_fields: Mapping[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Participant":
        """Build a :class:`Participant` from a directory JSON object."""

        if "id" not in payload or payload["id"] is None:
            raise ValueError("Participant payload does not include an id")
        return cls(
            id=str(payload["id"]),
            identifier=payload.get("participantIdentifier"),
            custom_fields=dict(payload.get("customFields") or {}),
        )


def get_field(participant: Participant, key: str) -> Optional[str]:
    """Return the custom field ``key`` of ``participant`` or ``None`` if absent."""

    value = participant.custom_fields.get(key)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class ParticipantPatch:
    """Partial update; only the listed custom fields are modified remotely."""

    participant_id: str
    custom_fields: Mapping[str, str]

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.participant_id, "customFields": dict(self.custom_fields)}


__all__ = [
    "BoundScope",
    "DEFAULT_FIELDS",
    "FieldNames",
    "Participant",
    "ParticipantPatch",
    "get_field",
]
