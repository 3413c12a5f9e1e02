"""Value objects describing what a run did."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CategoryAssignment:
    """A draw issued and submitted for one (participant, category) pair."""

    participant_id: str
    category: int
    value: int
    history: str
    reset: bool = False


@dataclass(frozen=True)
class ValidationFailure:
    """A participant whose category count could not be parsed."""

    participant_id: str
    raw_value: Optional[str]
    message: str


@dataclass(frozen=True)
class SkippedCategory:
    """A category left untouched because its bound leaves nothing to draw."""

    participant_id: str
    category: int
    bound: int


@dataclass
class RunReport:
    """Aggregate outcome of :func:`emadraw.workflows.run_assignment`.

    Attributes
    ----------
    participants_seen : int
        Number of participants the run started processing.
    participants_completed : int
        Participants whose every category was handled.
    assignments : list[CategoryAssignment]
        Draws submitted to the directory, in submission order.
    failures : list[ValidationFailure]
        Participants rejected during validation.
    skipped : list[SkippedCategory]
        Categories with a bound below 1.
    aborted : bool
        ``True`` when the run stopped early on a validation failure.
    """

    participants_seen: int = 0
    participants_completed: int = 0
    assignments: list[CategoryAssignment] = field(default_factory=list)
    failures: list[ValidationFailure] = field(default_factory=list)
    skipped: list[SkippedCategory] = field(default_factory=list)
    aborted: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.aborted and not self.failures

    def summary(self) -> str:
        return (
            f"participants={self.participants_seen} "
            f"completed={self.participants_completed} "
            f"draws={len(self.assignments)} "
            f"resets={sum(1 for a in self.assignments if a.reset)} "
            f"skipped={len(self.skipped)} "
            f"failures={len(self.failures)} "
            f"aborted={self.aborted}"
        )


__all__ = ["CategoryAssignment", "RunReport", "SkippedCategory", "ValidationFailure"]
