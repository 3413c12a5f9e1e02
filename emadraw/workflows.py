import logging
import random
from typing import TYPE_CHECKING, Optional

from .draw import draw_with_reset, join_history, parse_history, safe_int
from .exceptions import NothingToDrawError, ParticipantValidationError
from .models import (
    BoundScope,
    CategoryAssignment,
    DEFAULT_FIELDS,
    FieldNames,
    Participant,
    ParticipantPatch,
    RunReport,
    SkippedCategory,
    ValidationFailure,
    get_field,
)

if TYPE_CHECKING:
    from .directory.api import DirectoryClient

logger = logging.getLogger(__name__)

VALIDATION_FAILED_MESSAGE = (
    "failed - Check value for EMA Category. It should be an Integer. "
    "Make sure there are no leading or trailing spaces"
)


def parse_category_count(
    participant: Participant, fields: FieldNames = DEFAULT_FIELDS
) -> int:
    """Read the number of EMA categories declared for ``participant``.

    Raises
    ------
    ParticipantValidationError
        If the field is absent or does not hold an integer.
    """
    raw = get_field(participant, fields.category_count)
    if raw is None:
        raise ParticipantValidationError(participant.id, raw, VALIDATION_FAILED_MESSAGE)
    try:
        return int(raw)
    except ValueError as e:
        raise ParticipantValidationError(
            participant.id, raw, VALIDATION_FAILED_MESSAGE
        ) from e


def resolve_bound(
    participant: Participant,
    index: int,
    fields: FieldNames = DEFAULT_FIELDS,
    scope: BoundScope = BoundScope.PARTICIPANT,
) -> int:
    """Return the inclusive draw bound for category ``index``; 0 when unset."""
    if scope is BoundScope.CATEGORY:
        per_category = get_field(participant, fields.bound_key(index))
        if per_category is not None:
            return safe_int(per_category, 0)
    return safe_int(get_field(participant, fields.bound), 0)


def create_participant_error(
    participant: Participant, message: str, fields: FieldNames = DEFAULT_FIELDS
) -> ParticipantPatch:
    """Build the status update reporting a validation failure on ``participant``."""
    return ParticipantPatch(
        participant_id=participant.id,
        custom_fields={fields.status: message},
    )


def assign_participant(
    client: "DirectoryClient",
    participant: Participant,
    *,
    fields: FieldNames = DEFAULT_FIELDS,
    bound_scope: BoundScope = BoundScope.PARTICIPANT,
    max_attempts: int = 10,
    rng: Optional[random.Random] = None,
    report: Optional[RunReport] = None,
) -> list[CategoryAssignment]:
    """Draw and submit the next value for every category of ``participant``.

    Categories are processed in ascending order from 1 to the declared
    count, and each update is submitted before the next category is read.
    Categories whose bound is below 1 are skipped without an update.

    Parameters
    ----------
    client : DirectoryClient
        Directory receiving one partial update per category.
    participant : Participant
        Participant snapshot taken at the start of the run.
    fields : FieldNames
        Field-naming contract.
    bound_scope : BoundScope
        Whether the bound is shared by all categories or read per category.
    max_attempts : int
        Random picks tried before the linear fallback scan.
    rng : Optional[random.Random]
        Random source; the module-level generator when omitted.
    report : Optional[RunReport]
        Report to record assignments and skipped categories on.

    Returns
    -------
    list[CategoryAssignment]
        The assignments submitted for this participant.

    Raises
    ------
    ParticipantValidationError
        If the category count is not an integer. Nothing is submitted.
    DirectorySubmissionError
        If an update cannot be written back. Earlier categories stay written.
    """
    category_count = parse_category_count(participant, fields)

    assignments: list[CategoryAssignment] = []
    for index in range(1, category_count + 1):
        history = parse_history(get_field(participant, fields.history_key(index)))
        bound = resolve_bound(participant, index, fields, bound_scope)

        try:
            outcome = draw_with_reset(history, bound, max_attempts=max_attempts, rng=rng)
        except NothingToDrawError:
            logger.warning(
                f"Participant {participant.id} category {index} has nothing to draw; skipped"
            )
            if report is not None:
                report.skipped.append(SkippedCategory(participant.id, index, bound))
            continue

        joined = join_history(outcome.history)
        client.update_participant(
            ParticipantPatch(
                participant_id=participant.id,
                custom_fields={
                    fields.history_key(index): joined,
                    fields.issued_key(index): str(outcome.value),
                },
            )
        )
        assignment = CategoryAssignment(
            participant_id=participant.id,
            category=index,
            value=outcome.value,
            history=joined,
            reset=outcome.reset,
        )
        assignments.append(assignment)
        if report is not None:
            report.assignments.append(assignment)
        if outcome.reset:
            logger.info(f"Participant {participant.id} category {index} pool reset")

    return assignments


def run_assignment(
    client: "DirectoryClient",
    *,
    fields: FieldNames = DEFAULT_FIELDS,
    bound_scope: BoundScope = BoundScope.PARTICIPANT,
    max_attempts: int = 10,
    abort_on_invalid: bool = False,
    rng: Optional[random.Random] = None,
) -> RunReport:
    """Assign the next EMA draw to every category of every participant.

    The workflow processes participants one at a time:

    1. Validate the category count. On failure, write the status message to
       the participant's status field.
    2. Otherwise draw and submit each category through
       :func:`assign_participant`.

    By default a validation failure is recorded and the run moves on to the
    next participant. With ``abort_on_invalid`` the first failure stops the
    whole run, which matches how the assigner originally behaved.

    Directory errors are not caught here. They propagate to the caller.

    Returns
    -------
    RunReport
        Assignments, validation failures and skipped categories of the run.
    """
    report = RunReport()
    participants = client.list_participants()

    for participant in participants:
        report.participants_seen += 1
        try:
            assign_participant(
                client,
                participant,
                fields=fields,
                bound_scope=bound_scope,
                max_attempts=max_attempts,
                rng=rng,
                report=report,
            )
        except ParticipantValidationError as e:
            logger.error(
                f"Participant {participant.id} has an invalid category count"
            )
            client.update_participant(
                create_participant_error(participant, e.message, fields)
            )
            report.failures.append(
                ValidationFailure(participant.id, e.raw_value, e.message)
            )
            if abort_on_invalid:
                logger.error("Aborting run on first invalid participant")
                report.aborted = True
                break
            continue

        report.participants_completed += 1

    logger.info(f"Run finished: {report.summary()}")
    return report


__all__ = [
    "VALIDATION_FAILED_MESSAGE",
    "assign_participant",
    "create_participant_error",
    "parse_category_count",
    "resolve_bound",
    "run_assignment",
]
