from .participant import (  # noqa: F401
    BoundScope,
    DEFAULT_FIELDS,
    FieldNames,
    Participant,
    ParticipantPatch,
    get_field,
)
from .report import (  # noqa: F401
    CategoryAssignment,
    RunReport,
    SkippedCategory,
    ValidationFailure,
)

__all__ = [
    "BoundScope",
    "DEFAULT_FIELDS",
    "FieldNames",
    "Participant",
    "ParticipantPatch",
    "get_field",
    "CategoryAssignment",
    "RunReport",
    "SkippedCategory",
    "ValidationFailure",
]
