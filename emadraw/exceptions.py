"""Exceptions raised while assigning EMA draws."""

from __future__ import annotations

from typing import Optional


class EmaDrawError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(EmaDrawError):
    """Required credentials or settings are missing."""


class AuthenticationError(EmaDrawError):
    """The directory did not hand out a usable access token."""


class NothingToDrawError(EmaDrawError):
    """The draw bound leaves no value to issue, even after a reset."""


class DirectorySubmissionError(EmaDrawError):
    """Writing a participant update back to the directory failed."""


class ParticipantValidationError(EmaDrawError, ValueError):
    """A participant record carries a category count that is not an integer.

    Attributes
    ----------
    participant_id : str
        Identifier of the offending participant.
    raw_value : Optional[str]
        The value found in the category count field, ``None`` when absent.
    """

    def __init__(
        self, participant_id: str, raw_value: Optional[str], message: str
    ) -> None:
        super().__init__(message)
        self.participant_id = participant_id
        self.raw_value = raw_value
        self.message = message


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "DirectorySubmissionError",
    "EmaDrawError",
    "NothingToDrawError",
    "ParticipantValidationError",
]
