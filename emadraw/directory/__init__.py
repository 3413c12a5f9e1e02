"""Client for the participant directory service."""

from .api import DirectoryClient
from .auth import build_client_assertion, get_access_token, open_session

__all__ = [
    "DirectoryClient",
    "build_client_assertion",
    "get_access_token",
    "open_session",
]
