import logging
from urllib.parse import urljoin
from typing import Any, Mapping, Optional

import requests

from .auth import open_session, get_access_token
from ..config import DirectorySettings
from ..exceptions import AuthenticationError, DirectorySubmissionError
from ..models import Participant, ParticipantPatch

logger = logging.getLogger(__name__)


class DirectoryClient:
    def __init__(self, settings: DirectorySettings, timeout: int = 45):
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.timeout = timeout
        self.session = open_session()
        self.token = get_access_token(
            self.session,
            settings.service_account,
            settings.private_key,
            settings.token_url,
            timeout=timeout,
        )
        if self.token is None:
            raise AuthenticationError("Could not obtain a directory access token")

    # -------- headers --------
    @property
    def auth_headers(self) -> Mapping[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.token}",
        }

    @property
    def project_path(self) -> str:
        return f"/api/v1/administration/projects/{self.settings.project_id}"

    # -------- core request --------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        url = urljoin(self.base_url + "/", path.lstrip("/"))
        r = self.session.request(
            method=method.upper(),
            url=url,
            headers=self.auth_headers,
            params=params,
            json=json,
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json() if r.content else None

    # -------- API callers --------
    def list_participants(self, page_size: int = 100) -> list[Participant]:
        """Return a full snapshot of the project's participants.

        Pages are requested until ``totalParticipants`` records have been read
        or the directory returns an empty page.
        """
        participants: list[Participant] = []
        page_number = 0
        while True:
            payload = self._request(
                "GET",
                f"{self.project_path}/participants",
                params={"pageNumber": page_number, "pageSize": page_size},
            ) or {}
            page = payload.get("participants") or []
            participants.extend(Participant.from_api(item) for item in page)
            total = payload.get("totalParticipants")
            if not page or total is None or len(participants) >= int(total):
                break
            page_number += 1

        logger.info(f"Fetched {len(participants)} participants")
        return participants

    def update_participant(self, patch: ParticipantPatch) -> Any:
        """Send a partial update; only the listed custom fields change.

        Raises
        ------
        DirectorySubmissionError
            If the directory rejects the update or cannot be reached.
        """
        try:
            return self._request(
                "PUT",
                f"{self.project_path}/participants",
                json=patch.to_payload(),
            )
        except requests.RequestException as e:
            logger.error(f"Update of participant {patch.participant_id} failed: {e}")
            raise DirectorySubmissionError(
                f"Failed to update participant {patch.participant_id}: {e}"
            ) from e
