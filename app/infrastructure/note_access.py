"""Client that asks the notes service to grant a user access to a note."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)


class NotesServiceAccessGrantor:
    """Grant note access through the notes service HTTP API.

    ``grant_access`` never raises: failures are logged and reported as
    ``False`` so an accepted share request stays accepted and the grant can be
    retried.
    """

    def __init__(
        self,
        base_url: str | None,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    def grant_access(self, note_id: str, grantee_email: str, owner_email: str) -> bool:
        if not self._base_url:
            logger.info(
                "Notes service URL not configured; skipping access grant for note %s",
                note_id,
            )
            return False

        url = f"{self._base_url}/notes/{quote(note_id, safe='')}/share"
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    url,
                    json={"note_id": note_id, "emails": [grantee_email]},
                    headers={"X-User-Email": owner_email},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Access grant for note %s to %s failed: %s", note_id, grantee_email, exc)
            return False

        if not response.is_success:
            logger.error(
                "Notes service responded with status %s while granting note %s to %s",
                response.status_code,
                note_id,
                grantee_email,
            )
            return False

        logger.info("Granted access to note %s for %s", note_id, grantee_email)
        return True


def get_access_grantor() -> NotesServiceAccessGrantor:
    """Build a grantor from the configured settings."""

    settings = get_settings()
    return NotesServiceAccessGrantor(
        settings.notes_service_url, timeout=settings.notes_service_timeout
    )


__all__ = ["NotesServiceAccessGrantor", "get_access_grantor"]
