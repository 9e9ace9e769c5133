from __future__ import annotations
import logging
from typing import Optional

import requests

from discord_notify.errors import HttpError, MalformedResponseError

logger = logging.getLogger(__name__)

API_BASE = "https://discord.com/api/v9"
DEFAULT_TIMEOUT = 10  # seconds, applied per request

CHANNEL_OPEN = "channel-open"
MESSAGE_POST = "message-post"


class DiscordClient:
    """Minimal bot-authenticated client for the two REST calls we need.

    ``session`` only has to provide ``post(url, json=, headers=, timeout=)``
    returning an object with ``status_code``, ``text`` and ``json()``, so
    tests can hand in an in-memory double.
    """

    def __init__(self, token: str, session=None, base_url: str = API_BASE, timeout: float = DEFAULT_TIMEOUT):
        self._token = token
        self.session = session if session is not None else requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def headers(self) -> dict:
        return {"authorization": f"Bot {self._token}"}

    def _post(self, stage: str, path: str, payload: dict):
        url = f"{self.base_url}{path}"
        logger.debug(f"POST {url}")
        try:
            r = self.session.post(url, json=payload, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise HttpError(stage, cause=e) from e

        if not 200 <= r.status_code < 300:
            raise HttpError(stage, status=r.status_code, detail=_error_detail(r))
        return r

    def open_dm_channel(self, recipient_id: str) -> str:
        """Open (or fetch) the DM channel with ``recipient_id`` and return its id."""
        r = self._post(CHANNEL_OPEN, "/users/@me/channels", {"recipient_id": recipient_id})
        try:
            body = r.json()
        except ValueError as e:
            raise MalformedResponseError(CHANNEL_OPEN, "response body is not JSON") from e

        channel_id = body.get("id") if isinstance(body, dict) else None
        if not isinstance(channel_id, str) or not channel_id:
            raise MalformedResponseError(CHANNEL_OPEN, "response has no string 'id' field")
        return channel_id

    def post_message(self, channel_id: str, content: str) -> None:
        self._post(MESSAGE_POST, f"/channels/{channel_id}/messages", {"content": content})

    def close(self) -> None:
        self.session.close()


def _error_detail(r, limit: int = 200) -> str:
    # Discord error bodies look like {"message": "...", "code": 50001}
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return (r.text or "").strip()[:limit]
