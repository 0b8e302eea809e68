"""HTTP sync client — implements SyncPort against the sync server REST API.

POST {base}/api/sync/save   body {"userId": ..., "data": {...}}
GET  {base}/api/sync/load?userId=...

Gracefully degrades: every failure (no base URL, timeout, HTTP error,
invalid response) becomes a return value, never an exception.
"""

from __future__ import annotations

import logging

import httpx

from src.data.models import SyncPayload
from src.ports.sync_port import SyncResult

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "API is not configured"
_DEFAULT_FAILURE_MESSAGE = "Failed to sync"


class HttpSyncClient:
    """httpx implementation of SyncPort."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        if base_url is None or timeout is None:
            from src.config import settings

            if base_url is None:
                base_url = settings.SYNC_API_BASE_URL
            if timeout is None:
                timeout = settings.SYNC_TIMEOUT_SECONDS

        self._base_url = (base_url or "").rstrip("/")
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    async def save(self, user_id: str, payload: SyncPayload | dict) -> SyncResult:
        """Replace the remote snapshot for user_id with payload."""
        if not self.configured:
            return SyncResult(ok=False, message=NOT_CONFIGURED_MESSAGE)
        if not user_id:
            return SyncResult(ok=False, message="userId is required")

        data = payload.to_dict() if isinstance(payload, SyncPayload) else payload
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    f"{self._base_url}/api/sync/save",
                    json={"userId": user_id, "data": data},
                )
            if resp.is_error:
                logger.warning("Cloud save for '%s' failed: HTTP %d", user_id, resp.status_code)
                return SyncResult(ok=False, message=resp.text or _DEFAULT_FAILURE_MESSAGE)
        except Exception as exc:
            logger.warning("Cloud save for '%s' failed: %s", user_id, exc)
            return SyncResult(ok=False, message=str(exc) or _DEFAULT_FAILURE_MESSAGE)

        logger.info("Snapshot pushed to cloud for '%s'", user_id)
        return SyncResult(ok=True)

    async def load(self, user_id: str) -> dict | None:
        """Fetch the remote snapshot for user_id — or None on any failure or miss."""
        if not self.configured or not user_id:
            return None

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.get(
                    f"{self._base_url}/api/sync/load",
                    params={"userId": user_id},
                )
            if resp.status_code == 404:
                logger.info("No cloud snapshot for '%s'", user_id)
                return None
            resp.raise_for_status()
            body = resp.json()
        except Exception as exc:
            logger.warning("Cloud load for '%s' failed: %s", user_id, exc)
            return None

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            logger.warning("Cloud load for '%s' returned no data object", user_id)
            return None
        return data
