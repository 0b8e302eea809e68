"""
Life Tracker — Cloud Sync Service.

What the "Save" / "Load" / "New" buttons next to the Cloud Sync ID do.
Every outcome is a short status message for the user; nothing raises.
Local storage stays authoritative: a failed load changes nothing locally.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from src.core.snapshot import apply_payload, build_payload
from src.data.models import PARSE_ERRORS

if TYPE_CHECKING:
    from src.core.local_store import LocalStore
    from src.ports.sync_port import SyncPort

logger = logging.getLogger(__name__)

MSG_NO_USER_ID = "Set a user id first"
MSG_SAVED = "Saved to cloud"
MSG_SAVE_FAILED = "Save failed"
MSG_NOTHING_FOUND = "Nothing found"
MSG_LOADED = "Loaded from cloud"
MSG_INVALID_SNAPSHOT = "Cloud data is invalid"


class SyncService:
    """Pushes/pulls the full local snapshot through a SyncPort."""

    def __init__(self, store: LocalStore, client: SyncPort) -> None:
        self._store = store
        self._client = client

    @property
    def user_id(self) -> str:
        return self._store.get_user_id()

    def set_user_id(self, user_id: str) -> None:
        self._store.set_user_id(user_id.strip())

    def generate_user_id(self) -> str:
        """Create a fresh random sync id and remember it locally."""
        user_id = str(uuid.uuid4())
        self._store.set_user_id(user_id)
        logger.info("Generated new sync id %s", user_id)
        return user_id

    async def save(self) -> str:
        user_id = self.user_id
        if not user_id:
            return MSG_NO_USER_ID

        try:
            payload = build_payload(self._store)
        except PARSE_ERRORS as exc:
            logger.warning("Local data for '%s' could not be snapshotted: %s", user_id, exc)
            return MSG_SAVE_FAILED

        result = await self._client.save(user_id, payload)
        if result.ok:
            return MSG_SAVED
        return result.message or MSG_SAVE_FAILED

    async def load(self) -> str:
        user_id = self.user_id
        if not user_id:
            return MSG_NO_USER_ID

        data = await self._client.load(user_id)
        if data is None:
            return MSG_NOTHING_FOUND

        try:
            apply_payload(self._store, data)
        except PARSE_ERRORS as exc:
            logger.warning("Cloud snapshot for '%s' could not be applied: %s", user_id, exc)
            return MSG_INVALID_SNAPSHOT
        return MSG_LOADED
