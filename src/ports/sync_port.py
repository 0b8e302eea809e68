"""Sync port — abstract interface for pushing/pulling snapshots to the cloud.

Core modules depend on this protocol, never on a specific transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from src.data.models import SyncPayload


@dataclass
class SyncResult:
    """Outcome of a save: never raised, always returned."""

    ok: bool
    message: str | None = None


class SyncPort(Protocol):
    """Abstract cloud sync interface used by core modules."""

    async def save(self, user_id: str, payload: SyncPayload | dict) -> SyncResult: ...

    async def load(self, user_id: str) -> dict | None: ...
