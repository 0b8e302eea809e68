"""
Life Tracker — Snapshot boundary.

build_payload() gathers the synced slots of the local store into one
SyncPayload; apply_payload() writes a loaded payload back slot by slot.
Daily tasks and the user id are local only and never cross this boundary.
"""

from __future__ import annotations

import logging

from src.core.local_store import HABITS_KEY, IDEAS_KEY, LocalStore, timeframe_key
from src.data.models import Period, SyncPayload

logger = logging.getLogger(__name__)


def build_payload(store: LocalStore) -> SyncPayload:
    """Snapshot ideas, habits and the three period reviews."""
    return SyncPayload(
        ideas=store.get_ideas(),
        habits=store.get_habits(),
        weekly=store.get_timeframe(Period.WEEKLY),
        monthly=store.get_timeframe(Period.MONTHLY),
        yearly=store.get_timeframe(Period.YEARLY),
    )


def apply_payload(store: LocalStore, payload: SyncPayload | dict) -> list[str]:
    """Overwrite local slots from a loaded payload. Returns the keys written.

    Ideas and habits are always written (an empty list if the payload has
    none). A period is only written when the payload carries a document for
    it; otherwise the local review is left untouched.

    Raises one of models.PARSE_ERRORS if a dict payload is malformed,
    before any slot is written. Habits with a cleared or out-of-range goal
    are not malformed: they load with the default goal.
    """
    if isinstance(payload, dict):
        payload = SyncPayload.from_dict(payload)

    store.set_ideas(payload.ideas)
    store.set_habits(payload.habits)
    written = [IDEAS_KEY, HABITS_KEY]

    for period in Period:
        data = payload.timeframe(period)
        if data is None:
            continue
        store.set_timeframe(period, data)
        written.append(timeframe_key(period))

    logger.info("Applied snapshot to %d local slots", len(written))
    return written
