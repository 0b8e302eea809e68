"""
Life Tracker — Local Persistence Service.

The single place that knows the local storage keys. Every slot has a typed
getter and setter; setters notify subscribers so other parts of the app
(e.g. a sidebar badge counting today's tasks) can react to changes without
polling storage.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from src.data.models import PARSE_ERRORS, DailyTask, Habit, Idea, Period, TimeFrameData
from src.ports.storage_port import StoragePort

logger = logging.getLogger(__name__)

KEY_PREFIX = "life-tracker-"
IDEAS_KEY = f"{KEY_PREFIX}ideas"
HABITS_KEY = f"{KEY_PREFIX}habits"
USER_ID_KEY = f"{KEY_PREFIX}user-id"
DAILY_TASKS_KEY = f"{KEY_PREFIX}daily-tasks"


def timeframe_key(period: Period) -> str:
    return f"{KEY_PREFIX}{Period(period).value}"


def default_habits() -> list[Habit]:
    """The starter habits shown before the user has saved any of their own."""
    return [
        Habit(id="h1", name="Exercise for 30 minutes", goal=5),
        Habit(id="h2", name="Read 10 pages of a book", goal=7),
        Habit(id="h3", name="Meditate for 10 minutes", goal=7),
        Habit(id="h4", name="Practice a skill for 20 minutes", goal=4),
    ]


Listener = Callable[[str, Any], None]


class LocalStore:
    """Typed get/set per named slot on top of a StoragePort."""

    def __init__(self, storage: StoragePort) -> None:
        self._storage = storage
        self._listeners: list[Listener] = []

    # -- subscription -----------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener(key, value) for every write. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str, value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, value)
            except Exception:
                logger.exception("Store listener failed for key %s", key)

    # -- raw JSON slots ---------------------------------------------------

    def _read_json(self, key: str, default: Any) -> Any:
        raw = self._storage.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Corrupt JSON in local slot %s, using default", key)
            return default

    def _read_list(self, key: str, item_type: Any, default: list) -> list:
        """Read a JSON array slot as item_type.from_dict() objects.

        Anything but a well-formed array gives back default. Corrupt JSON
        and documents of the wrong shape are logged first.
        """
        raw = self._read_json(key, None)
        if raw is None:
            return default
        try:
            if not isinstance(raw, list):
                raise TypeError(f"expected a list, got {type(raw).__name__}")
            return [item_type.from_dict(item) for item in raw]
        except PARSE_ERRORS as exc:
            logger.warning("Malformed data in local slot %s, using default: %s", key, exc)
            return default

    def _write_json(self, key: str, value: Any, notify_value: Any) -> None:
        self._storage.set_item(key, json.dumps(value))
        self._notify(key, notify_value)

    # -- ideas ------------------------------------------------------------

    def get_ideas(self) -> list[Idea]:
        return self._read_list(IDEAS_KEY, Idea, [])

    def set_ideas(self, ideas: list[Idea]) -> None:
        self._write_json(IDEAS_KEY, [i.to_dict() for i in ideas], ideas)

    # -- habits -----------------------------------------------------------

    def get_habits(self) -> list[Habit]:
        return self._read_list(HABITS_KEY, Habit, default_habits())

    def set_habits(self, habits: list[Habit]) -> None:
        self._write_json(HABITS_KEY, [h.to_dict() for h in habits], habits)

    # -- period reviews ---------------------------------------------------

    def get_timeframe(self, period: Period) -> TimeFrameData | None:
        """Return the review document for period, or None if it was never written."""
        raw = self._read_json(timeframe_key(period), None)
        if raw is None:
            return None
        try:
            return TimeFrameData.from_dict(raw)
        except PARSE_ERRORS as exc:
            logger.warning("Malformed review in local slot %s, ignoring it: %s", timeframe_key(period), exc)
            return None

    def set_timeframe(self, period: Period, data: TimeFrameData) -> None:
        self._write_json(timeframe_key(period), data.to_dict(), data)

    # -- user id ----------------------------------------------------------

    def get_user_id(self) -> str:
        return self._storage.get_item(USER_ID_KEY) or ""

    def set_user_id(self, user_id: str) -> None:
        # Stored as a bare string, not JSON, like the web client does
        if user_id:
            self._storage.set_item(USER_ID_KEY, user_id)
        else:
            self._storage.remove_item(USER_ID_KEY)
        self._notify(USER_ID_KEY, user_id)

    # -- daily tasks ------------------------------------------------------

    def get_daily_tasks(self) -> list[DailyTask]:
        return self._read_list(DAILY_TASKS_KEY, DailyTask, [])

    def set_daily_tasks(self, tasks: list[DailyTask]) -> None:
        self._write_json(DAILY_TASKS_KEY, [t.to_dict() for t in tasks], tasks)
