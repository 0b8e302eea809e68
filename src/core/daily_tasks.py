"""
Life Tracker — Daily Planner.

Tasks carry a per-day history. A task added today gets an "open" entry for
today; marking it done records "done" for today only, so an unfinished task
rolls over into tomorrow's backlog with no entry for that day.

    pending    = open overall and not done today
    due today  = pending, with an entry for today
    backlog    = pending, with no entry for today
    done today = has a "done" entry for today
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from src.core.local_store import LocalStore
from src.core.tracker import new_id, utc_now_iso
from src.data.models import DailyTask, DailyTaskHistoryEntry

logger = logging.getLogger(__name__)


def _today(today: date | str | None) -> str:
    # UTC calendar day, the same one the web client writes into history
    if today is None:
        return datetime.now(timezone.utc).date().isoformat()
    if isinstance(today, date):
        return today.isoformat()
    return today


def _done_on(task: DailyTask, day: str) -> bool:
    entry = task.entry_for(day)
    return entry is not None and entry.status == "done"


class DailyPlanner:
    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def list(self) -> list[DailyTask]:
        return self._store.get_daily_tasks()

    def add(self, title: str, today: date | str | None = None) -> DailyTask | None:
        title = title.strip()
        if not title:
            return None
        task = DailyTask(
            id=new_id(),
            title=title,
            created_at=utc_now_iso(),
            history=[DailyTaskHistoryEntry(date=_today(today), status="open")],
        )
        self._store.set_daily_tasks([task, *self._store.get_daily_tasks()])
        logger.info("Daily task added: '%s'", title)
        return task

    def _update(self, task_id: str, change) -> DailyTask | None:
        tasks = self._store.get_daily_tasks()
        for task in tasks:
            if task.id == task_id:
                change(task)
                self._store.set_daily_tasks(tasks)
                return task
        return None

    def update_progress(
        self, task_id: str, text: str, today: date | str | None = None,
    ) -> DailyTask | None:
        """Record today's progress note. An empty note keeps the previous one."""
        day = _today(today)
        text = text.strip()

        def change(task: DailyTask) -> None:
            entry = task.entry_for(day)
            if entry is not None:
                entry.progress = text or entry.progress
            else:
                task.history.insert(0, DailyTaskHistoryEntry(date=day, status="open", progress=text))

        return self._update(task_id, change)

    def mark_done_today(self, task_id: str, today: date | str | None = None) -> DailyTask | None:
        day = _today(today)

        def change(task: DailyTask) -> None:
            entry = task.entry_for(day)
            if entry is not None:
                entry.status = "done"
            else:
                task.history.insert(0, DailyTaskHistoryEntry(date=day, status="done"))

        return self._update(task_id, change)

    def delete(self, task_id: str) -> bool:
        tasks = self._store.get_daily_tasks()
        kept = [t for t in tasks if t.id != task_id]
        if len(kept) == len(tasks):
            return False
        self._store.set_daily_tasks(kept)
        return True

    # -- views --

    def pending(self, today: date | str | None = None) -> list[DailyTask]:
        day = _today(today)
        return [t for t in self.list() if t.status == "open" and not _done_on(t, day)]

    def due_today(self, today: date | str | None = None) -> list[DailyTask]:
        day = _today(today)
        return [t for t in self.pending(day) if t.entry_for(day) is not None]

    def backlog(self, today: date | str | None = None) -> list[DailyTask]:
        day = _today(today)
        return [t for t in self.pending(day) if t.entry_for(day) is None]

    def done_today(self, today: date | str | None = None) -> list[DailyTask]:
        day = _today(today)
        return [t for t in self.list() if _done_on(t, day)]
