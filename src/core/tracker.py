"""
Life Tracker — Ideas, Habits and Period Reviews.

The edit operations behind the Ideas, Habits and Weekly/Monthly/Yearly
views. Each tracker reads its slot from the LocalStore, applies one change
and writes the slot back; blank input is ignored rather than rejected.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from src.core.local_store import LocalStore
from src.data.models import (
    DAYS_PER_WEEK,
    Goal,
    Habit,
    Idea,
    LearningLink,
    Period,
    ReviewCategory,
    ReviewEntry,
    TimeFrameData,
)

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Ideas
# ---------------------------------------------------------------------------


class IdeaTracker:
    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def list(self) -> list[Idea]:
        """All ideas, newest first."""
        return sorted(self._store.get_ideas(), key=lambda i: i.created_at, reverse=True)

    def add(self, text: str, created_at: str | None = None) -> Idea | None:
        if not text.strip():
            return None
        idea = Idea(id=new_id(), text=text, created_at=created_at or utc_now_iso())
        self._store.set_ideas([*self._store.get_ideas(), idea])
        logger.info("Idea added: %s", idea.id)
        return idea

    def update(self, idea_id: str, text: str) -> bool:
        if not text.strip():
            return False
        ideas = self._store.get_ideas()
        found = False
        for idea in ideas:
            if idea.id == idea_id:
                idea.text = text
                found = True
        if found:
            self._store.set_ideas(ideas)
        return found

    def delete(self, idea_id: str) -> bool:
        ideas = self._store.get_ideas()
        kept = [i for i in ideas if i.id != idea_id]
        if len(kept) == len(ideas):
            return False
        self._store.set_ideas(kept)
        return True


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------


class HabitTracker:
    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def list(self) -> list[Habit]:
        return self._store.get_habits()

    def add(self, name: str, goal: int = 5) -> Habit | None:
        """Add a habit with an empty week. Raises ValueError if goal is outside 1..7."""
        if not name.strip():
            return None
        habit = Habit(id=new_id(), name=name, goal=goal)
        self._store.set_habits([*self._store.get_habits(), habit])
        logger.info("Habit added: '%s' (%d/week)", name, goal)
        return habit

    def toggle(self, habit_id: str, day_index: int) -> Habit | None:
        """Flip one day (0 = Monday .. 6 = Sunday). Returns the updated habit."""
        if not 0 <= day_index < DAYS_PER_WEEK:
            raise ValueError(f"day_index must be 0..6, got {day_index}")
        habits = self._store.get_habits()
        for habit in habits:
            if habit.id == habit_id:
                habit.progress[day_index] = not habit.progress[day_index]
                self._store.set_habits(habits)
                return habit
        return None

    def delete(self, habit_id: str) -> bool:
        habits = self._store.get_habits()
        kept = [h for h in habits if h.id != habit_id]
        if len(kept) == len(habits):
            return False
        self._store.set_habits(kept)
        return True


# ---------------------------------------------------------------------------
# Period reviews
# ---------------------------------------------------------------------------


class ReviewTracker:
    """Goals, review entries and learning links for one period."""

    def __init__(self, store: LocalStore, period: Period) -> None:
        self._store = store
        self.period = Period(period)

    def get(self) -> TimeFrameData:
        return self._store.get_timeframe(self.period) or TimeFrameData()

    def _save(self, data: TimeFrameData) -> None:
        self._store.set_timeframe(self.period, data)

    # -- goals --

    def add_goal(self, text: str) -> Goal | None:
        if not text.strip():
            return None
        data = self.get()
        goal = Goal(id=new_id(), text=text)
        data.goals.append(goal)
        self._save(data)
        return goal

    def toggle_goal(self, goal_id: str) -> Goal | None:
        data = self.get()
        for goal in data.goals:
            if goal.id == goal_id:
                goal.completed = not goal.completed
                self._save(data)
                return goal
        return None

    def delete_goal(self, goal_id: str) -> bool:
        data = self.get()
        before = len(data.goals)
        data.goals = [g for g in data.goals if g.id != goal_id]
        if len(data.goals) == before:
            return False
        self._save(data)
        return True

    # -- review entries --

    def add_entry(self, category: ReviewCategory, text: str) -> ReviewEntry | None:
        if not text.strip():
            return None
        data = self.get()
        entry = ReviewEntry(id=new_id(), text=text)
        data.entries(category).append(entry)
        self._save(data)
        return entry

    def delete_entry(self, category: ReviewCategory, entry_id: str) -> bool:
        data = self.get()
        entries = data.entries(category)
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        setattr(data, ReviewCategory(category).value, kept)
        self._save(data)
        return True

    # -- learning links --

    def add_link(self, url: str, description: str) -> LearningLink | None:
        if not url.strip() or not description.strip():
            return None
        data = self.get()
        link = LearningLink(id=new_id(), url=url, description=description)
        data.learning_links.append(link)
        self._save(data)
        return link

    def delete_link(self, link_id: str) -> bool:
        data = self.get()
        before = len(data.learning_links)
        data.learning_links = [link for link in data.learning_links if link.id != link_id]
        if len(data.learning_links) == before:
            return False
        self._save(data)
        return True
