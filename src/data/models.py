"""
Life Tracker — Data Models.

Everything the user tracks lives in local storage as JSON. These dataclasses
are the typed view of those documents; `to_dict()` / `from_dict()` use the
wire field names so a snapshot saved by the web client and one saved here
are interchangeable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DAYS_PER_WEEK = 7
DEFAULT_HABIT_GOAL = 5

# What from_dict() raises on a document of the wrong shape
PARSE_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


class Period(str, Enum):
    """A review/goal-tracking timeframe. The value doubles as the payload key."""

    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


class ReviewCategory(str, Enum):
    ACHIEVEMENTS = "achievements"
    CHALLENGES = "challenges"
    REFLECTIONS = "reflections"
    LEARNINGS = "learnings"
    PEOPLE = "people"


CATEGORY_LABELS: dict[ReviewCategory, str] = {
    ReviewCategory.ACHIEVEMENTS: "Achievements",
    ReviewCategory.CHALLENGES: "Challenges Overcome",
    ReviewCategory.REFLECTIONS: "How I Can Become a Better Person",
    ReviewCategory.LEARNINGS: "What I Learned",
    ReviewCategory.PEOPLE: "Best People I Met & What I Learned",
}


@dataclass
class Idea:
    """A captured idea. createdAt is only used for sort order (newest first)."""

    id: str
    text: str
    created_at: str   # ISO-8601 timestamp

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "createdAt": self.created_at}

    @classmethod
    def from_dict(cls, d: dict) -> Idea:
        return cls(id=str(d["id"]), text=d.get("text", ""), created_at=d.get("createdAt", ""))


def _coerce_goal(value) -> int:
    try:
        goal = int(value)
    except (TypeError, ValueError):
        return DEFAULT_HABIT_GOAL
    return goal if 1 <= goal <= DAYS_PER_WEEK else DEFAULT_HABIT_GOAL


@dataclass
class Habit:
    """A weekly habit: a goal of N days out of 7 and one checkbox per day (Mon..Sun)."""

    id: str
    name: str
    goal: int = DEFAULT_HABIT_GOAL
    progress: list[bool] = field(default_factory=lambda: [False] * DAYS_PER_WEEK)

    def __post_init__(self) -> None:
        if not 1 <= self.goal <= DAYS_PER_WEEK:
            raise ValueError(f"Habit goal must be between 1 and 7, got {self.goal}")
        if len(self.progress) != DAYS_PER_WEEK:
            raise ValueError(
                f"Habit progress must have {DAYS_PER_WEEK} slots, got {len(self.progress)}"
            )

    @property
    def completed_count(self) -> int:
        return sum(1 for done in self.progress if done)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "goal": self.goal,
            "progress": list(self.progress),
        }

    @classmethod
    def from_dict(cls, d: dict) -> Habit:
        """Lenient read: a cleared or out-of-range goal becomes the default,
        and progress is padded or cut to one slot per day."""
        progress = [bool(p) for p in d.get("progress") or []][:DAYS_PER_WEEK]
        progress += [False] * (DAYS_PER_WEEK - len(progress))
        return cls(
            id=str(d["id"]),
            name=d.get("name", ""),
            goal=_coerce_goal(d.get("goal")),
            progress=progress,
        )


@dataclass
class Goal:
    id: str
    text: str
    completed: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "completed": self.completed}

    @classmethod
    def from_dict(cls, d: dict) -> Goal:
        return cls(id=str(d["id"]), text=d.get("text", ""), completed=bool(d.get("completed", False)))


@dataclass
class ReviewEntry:
    id: str
    text: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text}

    @classmethod
    def from_dict(cls, d: dict) -> ReviewEntry:
        return cls(id=str(d["id"]), text=d.get("text", ""))


@dataclass
class LearningLink:
    id: str
    url: str
    description: str

    def to_dict(self) -> dict:
        return {"id": self.id, "url": self.url, "description": self.description}

    @classmethod
    def from_dict(cls, d: dict) -> LearningLink:
        return cls(id=str(d["id"]), url=d.get("url", ""), description=d.get("description", ""))


@dataclass
class TimeFrameData:
    """One review document per period (Weekly, Monthly, Yearly)."""

    goals: list[Goal] = field(default_factory=list)
    achievements: list[ReviewEntry] = field(default_factory=list)
    challenges: list[ReviewEntry] = field(default_factory=list)
    reflections: list[ReviewEntry] = field(default_factory=list)
    learnings: list[ReviewEntry] = field(default_factory=list)
    people: list[ReviewEntry] = field(default_factory=list)
    learning_links: list[LearningLink] = field(default_factory=list)

    def entries(self, category: ReviewCategory) -> list[ReviewEntry]:
        return getattr(self, ReviewCategory(category).value)

    def to_dict(self) -> dict:
        d: dict = {"goals": [g.to_dict() for g in self.goals]}
        for category in ReviewCategory:
            d[category.value] = [e.to_dict() for e in self.entries(category)]
        d["learningLinks"] = [link.to_dict() for link in self.learning_links]
        return d

    @classmethod
    def from_dict(cls, d: dict) -> TimeFrameData:
        data = cls(
            goals=[Goal.from_dict(g) for g in d.get("goals") or []],
            learning_links=[LearningLink.from_dict(link) for link in d.get("learningLinks") or []],
        )
        for category in ReviewCategory:
            setattr(
                data,
                category.value,
                [ReviewEntry.from_dict(e) for e in d.get(category.value) or []],
            )
        return data


@dataclass
class DailyTaskHistoryEntry:
    date: str                      # YYYY-MM-DD
    status: str = "open"           # "open" | "done"
    progress: str | None = None

    def to_dict(self) -> dict:
        d = {"date": self.date, "status": self.status}
        if self.progress is not None:
            d["progress"] = self.progress
        return d

    @classmethod
    def from_dict(cls, d: dict) -> DailyTaskHistoryEntry:
        return cls(date=d["date"], status=d.get("status", "open"), progress=d.get("progress"))


@dataclass
class DailyTask:
    """A task on the daily planner. Local only — never part of the cloud payload.

    The history holds at most one entry per day, newest first.
    """

    id: str
    title: str
    created_at: str
    status: str = "open"
    history: list[DailyTaskHistoryEntry] = field(default_factory=list)

    def entry_for(self, day: str) -> DailyTaskHistoryEntry | None:
        for entry in self.history:
            if entry.date == day:
                return entry
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "createdAt": self.created_at,
            "status": self.status,
            "history": [h.to_dict() for h in self.history],
        }

    @classmethod
    def from_dict(cls, d: dict) -> DailyTask:
        return cls(
            id=str(d["id"]),
            title=d.get("title", ""),
            created_at=d.get("createdAt", ""),
            status=d.get("status", "open"),
            history=[DailyTaskHistoryEntry.from_dict(h) for h in d.get("history") or []],
        )


@dataclass
class SyncPayload:
    """The snapshot exchanged with the cloud: ideas, habits and the three period reviews."""

    ideas: list[Idea] = field(default_factory=list)
    habits: list[Habit] = field(default_factory=list)
    weekly: TimeFrameData | None = None
    monthly: TimeFrameData | None = None
    yearly: TimeFrameData | None = None

    def timeframe(self, period: Period) -> TimeFrameData | None:
        return getattr(self, Period(period).value.lower())

    def to_dict(self) -> dict:
        d: dict = {
            "ideas": [i.to_dict() for i in self.ideas],
            "habits": [h.to_dict() for h in self.habits],
        }
        for period in Period:
            data = self.timeframe(period)
            d[period.value] = data.to_dict() if data is not None else None
        return d

    @classmethod
    def from_dict(cls, d: dict) -> SyncPayload:
        periods = {
            period.value.lower(): TimeFrameData.from_dict(d[period.value])
            for period in Period
            if d.get(period.value) is not None
        }
        return cls(
            ideas=[Idea.from_dict(i) for i in d.get("ideas") or []],
            habits=[Habit.from_dict(h) for h in d.get("habits") or []],
            **periods,
        )


@dataclass
class UserDataRow:
    """One row of the remote store: the latest snapshot saved under a user id."""

    user_id: str
    data: dict
    updated_at: str
