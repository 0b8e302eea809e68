"""
Life Tracker — Command line.

    python main.py serve                      run the cloud sync API
    python main.py id [--new | --set ID | --clear]
    python main.py save | load                push / pull the local snapshot
    python main.py ideas list | add TEXT | edit ID TEXT | delete ID
    python main.py habits list | add NAME [--goal N] | toggle ID DAY | delete ID | suggest
    python main.py review PERIOD show
    python main.py review PERIOD goal add TEXT | toggle ID | delete ID
    python main.py review PERIOD entry add CATEGORY TEXT | delete CATEGORY ID
    python main.py review PERIOD link add URL DESCRIPTION | delete ID
    python main.py daily list | add TITLE | progress ID TEXT | done ID | delete ID
    python main.py analyze                    AI analysis of weekly + monthly reviews
    python main.py quote
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from src.adapters.http_sync_client import HttpSyncClient
from src.adapters.local_storage import JsonFileStorage
from src.core import coach
from src.core.daily_tasks import DailyPlanner
from src.core.local_store import LocalStore
from src.core.sync_service import SyncService
from src.core.tracker import HabitTracker, IdeaTracker, ReviewTracker
from src.data.models import CATEGORY_LABELS, DAYS_PER_WEEK, Period, ReviewCategory

logger = logging.getLogger(__name__)

_DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
_PERIODS = {p.value.lower(): p for p in Period}
_CATEGORIES = [c.value for c in ReviewCategory]


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="life-tracker", description="Personal life tracker with optional cloud sync.")
    ap.add_argument("--store", default=None, help="Local store JSON file (default: LOCAL_STORE_PATH)")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the cloud sync API server")
    serve.add_argument("--host", default=None, help="Bind address (default: SERVER_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: SERVER_PORT)")

    id_cmd = sub.add_parser("id", help="Show or change the cloud sync id")
    group = id_cmd.add_mutually_exclusive_group()
    group.add_argument("--new", action="store_true", help="Generate a new random id")
    group.add_argument("--set", dest="value", default=None, help="Use this id")
    group.add_argument("--clear", action="store_true", help="Forget the sync id")

    sub.add_parser("save", help="Save the local snapshot to the cloud")
    sub.add_parser("load", help="Replace local data with the cloud snapshot")

    ideas = sub.add_parser("ideas", help="Capture and edit ideas")
    ideas_sub = ideas.add_subparsers(dest="action", required=True)
    ideas_sub.add_parser("list")
    ideas_sub.add_parser("add").add_argument("text")
    ideas_edit = ideas_sub.add_parser("edit")
    ideas_edit.add_argument("idea_id")
    ideas_edit.add_argument("text")
    ideas_sub.add_parser("delete").add_argument("idea_id")

    habits = sub.add_parser("habits", help="Weekly habits")
    habits_sub = habits.add_subparsers(dest="action", required=True)
    habits_sub.add_parser("list")
    habits_add = habits_sub.add_parser("add")
    habits_add.add_argument("name")
    habits_add.add_argument("--goal", type=int, default=5, choices=range(1, DAYS_PER_WEEK + 1),
                            help="Days per week (default: 5)")
    habits_toggle = habits_sub.add_parser("toggle")
    habits_toggle.add_argument("habit_id")
    habits_toggle.add_argument("day", type=int, choices=range(DAYS_PER_WEEK), help="0 = Monday .. 6 = Sunday")
    habits_sub.add_parser("delete").add_argument("habit_id")
    habits_sub.add_parser("suggest", help="AI suggestions for your habits")

    review = sub.add_parser("review", help="Weekly / monthly / yearly goals and reviews")
    review.add_argument("period", choices=list(_PERIODS))
    review_sub = review.add_subparsers(dest="section", required=True)
    review_sub.add_parser("show")

    goal = review_sub.add_parser("goal").add_subparsers(dest="action", required=True)
    goal.add_parser("add").add_argument("text")
    goal.add_parser("toggle").add_argument("item_id")
    goal.add_parser("delete").add_argument("item_id")

    entry = review_sub.add_parser("entry").add_subparsers(dest="action", required=True)
    entry_add = entry.add_parser("add")
    entry_add.add_argument("category", choices=_CATEGORIES)
    entry_add.add_argument("text")
    entry_delete = entry.add_parser("delete")
    entry_delete.add_argument("category", choices=_CATEGORIES)
    entry_delete.add_argument("item_id")

    link = review_sub.add_parser("link").add_subparsers(dest="action", required=True)
    link_add = link.add_parser("add")
    link_add.add_argument("url")
    link_add.add_argument("description")
    link.add_parser("delete").add_argument("item_id")

    daily = sub.add_parser("daily", help="Daily planner")
    daily_sub = daily.add_subparsers(dest="action", required=True)
    daily_sub.add_parser("list")
    daily_sub.add_parser("add").add_argument("title")
    daily_progress = daily_sub.add_parser("progress", help="Note today's progress on a task")
    daily_progress.add_argument("task_id")
    daily_progress.add_argument("text")
    daily_sub.add_parser("done").add_argument("task_id")
    daily_sub.add_parser("delete").add_argument("task_id")

    sub.add_parser("analyze", help="AI analysis of your weekly and monthly reviews")
    sub.add_parser("quote", help="Print a motivational quote")
    return ap


def _serve(host: str | None, port: int | None) -> None:
    import uvicorn

    from src.config import settings
    from src.server.app import create_app

    uvicorn.run(
        create_app(),
        host=host or settings.SERVER_HOST,
        port=port or settings.SERVER_PORT,
    )


def _format_habit(habit) -> str:
    days = " ".join(name if done else "." * len(name) for name, done in zip(_DAY_NAMES, habit.progress))
    return f"{habit.id}  {habit.name}  [{habit.completed_count}/{habit.goal}]  {days}"


def _removed(what: str, item_id: str, ok: bool) -> str:
    return f"Deleted {what} {item_id}" if ok else f"No {what} with id {item_id}"


def _sync(store: LocalStore, args) -> None:
    service = SyncService(store, HttpSyncClient())
    if args.command == "save":
        print(asyncio.run(service.save()))
    elif args.command == "load":
        print(asyncio.run(service.load()))
    else:
        if args.new:
            service.generate_user_id()
        elif args.clear:
            service.set_user_id("")
        elif args.value is not None:
            service.set_user_id(args.value)
        print(service.user_id or "(no sync id set)")


def _ideas(store: LocalStore, args) -> None:
    ideas = IdeaTracker(store)
    if args.action == "add":
        idea = ideas.add(args.text)
        print(f"Added idea {idea.id}" if idea else "Nothing to add")
    elif args.action == "edit":
        print(f"Updated idea {args.idea_id}" if ideas.update(args.idea_id, args.text)
              else f"No idea with id {args.idea_id}")
    elif args.action == "delete":
        print(_removed("idea", args.idea_id, ideas.delete(args.idea_id)))
    else:
        for idea in ideas.list():
            print(f"{idea.id}  {idea.created_at[:10]}  {idea.text}")


def _habits(store: LocalStore, args) -> None:
    habits = HabitTracker(store)
    if args.action == "add":
        habit = habits.add(args.name, args.goal)
        print(_format_habit(habit) if habit else "Nothing to add")
    elif args.action == "toggle":
        habit = habits.toggle(args.habit_id, args.day)
        print(_format_habit(habit) if habit else f"No habit with id {args.habit_id}")
    elif args.action == "delete":
        print(_removed("habit", args.habit_id, habits.delete(args.habit_id)))
    elif args.action == "suggest":
        print(asyncio.run(coach.get_habit_suggestions(habits.list())))
    else:
        for habit in habits.list():
            print(_format_habit(habit))


def _show_review(tracker: ReviewTracker) -> None:
    data = tracker.get()
    print(f"{tracker.period.value} goals:")
    for goal in data.goals:
        print(f"  [{'x' if goal.completed else ' '}] {goal.id}  {goal.text}")
    for category in ReviewCategory:
        print(f"{CATEGORY_LABELS[category]}:")
        for entry in data.entries(category):
            print(f"  {entry.id}  {entry.text}")
    print("Learning links:")
    for link in data.learning_links:
        print(f"  {link.id}  {link.description} <{link.url}>")


def _review(store: LocalStore, args) -> None:
    tracker = ReviewTracker(store, _PERIODS[args.period])
    section, action = args.section, getattr(args, "action", None)

    if section == "show":
        _show_review(tracker)
    elif action == "add":
        if section == "goal":
            item = tracker.add_goal(args.text)
        elif section == "entry":
            item = tracker.add_entry(ReviewCategory(args.category), args.text)
        else:
            item = tracker.add_link(args.url, args.description)
        print(f"Added {section} {item.id}" if item else "Nothing to add")
    elif action == "toggle":
        goal = tracker.toggle_goal(args.item_id)
        if goal is None:
            print(f"No goal with id {args.item_id}")
        else:
            print(f"{goal.text}: {'done' if goal.completed else 'open'}")
    elif section == "goal":
        print(_removed("goal", args.item_id, tracker.delete_goal(args.item_id)))
    elif section == "entry":
        print(_removed("entry", args.item_id,
                       tracker.delete_entry(ReviewCategory(args.category), args.item_id)))
    else:
        print(_removed("link", args.item_id, tracker.delete_link(args.item_id)))


def _daily(store: LocalStore, args) -> None:
    planner = DailyPlanner(store)
    if args.action == "add":
        task = planner.add(args.title)
        print(f"Added task {task.id}" if task else "Nothing to add")
    elif args.action == "progress":
        task = planner.update_progress(args.task_id, args.text)
        print(f"Progress noted: {task.title}" if task else f"No task with id {args.task_id}")
    elif args.action == "done":
        task = planner.mark_done_today(args.task_id)
        print(f"Done today: {task.title}" if task else f"No task with id {args.task_id}")
    elif args.action == "delete":
        print(_removed("task", args.task_id, planner.delete(args.task_id)))
    else:
        for title, tasks in (
            ("Due today", planner.due_today()),
            ("Backlog", planner.backlog()),
            ("Done today", planner.done_today()),
        ):
            print(f"{title}:")
            for task in tasks:
                note = next((h.progress for h in task.history if h.progress), None)
                print(f"  {task.id}  {task.title}" + (f"  ({note})" if note else ""))


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    if args.command == "serve":
        _serve(args.host, args.port)
        return

    store = LocalStore(JsonFileStorage(args.store))

    if args.command in ("id", "save", "load"):
        _sync(store, args)
    elif args.command == "ideas":
        _ideas(store, args)
    elif args.command == "habits":
        _habits(store, args)
    elif args.command == "review":
        _review(store, args)
    elif args.command == "daily":
        _daily(store, args)
    elif args.command == "analyze":
        print(asyncio.run(coach.get_life_analysis(
            store.get_timeframe(Period.WEEKLY),
            store.get_timeframe(Period.MONTHLY),
        )))
    else:
        quote, author = coach.random_quote()
        print(f'"{quote}"\n  - {author}')
