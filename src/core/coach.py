"""
Life Tracker — AI Coach.

Builds the coaching prompts from tracked data and sends them through
`llm.complete()`. Like the rest of the app, it never raises: a missing key
or a provider failure comes back as a readable message.
"""

from __future__ import annotations

import logging
import random

from src.core import llm
from src.data.models import Goal, Habit, ReviewEntry, TimeFrameData

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "AI is not configured. Please set LLM_API_KEY and try again."
HABIT_FAILURE_MESSAGE = "Sorry, I couldn't generate suggestions at this time. Please try again later."
ANALYSIS_FAILURE_MESSAGE = "Sorry, I couldn't generate an analysis at this time. Please try again later."

_HABIT_SYSTEM = "You are a supportive and insightful life coach."
_ANALYSIS_SYSTEM = "You are an insightful and empathetic personal development coach."

MOTIVATIONAL_QUOTES: list[tuple[str, str]] = [
    ("The best way to predict the future is to create it.", "Peter Drucker"),
    ("The only way to do great work is to love what you do.", "Steve Jobs"),
    ("Success is not final, failure is not fatal: it is the courage to continue that counts.", "Winston Churchill"),
    ("Believe you can and you're halfway there.", "Theodore Roosevelt"),
    ("The journey of a thousand miles begins with a single step.", "Lao Tzu"),
    ("Act as if what you do makes a difference. It does.", "William James"),
    ("Strive not to be a success, but rather to be of value.", "Albert Einstein"),
    ("It is never too late to be what you might have been.", "George Eliot"),
]


def random_quote() -> tuple[str, str]:
    """Return (quote, author)."""
    return random.choice(MOTIVATIONAL_QUOTES)


# ---------------------------------------------------------------------------
# Prompt builders
# ---------------------------------------------------------------------------


def build_habit_prompt(habits: list[Habit]) -> str:
    summary = "\n".join(
        f"- {h.name} (Goal: {h.goal} times, Current: {h.completed_count} times)"
        for h in habits
    )
    return (
        "Based on the following habits a user is tracking, provide 3-5 actionable, "
        "encouraging, and specific suggestions for improvement. Keep the tone positive "
        "and constructive. Format the response as a list.\n\n"
        f"User's Habits:\n{summary}"
    )


def _bullets(items: list[ReviewEntry]) -> str:
    return "\n".join(f"- {e.text}" for e in items) or "None recorded."


def _goal_bullets(goals: list[Goal]) -> str:
    return "\n".join(f"- {g.text} (Completed: {str(g.completed).lower()})" for g in goals) or "None recorded."


def _period_section(title: str, data: TimeFrameData) -> str:
    return (
        f"**{title}:**\n"
        f"Achievements: {_bullets(data.achievements)}\n"
        f"Challenges: {_bullets(data.challenges)}\n"
        f"Reflections for Improvement: {_bullets(data.reflections)}\n"
        f"Goals: {_goal_bullets(data.goals)}"
    )


def build_life_analysis_prompt(
    weekly: TimeFrameData | None, monthly: TimeFrameData | None,
) -> str:
    """Missing periods are rendered as empty documents."""
    return (
        "Analyze the following life-tracking data for a user and provide a summary of "
        "their progress, identify recurring themes or patterns, and offer 3 concrete "
        "suggestions for growth.\n\n"
        + _period_section("Last Week's Data", weekly or TimeFrameData())
        + "\n\n"
        + _period_section("Last Month's Data", monthly or TimeFrameData())
        + "\n\n"
        "Based on this data, provide your analysis in a structured, easy-to-read format "
        "with a positive and encouraging tone. Use Markdown for formatting. Start with a "
        'brief "Overall Summary", then a section for "Key Themes", and finally a section '
        'for "Growth Suggestions".'
    )


# ---------------------------------------------------------------------------
# LLM calls
# ---------------------------------------------------------------------------


async def get_habit_suggestions(habits: list[Habit]) -> str:
    if not llm.is_configured():
        return NOT_CONFIGURED_MESSAGE
    try:
        return await llm.complete(_HABIT_SYSTEM, build_habit_prompt(habits))
    except Exception as exc:
        logger.error("Error getting habit suggestions: %s", exc)
        return HABIT_FAILURE_MESSAGE


async def get_life_analysis(
    weekly: TimeFrameData | None, monthly: TimeFrameData | None,
) -> str:
    if not llm.is_configured():
        return NOT_CONFIGURED_MESSAGE
    try:
        return await llm.complete(_ANALYSIS_SYSTEM, build_life_analysis_prompt(weekly, monthly))
    except Exception as exc:
        logger.error("Error getting life analysis: %s", exc)
        return ANALYSIS_FAILURE_MESSAGE
