# modules/tasks/presentation.py
"""
Task presentation helpers
Filtering, view state and display formatting for the board page
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from models.errors import ParseError
from models.task import Task, parse_due_datetime

PRIORITY_CLASSES = {
    'high': 'priority-high',
    'medium': 'priority-medium',
    'low': 'priority-low'
}

CATEGORY_BADGES = {
    'work': '💼 Work',
    'personal': '👤 Personal',
    'timepass': '☕ Timepass'
}

EMPTY_ACTIVE_TEXT = 'No tasks yet! Time to add some lazy goals...'
EMPTY_HISTORY_TEXT = 'No completed tasks yet! Time to get some work done...'

FINISHED_EARLY_TEXT = "🎉 Way to go, buddy! You finished early! Here's a virtual high five! ✋"
FINISHED_TEXT = '🌟 Task completed! Remember, slow and steady wins the race! 🐌'


@dataclass
class ViewState:
    """Per-board UI toggles"""
    dark_mode: bool = False
    show_history: bool = False
    show_add_task: bool = False
    search_query: str = ''


def matches_search(task: Task, query: str) -> bool:
    q = (query or '').lower()
    return q in (task.title or '').lower() or q in (task.description or '').lower()


def filter_tasks(tasks: Iterable[Task], query: str, show_history: bool) -> List[Task]:
    """
    Search title/description (case-insensitive) and keep one status:
    completed tasks for the history view, open tasks otherwise.
    """
    return [
        t for t in tasks
        if matches_search(t, query) and bool(t.completed) == bool(show_history)
    ]


def priority_class(priority: Optional[str]) -> str:
    return PRIORITY_CLASSES.get((priority or '').lower(), 'priority-normal')


def category_badge(category: Optional[str]) -> str:
    if not category:
        return ''
    return CATEGORY_BADGES.get(category.lower(), f'🏷️ {category.capitalize()}')


def format_due(raw: Optional[str]) -> str:
    """e.g. 'Mar 5, 2025, 02:30 PM'; unparsable values are shown as-is"""
    try:
        due = parse_due_datetime(raw)
    except ParseError:
        return raw or ''
    return f"{due.strftime('%b')} {due.day}, {due.year}, {due.strftime('%I:%M %p')}"


def empty_text(show_history: bool) -> str:
    return EMPTY_HISTORY_TEXT if show_history else EMPTY_ACTIVE_TEXT


def completion_message(task: Optional[Task], now: datetime) -> str:
    """Cheer for tasks finished before their due time"""
    if task is not None:
        try:
            if now < task.due_datetime():
                return FINISHED_EARLY_TEXT
        except ParseError:
            pass
    return FINISHED_TEXT
