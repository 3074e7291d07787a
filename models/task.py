# models/task.py
"""
In-memory task representation
Tasks live in the external row store; these objects are rebuilt on every fetch
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from .errors import ParseError

# Priority levels
PRIORITY_LEVELS = [
    'low',
    'medium',
    'high'
]

# Task categories ('' means uncategorised)
TASK_CATEGORIES = [
    'work',
    'personal',
    'timepass'
]

DEFAULT_PRIORITY = 'medium'
DEFAULT_DUE_TIME = '23:59'


def parse_due_datetime(raw: Optional[str]) -> datetime:
    """
    Parse a stored due date-time into a naive local datetime.
    Offsets sent back by the store are converted to local time first.
    """
    if not raw:
        raise ParseError('Missing due date')
    try:
        value = datetime.fromisoformat(str(raw).strip())
    except ValueError:
        raise ParseError(f'Unparsable due date: {raw!r}')
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    description: str
    due_date: str               # combined "YYYY-MM-DDTHH:MM:SS"
    priority: str
    time_allotted: str
    category: str
    completed: bool
    created_at: str
    user_id: Optional[str] = None

    def due_datetime(self) -> datetime:
        return parse_due_datetime(self.due_date)


@dataclass(frozen=True)
class TaskDraft:
    """What the add-task form submits"""
    title: str
    due_date: str               # "YYYY-MM-DD"
    due_time: str = DEFAULT_DUE_TIME
    description: str = ''
    priority: str = DEFAULT_PRIORITY
    time_allotted: str = ''
    category: str = ''

    @property
    def due_date_time(self) -> str:
        """Combine the separate date and time inputs"""
        return f'{self.due_date}T{self.due_time}:00'

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> 'TaskDraft':
        title = (form.get('title') or '').strip()
        due_date = (form.get('due_date') or '').strip()
        due_time = (form.get('due_time') or '').strip() or DEFAULT_DUE_TIME
        priority = (form.get('priority') or DEFAULT_PRIORITY).strip().lower()
        category = (form.get('category') or '').strip().lower()

        if not title:
            raise ValueError('Title required')
        if not due_date:
            raise ValueError('Due date required')
        if priority not in PRIORITY_LEVELS:
            raise ValueError(f'Unknown priority: {priority}')
        if category and category not in TASK_CATEGORIES:
            raise ValueError(f'Unknown category: {category}')

        draft = cls(
            title=title,
            due_date=due_date,
            due_time=due_time,
            description=(form.get('description') or '').strip(),
            priority=priority,
            time_allotted=(form.get('time_allotted') or '').strip(),
            category=category,
        )
        try:
            parse_due_datetime(draft.due_date_time)
        except ParseError:
            raise ValueError('Invalid due date or time')
        return draft
