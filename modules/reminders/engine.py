# modules/reminders/engine.py
"""
Reminder Engine
Stateless scan of the task collection against wall-clock time

A task reminds when it is incomplete, due strictly in the future, and the
whole minutes remaining land exactly on a threshold.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from models.errors import ParseError
from models.task import Task

logger = logging.getLogger(__name__)

# minutes remaining -> message prefix
THRESHOLD_MESSAGES = {
    60: '⏰ Heads up! Task due in 1 hour: ',
    30: '⚡ Time check! 30 minutes left for: ',
    15: '🚨 Quick reminder! 15 minutes remaining for: ',
    5: '🔥 Final stretch! Only 5 minutes left for: ',
}
THRESHOLDS = tuple(THRESHOLD_MESSAGES)

REMINDER_DURATION_MS = 10000


@dataclass(frozen=True)
class Reminder:
    task_id: str
    title: str
    threshold: int
    message: str


def minutes_remaining(due: datetime, now: datetime) -> int:
    """Whole minutes from now until due, truncated toward zero"""
    seconds = (due - now).total_seconds()
    return int(seconds / 60)


def reminder_for(task: Task, now: datetime) -> Optional[Reminder]:
    if task.completed:
        return None
    try:
        due = task.due_datetime()
    except ParseError as e:
        logger.debug('Skipping reminder for task %s: %s', task.id, e)
        return None
    if not due > now:
        return None
    left = minutes_remaining(due, now)
    prefix = THRESHOLD_MESSAGES.get(left)
    if prefix is None:
        return None
    return Reminder(task_id=task.id, title=task.title, threshold=left, message=prefix + task.title)


def check_reminders(tasks: Iterable[Task], now: datetime) -> List[Reminder]:
    """At most one reminder per task for this instant"""
    reminders = []
    for task in tasks:
        reminder = reminder_for(task, now)
        if reminder is not None:
            reminders.append(reminder)
    return reminders
