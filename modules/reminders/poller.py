# modules/reminders/poller.py
"""
Reminder poller
Runs the reminder scan once whenever the task collection changes, then on a
fixed interval, until cancelled.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Set, Tuple

from models.task import Task
from .engine import Reminder, check_reminders

logger = logging.getLogger(__name__)


class ReminderPoller:
    """
    emit(reminder) is called from the caller's thread for the immediate scan
    and from a timer thread afterwards.

    With suppress_repeats the poller remembers which (task, threshold) pairs
    already fired, so a task sitting on a threshold across two polls reminds
    once. Without it every poll is independent.
    """

    def __init__(self, emit: Callable[[Reminder], None], interval_seconds: float = 60.0,
                 clock: Callable[[], datetime] = datetime.now, suppress_repeats: bool = False):
        self.emit = emit
        self.interval_seconds = max(0.01, float(interval_seconds))
        self.clock = clock
        self.suppress_repeats = suppress_repeats
        self._tasks: List[Task] = []
        self._fired: Set[Tuple[str, int]] = set()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        timer = self._timer
        return timer is not None and timer.is_alive()

    def watch(self, tasks: Iterable[Task]) -> None:
        """Adopt a new task collection: scan now, restart the interval"""
        with self._lock:
            self._stop_timer()
            self._tasks = list(tasks)
            self._generation += 1
            generation = self._generation
        self.poll()
        self._schedule(generation)

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            self._stop_timer()
            self._tasks = []
            self._fired.clear()

    def poll(self) -> List[Reminder]:
        """One scan over the current snapshot; returns what was emitted"""
        with self._lock:
            tasks = list(self._tasks)
        reminders = check_reminders(tasks, self.clock())

        if self.suppress_repeats:
            with self._lock:
                fresh = [r for r in reminders if (r.task_id, r.threshold) not in self._fired]
                self._fired.update((r.task_id, r.threshold) for r in fresh)
            reminders = fresh

        for reminder in reminders:
            try:
                self.emit(reminder)
            except Exception:
                logger.exception('Reminder emit failed for task %s', reminder.task_id)
        return reminders

    # ==================== TIMER ====================

    def _schedule(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            timer = threading.Timer(self.interval_seconds, self._tick, args=(generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
        self.poll()
        self._schedule(generation)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
