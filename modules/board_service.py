# modules/board_service.py
"""
Task Board - the top-level controller for one signed-in browser session

Owns the in-memory task collection, the view state, the identity
subscription, the reminder poller and a queue of pending notices. Routes
and the reminder timer both go through the board; the collection is only
ever replaced by a full re-fetch.
"""

import logging
import queue
import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from models.errors import AuthError, StoreError
from models.identity import AuthEvent, AuthSession, Identity
from models.task import Task, TaskDraft
from .auth.identity_service import IdentityAPI
from .auth.session_manager import SessionManager
from .boards import BoardRegistry
from .reminders.engine import REMINDER_DURATION_MS, Reminder
from .reminders.poller import ReminderPoller
from .tasks.presentation import ViewState, filter_tasks
from .tasks.store import TaskStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    """A one-shot message for the page's toast area"""
    message: str
    level: str = 'info'         # info | success | error | reminder
    duration_ms: int = 4000
    icon: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


class TaskBoard:

    def __init__(self, session_manager: SessionManager, store: TaskStore, *,
                 reminder_interval: float = 60.0, suppress_repeats: bool = False,
                 clock: Callable[[], datetime] = datetime.now):
        self.session_manager = session_manager
        self.store = store
        self.clock = clock
        self.view = ViewState()
        self.notices: 'queue.Queue[Notice]' = queue.Queue()
        self._tasks: Tuple[Task, ...] = ()
        self._lock = threading.RLock()
        self.poller = ReminderPoller(self._on_reminder, interval_seconds=reminder_interval,
                                     clock=clock, suppress_repeats=suppress_repeats)
        self._subscription = session_manager.subscribe(self._on_auth_change)
        self.closed = False

    # ==================== STATE ====================

    @property
    def tasks(self) -> Tuple[Task, ...]:
        with self._lock:
            return self._tasks

    @property
    def identity(self) -> Optional[Identity]:
        return self.session_manager.get_current_identity()

    def visible_tasks(self) -> List[Task]:
        with self._lock:
            return filter_tasks(self._tasks, self.view.search_query, self.view.show_history)

    def find_task(self, task_id: str) -> Optional[Task]:
        with self._lock:
            return next((t for t in self._tasks if t.id == str(task_id)), None)

    def _set_tasks(self, tasks) -> None:
        with self._lock:
            self._tasks = tuple(tasks)
            if self._tasks:
                self.poller.watch(self._tasks)
            else:
                self.poller.cancel()

    # ==================== NOTICES ====================

    def notify(self, message: str, level: str = 'info', duration_ms: int = 4000,
               icon: Optional[str] = None) -> None:
        self.notices.put(Notice(message=message, level=level, duration_ms=duration_ms, icon=icon))

    def drain_notices(self) -> List[Notice]:
        out = []
        while True:
            try:
                out.append(self.notices.get_nowait())
            except queue.Empty:
                return out

    def _on_reminder(self, reminder: Reminder) -> None:
        icon = '⏰' if reminder.threshold == 5 else None
        self.notify(reminder.message, level='reminder', duration_ms=REMINDER_DURATION_MS, icon=icon)

    # ==================== IDENTITY ====================

    def _on_auth_change(self, event: AuthEvent, auth_session: Optional[AuthSession]) -> None:
        logger.debug('Board auth event %s', event.value)
        if auth_session is not None:
            self.refresh(auth_session.identity.id)
        else:
            self._set_tasks(())

    def sign_in(self, email: str, password: str) -> Identity:
        return self.session_manager.sign_in(email, password)

    def sign_up(self, email: str, password: str) -> Optional[Identity]:
        return self.session_manager.sign_up(email, password)

    def sign_out(self) -> None:
        self.session_manager.sign_out()
        self._set_tasks(())

    def resume(self, payload: Dict[str, Any]) -> Optional[Identity]:
        """Sign back in from a session kept by an earlier request"""
        try:
            stored = AuthSession.from_payload(payload)
        except (KeyError, TypeError, ValueError):
            logger.warning('Discarding unreadable stored session')
            return None
        return self.session_manager.resume(stored)

    # ==================== TASKS ====================

    def refresh(self, owner_id: Optional[str] = None) -> bool:
        """
        Reload the whole collection. On failure the previous collection is
        kept and an error notice is queued.
        """
        if owner_id is None:
            identity = self.identity
            if identity is None:
                return False
            owner_id = identity.id
        try:
            tasks = self.store.fetch(owner_id)
        except StoreError as e:
            self.notify(f'Error fetching tasks: {e.message}', level='error')
            return False
        self._set_tasks(tasks)
        return True

    def add_task(self, draft: TaskDraft) -> None:
        identity = self.identity
        if identity is None:
            raise AuthError('Please sign in first')
        self.store.create(identity.id, draft)
        with self._lock:
            self.view.show_add_task = False
        self.refresh(identity.id)

    def set_completion(self, task_id: str, completed: bool) -> Optional[Task]:
        """Returns the task as it was before the update, when it was known"""
        identity = self.identity
        if identity is None:
            raise AuthError('Please sign in first')
        before = self.find_task(task_id)
        self.store.set_completion(task_id, completed)
        self.refresh(identity.id)
        return before

    # ==================== VIEW ====================

    def toggle_history(self) -> bool:
        with self._lock:
            self.view.show_history = not self.view.show_history
            return self.view.show_history

    def set_theme(self, dark: bool) -> None:
        with self._lock:
            self.view.dark_mode = bool(dark)

    def set_add_form(self, visible: bool) -> None:
        with self._lock:
            self.view.show_add_task = bool(visible)

    def set_search(self, query: Optional[str]) -> None:
        with self._lock:
            self.view.search_query = query or ''

    def close(self) -> None:
        """Release the identity subscription and the reminder timer"""
        if self.closed:
            return
        self._subscription.unsubscribe()
        self.poller.cancel()
        self.closed = True


def build_board(config, http=None) -> TaskBoard:
    """Wire a board against the configured backend"""
    common = dict(
        base_url=config.get('BACKEND_URL'),
        api_key=config.get('BACKEND_ANON_KEY', ''),
        timeout=config.get('BACKEND_TIMEOUT', 10),
        http=http,
    )
    session_manager = SessionManager(IdentityAPI(**common))
    store = TaskStore(table=config.get('BACKEND_TASKS_TABLE', 'tasks'),
                      token_provider=lambda: session_manager.access_token, **common)
    return TaskBoard(
        session_manager,
        store,
        reminder_interval=config.get('REMINDER_INTERVAL_SECONDS', 60),
        suppress_repeats=config.get('REMINDER_SUPPRESS_REPEATS', False),
    )


def init_boards(app) -> BoardRegistry:
    registry = BoardRegistry(lambda: build_board(app.config),
                             idle_seconds=app.config.get('BOARD_IDLE_SECONDS'))
    registry.init_app(app)
    return registry
