# modules/boards.py
"""
Board lookup for the current browser session

The Flask-Session store only keeps small values: the board id, the theme
flag and the signed-in token pair. The live TaskBoard objects sit in a
BoardRegistry on the app. A board nobody has touched for BOARD_IDLE_SECONDS
is closed, which drops its identity subscription and reminder timer. The
next request from that browser builds a fresh board and signs it back in
from the stored tokens.
"""

import atexit
import logging
import threading
import time
import uuid
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from flask import current_app, session

if TYPE_CHECKING:
    from .board_service import TaskBoard

logger = logging.getLogger(__name__)

BOARD_SESSION_KEY = 'board_id'
AUTH_SESSION_KEY = 'auth_session'
THEME_SESSION_KEY = 'dark_mode'


class BoardRegistry:
    """Live boards keyed by the id stored in the browser's server-side session"""

    def __init__(self, board_factory: Callable[[], 'TaskBoard'],
                 idle_seconds: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.board_factory = board_factory
        self.idle_seconds = idle_seconds
        self.clock = clock
        self._boards: Dict[str, 'TaskBoard'] = {}
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def init_app(self, app) -> None:
        app.extensions['task_boards'] = self
        app.after_request(_keep_auth_session)
        atexit.register(self.close_all)

    def get(self, board_id: Optional[str]) -> Optional['TaskBoard']:
        if not board_id:
            return None
        with self._lock:
            board = self._boards.get(board_id)
            if board is not None:
                self._last_seen[board_id] = self.clock()
            return board

    def create(self) -> Tuple[str, 'TaskBoard']:
        board = self.board_factory()
        board_id = uuid.uuid4().hex
        with self._lock:
            self._boards[board_id] = board
            self._last_seen[board_id] = self.clock()
        return board_id, board

    def discard(self, board_id: Optional[str]) -> None:
        with self._lock:
            board = self._boards.pop(board_id, None) if board_id else None
            self._last_seen.pop(board_id, None)
        if board is not None:
            board.close()

    def evict_idle(self) -> int:
        """Close boards idle for longer than idle_seconds; returns how many went"""
        if not self.idle_seconds:
            return 0
        cutoff = self.clock() - self.idle_seconds
        with self._lock:
            stale = [bid for bid, seen in self._last_seen.items() if seen < cutoff]
            boards = [self._boards.pop(bid) for bid in stale]
            for bid in stale:
                del self._last_seen[bid]
        for board in boards:
            board.close()
        if boards:
            logger.info('Closed %d idle board(s)', len(boards))
        return len(boards)

    def close_all(self) -> None:
        with self._lock:
            boards = list(self._boards.values())
            self._boards.clear()
            self._last_seen.clear()
        for board in boards:
            board.close()

    def __len__(self) -> int:
        return len(self._boards)


# ==================== REQUEST HELPERS ====================

def _registry() -> BoardRegistry:
    return current_app.extensions['task_boards']


def _new_board(registry: BoardRegistry) -> 'TaskBoard':
    board_id, board = registry.create()
    session[BOARD_SESSION_KEY] = board_id
    board.set_theme(session.get(THEME_SESSION_KEY, False))
    return board


def current_board(create: bool = False) -> Optional['TaskBoard']:
    """
    The board bound to this browser session. A missing board is rebuilt when
    the session still holds tokens, or created blank when create is set.
    """
    registry = _registry()
    registry.evict_idle()
    board = registry.get(session.get(BOARD_SESSION_KEY))

    if board is None:
        stored = session.get(AUTH_SESSION_KEY)
        if not stored and not create:
            return None
        board = _new_board(registry)
        if stored and board.resume(stored) is None:
            session.pop(AUTH_SESSION_KEY, None)
            if not create:
                release_board()
                return None

    return board


def remember_session(board: 'TaskBoard') -> None:
    """Mirror the board's token pair into the browser session"""
    auth = board.session_manager.session
    payload = auth.to_payload() if auth else None
    if session.get(AUTH_SESSION_KEY) == payload:
        return
    if payload is None:
        session.pop(AUTH_SESSION_KEY, None)
    else:
        session[AUTH_SESSION_KEY] = payload


def _keep_auth_session(response):
    board = _registry().get(session.get(BOARD_SESSION_KEY))
    if board is not None:
        remember_session(board)
    return response


def release_board() -> None:
    """Close this browser's board and forget its tokens; the theme stays"""
    session.pop(AUTH_SESSION_KEY, None)
    _registry().discard(session.pop(BOARD_SESSION_KEY, None))


def dark_mode() -> bool:
    return bool(session.get(THEME_SESSION_KEY, False))


def set_dark_mode(dark: bool) -> None:
    session[THEME_SESSION_KEY] = bool(dark)
    board = _registry().get(session.get(BOARD_SESSION_KEY))
    if board is not None:
        board.set_theme(dark)
