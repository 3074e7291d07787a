# modules/auth/session_manager.py
"""
Session Manager
Holds the current authenticated session and broadcasts identity transitions

Subscribers are called as callback(event, session) where session is None
after a sign-out. subscribe() hands back a Subscription whose unsubscribe()
must be called when the owning view goes away.
"""

import logging
import threading
import time
from dataclasses import replace
from typing import Callable, Dict, Optional

from models.errors import AuthError
from models.identity import AuthEvent, AuthSession, Identity

logger = logging.getLogger(__name__)

AuthCallback = Callable[[AuthEvent, Optional[AuthSession]], None]


class Subscription:
    """Unsubscribe handle returned by SessionManager.subscribe()"""

    def __init__(self, manager: 'SessionManager', key: int):
        self._manager = manager
        self._key = key
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._manager._remove(self._key)
            self.active = False


class SessionManager:

    def __init__(self, identity_api, clock: Callable[[], float] = time.time):
        self.identity_api = identity_api
        self.clock = clock
        self._session: Optional[AuthSession] = None
        self._subscribers: Dict[int, AuthCallback] = {}
        self._next_key = 0
        # _lock guards state only; no network call or subscriber runs under it
        self._lock = threading.Lock()
        self._refresh_lock = threading.Lock()

    # ==================== STATE ====================

    @property
    def session(self) -> Optional[AuthSession]:
        with self._lock:
            return self._session

    @property
    def access_token(self) -> Optional[str]:
        session = self.session
        return session.access_token if session else None

    def get_current_identity(self) -> Optional[Identity]:
        """Current identity, refreshing an expired session first when possible."""
        session = self.session
        if session is None:
            return None
        if session.is_expired(self.clock()):
            session = self._refresh(session)
        return session.identity if session else None

    def _refresh(self, stale: AuthSession) -> Optional[AuthSession]:
        with self._refresh_lock:
            current = self.session
            if current is not stale:
                # refreshed or signed out by another thread meanwhile
                return current
            if not stale.refresh_token:
                self._set(None, AuthEvent.SIGNED_OUT)
                return None
            try:
                fresh = self.identity_api.refresh(stale.refresh_token)
            except AuthError as e:
                logger.info('Session refresh failed for %s: %s', stale.identity.id, e)
                self._set(None, AuthEvent.SIGNED_OUT)
                return None
            self._set(fresh, AuthEvent.TOKEN_REFRESHED)
            return fresh

    # ==================== TRANSITIONS ====================

    def restore(self, session: Optional[AuthSession]) -> None:
        """Adopt an existing session (or none) and announce it as the initial state."""
        self._set(session, AuthEvent.INITIAL_SESSION)

    def resume(self, stored: AuthSession) -> Optional[Identity]:
        """
        Bring back a session kept from an earlier request. The tokens are
        checked with the identity service first (refreshed when expired);
        whatever comes out is announced as the initial session.
        """
        try:
            if stored.is_expired(self.clock()):
                if not stored.refresh_token:
                    raise AuthError('Session expired')
                session = self.identity_api.refresh(stored.refresh_token)
            else:
                identity = self.identity_api.get_user(stored.access_token)
                session = replace(stored, identity=identity)
        except AuthError as e:
            logger.info('Stored session for %s rejected: %s', stored.identity.id, e)
            session = None
        self.restore(session)
        return session.identity if session else None

    def sign_in(self, email: str, password: str) -> Identity:
        session = self.identity_api.sign_in(email, password)
        self._set(session, AuthEvent.SIGNED_IN)
        return session.identity

    def sign_up(self, email: str, password: str) -> Optional[Identity]:
        """Returns the new identity when the service signs in immediately, else None."""
        session = self.identity_api.sign_up(email, password)
        if session is None:
            return None
        self._set(session, AuthEvent.SIGNED_IN)
        return session.identity

    def sign_out(self) -> None:
        """Always ends the local session; a failed remote logout is only logged."""
        session = self.session
        if session is None:
            return
        try:
            self.identity_api.sign_out(session.access_token)
        except AuthError as e:
            logger.warning('Remote sign-out failed for %s: %s', session.identity.id, e)
        self._set(None, AuthEvent.SIGNED_OUT)

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, callback: AuthCallback) -> Subscription:
        with self._lock:
            key = self._next_key
            self._next_key += 1
            self._subscribers[key] = callback
        return Subscription(self, key)

    def _remove(self, key: int) -> None:
        with self._lock:
            self._subscribers.pop(key, None)

    def _set(self, session: Optional[AuthSession], event: AuthEvent) -> None:
        with self._lock:
            self._session = session
            callbacks = list(self._subscribers.values())
        for callback in callbacks:
            try:
                callback(event, session)
            except Exception:
                logger.exception('Auth subscriber failed on %s', event.value)
