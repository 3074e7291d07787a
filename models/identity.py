# models/identity.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
import time


class AuthEvent(str, Enum):
    INITIAL_SESSION = 'INITIAL_SESSION'
    SIGNED_IN = 'SIGNED_IN'
    SIGNED_OUT = 'SIGNED_OUT'
    TOKEN_REFRESHED = 'TOKEN_REFRESHED'


@dataclass(frozen=True)
class Identity:
    """The authenticated principal owning a set of tasks"""
    id: str
    email: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'Identity':
        return cls(id=str(payload['id']), email=payload.get('email'))


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    expires_at: Optional[float]
    identity: Identity

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'AuthSession':
        """Build from a token grant response (access_token, refresh_token, expires_*, user)"""
        expires_at = payload.get('expires_at')
        if expires_at is None and payload.get('expires_in') is not None:
            expires_at = time.time() + float(payload['expires_in'])
        return cls(
            access_token=payload['access_token'],
            refresh_token=payload.get('refresh_token'),
            expires_at=float(expires_at) if expires_at is not None else None,
            identity=Identity.from_payload(payload['user']),
        )

    def is_expired(self, now: Optional[float] = None, leeway: float = 10.0) -> bool:
        if self.expires_at is None:
            return False
        now = time.time() if now is None else now
        return now >= self.expires_at - leeway

    def to_payload(self) -> Dict[str, Any]:
        """Same shape from_payload reads, for keeping the session between requests"""
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_at': self.expires_at,
            'user': {'id': self.identity.id, 'email': self.identity.email},
        }
