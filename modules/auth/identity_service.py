# modules/auth/identity_service.py
"""
Identity service client (GoTrue-style REST API under /auth/v1)
"""

from typing import Optional

from models.errors import AuthError
from models.identity import AuthSession, Identity
from ..backend_api import BackendAPI


class IdentityAPI(BackendAPI):
    service_path = '/auth/v1'
    error_cls = AuthError

    # ==================== CREDENTIALS ====================

    def sign_in(self, email: str, password: str) -> AuthSession:
        data = self._api_call('POST', '/token', params={'grant_type': 'password'},
                              payload={'email': email, 'password': password})
        return self._session_from(data)

    def sign_up(self, email: str, password: str) -> Optional[AuthSession]:
        """
        Returns a session when the service signs the user in straight away,
        None when it holds the account for email confirmation.
        """
        data = self._api_call('POST', '/signup', payload={'email': email, 'password': password})
        if isinstance(data, dict) and data.get('access_token'):
            return self._session_from(data)
        return None

    def sign_out(self, access_token: str) -> None:
        self._api_call('POST', '/logout', access_token=access_token)

    # ==================== TOKENS ====================

    def refresh(self, refresh_token: str) -> AuthSession:
        data = self._api_call('POST', '/token', params={'grant_type': 'refresh_token'},
                              payload={'refresh_token': refresh_token})
        return self._session_from(data)

    def get_user(self, access_token: str) -> Identity:
        data = self._api_call('GET', '/user', access_token=access_token)
        if not isinstance(data, dict) or 'id' not in data:
            raise AuthError('Unexpected user payload')
        return Identity.from_payload(data)

    def _session_from(self, data) -> AuthSession:
        try:
            return AuthSession.from_payload(data)
        except (KeyError, TypeError, ValueError):
            raise AuthError('Unexpected session payload')
