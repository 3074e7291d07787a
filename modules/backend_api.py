# modules/backend_api.py
"""
Backend-as-a-service HTTP client
Shared plumbing for the identity service (/auth/v1) and the row store (/rest/v1)

Both services speak JSON over HTTPS and authenticate with the project's public
API key plus, once signed in, the user's access token.
"""

import logging
from typing import Any, Dict, Optional, Type

import requests
from flask import current_app

from models.errors import PlannerError

logger = logging.getLogger(__name__)


def _error_message(resp) -> str:
    """Pull a human message out of an error body; services disagree on the key."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ('error_description', 'msg', 'message', 'error'):
            val = body.get(key)
            if isinstance(val, str) and val.strip():
                return val.strip()
    return resp.reason or f'HTTP {resp.status_code}'


class BackendAPI:
    """
    Thin requests wrapper around one backend service.
    `http` lets callers share a requests.Session (or a test double).
    """

    service_path = ''
    error_cls: Type[PlannerError] = PlannerError

    def __init__(self, base_url: str = None, api_key: str = None,
                 timeout: float = None, http=None):
        base_url = base_url or current_app.config.get('BACKEND_URL', '')
        self.api_key = api_key if api_key is not None else current_app.config.get('BACKEND_ANON_KEY', '')
        self.timeout = timeout or current_app.config.get('BACKEND_TIMEOUT', 10)
        self.base_url = f"{str(base_url).rstrip('/')}{self.service_path}"
        self.http = http or requests.Session()

    def _headers(self, access_token: Optional[str] = None, extra: Dict[str, str] = None) -> Dict[str, str]:
        headers = {
            'apikey': self.api_key,
            'Authorization': f'Bearer {access_token or self.api_key}',
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        }
        if extra:
            headers.update(extra)
        return headers

    def _api_call(self, method: str, endpoint: str, *, params: Dict = None, payload: Any = None,
                  access_token: Optional[str] = None, headers: Dict[str, str] = None) -> Optional[Any]:
        """
        Call the service; returns decoded JSON (None for empty bodies).
        Raises self.error_cls on transport failures and non-2xx responses.
        """
        url = f'{self.base_url}{endpoint}'
        try:
            resp = self.http.request(
                method,
                url,
                params=params,
                json=payload,
                headers=self._headers(access_token, headers),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning('[Backend] Timeout calling %s %s', method, endpoint)
            raise self.error_cls('The service took too long to respond')
        except requests.exceptions.RequestException as e:
            logger.warning('[Backend] Error calling %s %s: %s', method, endpoint, e)
            raise self.error_cls(f'Network error: {e}')

        if not 200 <= resp.status_code < 300:
            message = _error_message(resp)
            logger.warning('[Backend] API error %s on %s %s: %s', resp.status_code, method, endpoint, message)
            raise self.error_cls(message)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            raise self.error_cls(f'Unexpected response from {endpoint}')
