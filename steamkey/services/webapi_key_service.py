from __future__ import annotations

from dataclasses import dataclass
import logging
import re

import requests

from steamkey.utils.security import mask_key


DEFAULT_COMMUNITY_URL = 'https://steamcommunity.com'

API_KEY_PATH = '/dev/apikey'
API_KEY_REGISTER_PATH = '/dev/registerkey'
API_KEY_REVOKE_PATH = '/dev/revokekey'

ACCESS_DENIED_MARKER = '<h2>Access Denied</h2>'
KEY_PATTERN = re.compile(r'<p>Key: ([0-9A-F]+)</p>')

REVOKE_CONFIRMATION = 'Revoke My Steam Web API Key'


class WebAPIKeyError(Exception):
    pass


class TransportError(WebAPIKeyError):
    pass


class AccessDeniedError(WebAPIKeyError):
    def __init__(self, message: str = 'access is denied'):
        super().__init__(message)


class KeyNotFoundError(WebAPIKeyError):
    def __init__(self, message: str = 'key not found'):
        super().__init__(message)


class CannotRegisterKeyError(WebAPIKeyError):
    def __init__(self, status_code: int):
        super().__init__(f'unable to register API key (HTTP {status_code})')
        self.status_code = status_code


class CannotRevokeKeyError(WebAPIKeyError):
    def __init__(self, status_code: int):
        super().__init__(f'unable to revoke API key (HTTP {status_code})')
        self.status_code = status_code


@dataclass(frozen=True)
class FetchedKey:
    key: str
    changed: bool


class WebAPIKeyService:
    """Registers, fetches and revokes the Web API key of a community session.

    The session is expected to already carry the login cookies. The service
    never writes to the caller's cached key: ``fetch`` returns a
    ``FetchedKey`` and the caller decides whether to keep it.
    """

    def __init__(
        self,
        session: requests.Session,
        session_id: str,
        *,
        base_url: str = DEFAULT_COMMUNITY_URL,
        cached_key: str | None = None,
    ):
        self.session = session
        self.session_id = session_id
        self.base_url = (base_url or DEFAULT_COMMUNITY_URL).rstrip('/')
        self.cached_key = cached_key

    @property
    def api_key_url(self) -> str:
        return self.base_url + API_KEY_PATH

    @property
    def register_url(self) -> str:
        return self.base_url + API_KEY_REGISTER_PATH

    @property
    def revoke_url(self) -> str:
        return self.base_url + API_KEY_REVOKE_PATH

    def register(self, domain: str) -> None:
        values = {
            'domain': domain,
            'agreeToTerms': 'agreed',
            'sessionid': self.session_id,
            'Submit': 'Register',
        }
        status_code = self._post_form(self.register_url, values)
        if status_code != requests.codes.ok:
            logging.warning('Web API key registration for domain=%s failed: HTTP %s', domain, status_code)
            raise CannotRegisterKeyError(status_code)
        logging.info('Registered Web API key for domain=%s', domain)

    def fetch(self) -> FetchedKey:
        response = self._send('GET', self.api_key_url, stream=True)
        with response:
            try:
                body = response.text
            except requests.RequestException as exc:
                raise TransportError(f'failed to read {self.api_key_url}: {exc}') from exc

        key = self.extract_key(body)
        changed = key != self.cached_key
        logging.info('Fetched Web API key %s (changed=%s)', mask_key(key), changed)
        return FetchedKey(key=key, changed=changed)

    def revoke(self) -> None:
        values = {
            'revoke': REVOKE_CONFIRMATION,
            'sessionid': self.session_id,
        }
        status_code = self._post_form(self.revoke_url, values)
        if status_code != requests.codes.ok:
            logging.warning('Web API key revocation failed: HTTP %s', status_code)
            raise CannotRevokeKeyError(status_code)
        logging.info('Revoked Web API key')

    @staticmethod
    def extract_key(body: str) -> str:
        # Denial page wins over any key markup in the same body.
        try:
            if ACCESS_DENIED_MARKER in body:
                raise AccessDeniedError()
            match = KEY_PATTERN.search(body)
        except (re.error, TypeError) as exc:
            raise TransportError(f'failed to scan key page: {exc}') from exc

        if match is None or not match.group(1):
            raise KeyNotFoundError()
        return match.group(1)

    def _post_form(self, url: str, values: dict[str, str]) -> int:
        # Body is never read on the mutating endpoints, and a redirect
        # (usually to the login page) counts as a rejection.
        response = self._send('POST', url, data=values, stream=True, allow_redirects=False)
        with response:
            return response.status_code

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logging.warning('%s %s failed: %s', method, url, exc)
            raise TransportError(f'{method} {url} failed: {exc}') from exc
