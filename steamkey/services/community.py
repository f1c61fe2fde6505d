from __future__ import annotations

import logging
import threading
from typing import Mapping
from urllib.parse import urlsplit

import requests

from steamkey.services.webapi_key_service import DEFAULT_COMMUNITY_URL, FetchedKey, WebAPIKeyService
from steamkey.utils.security import generate_session_id, mask_key


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0 Safari/537.36'
)

SESSION_ID_COOKIE = 'sessionid'
LOGIN_SECURE_COOKIE = 'steamLoginSecure'


class Community:
    """Authenticated community session plus the cached Web API key.

    Logging in is someone else's job: the session passed in (or the cookies
    given to ``from_config``) must already be authenticated.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        session_id: str | None = None,
        *,
        base_url: str = DEFAULT_COMMUNITY_URL,
        user_agent: str | None = None,
    ):
        self.base_url = (base_url or DEFAULT_COMMUNITY_URL).rstrip('/')
        self.session = session or requests.Session()
        if user_agent or session is None:
            self.session.headers['User-Agent'] = user_agent or DEFAULT_USER_AGENT

        self.session_id = session_id or self._session_id_from_cookies() or generate_session_id()
        # The form field has to match the cookie on every mutating request.
        self.session.cookies.set(SESSION_ID_COOKIE, self.session_id, domain=self.cookie_domain)

        self.api_key: str | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Mapping, session: requests.Session | None = None) -> 'Community':
        community = cls(
            session=session,
            session_id=(config.get('STEAM_SESSION_ID') or '').strip() or None,
            base_url=config.get('STEAM_COMMUNITY_URL') or DEFAULT_COMMUNITY_URL,
            user_agent=(config.get('STEAM_USER_AGENT') or '').strip() or None,
        )
        login_secure = (config.get('STEAM_LOGIN_SECURE') or '').strip()
        if login_secure:
            community.session.cookies.set(LOGIN_SECURE_COOKIE, login_secure, domain=community.cookie_domain)
        else:
            logging.warning('STEAM_LOGIN_SECURE is not set; key requests will be denied')
        return community

    @property
    def cookie_domain(self) -> str:
        return urlsplit(self.base_url).hostname or ''

    def key_service(self) -> WebAPIKeyService:
        return WebAPIKeyService(
            self.session,
            self.session_id,
            base_url=self.base_url,
            cached_key=self.api_key,
        )

    def register_web_api_key(self, domain: str) -> None:
        self.key_service().register(domain)

    def fetch_web_api_key(self) -> str:
        fetched = self.key_service().fetch()
        self.apply_fetched_key(fetched)
        return fetched.key

    def revoke_web_api_key(self) -> None:
        self.key_service().revoke()
        self.clear_api_key()

    def apply_fetched_key(self, fetched: FetchedKey) -> None:
        with self._lock:
            if fetched.key != self.api_key:
                logging.info('Caching Web API key %s', mask_key(fetched.key))
            self.api_key = fetched.key

    def clear_api_key(self) -> None:
        with self._lock:
            self.api_key = None

    def _session_id_from_cookies(self) -> str | None:
        for cookie in self.session.cookies:
            if cookie.name == SESSION_ID_COOKIE and cookie.value:
                return cookie.value
        return None
