import re

import pytest
import requests

from steamkey.services.community import Community
from steamkey.services.webapi_key_service import (
    AccessDeniedError,
    CannotRevokeKeyError,
    FetchedKey,
    KeyNotFoundError,
)


def test_fetch_caches_key(community, fake_session):
    fake_session.reply(200, '...<p>Key: 1A2B3C4D5E6F7890</p>...')

    assert community.fetch_web_api_key() == '1A2B3C4D5E6F7890'
    assert community.api_key == '1A2B3C4D5E6F7890'


def test_fetch_twice_is_stable(community, fake_session):
    fake_session.reply(200, '<p>Key: ABCDEF0123</p>')
    fake_session.reply(200, '<p>Key: ABCDEF0123</p>')

    first = community.fetch_web_api_key()
    second = community.fetch_web_api_key()

    assert first == second == 'ABCDEF0123'
    assert community.api_key == 'ABCDEF0123'


def test_failed_fetch_leaves_cache_untouched(community, fake_session):
    community.api_key = 'OLDKEY'
    fake_session.reply(200, '<h2>Access Denied</h2>')
    fake_session.reply(200, '<p>No key here</p>')

    with pytest.raises(AccessDeniedError):
        community.fetch_web_api_key()
    with pytest.raises(KeyNotFoundError):
        community.fetch_web_api_key()

    assert community.api_key == 'OLDKEY'


def test_service_does_not_write_cache(community, fake_session):
    fake_session.reply(200, '<p>Key: 00FF</p>')

    fetched = community.key_service().fetch()

    assert fetched == FetchedKey(key='00FF', changed=True)
    assert community.api_key is None

    community.apply_fetched_key(fetched)
    assert community.api_key == '00FF'


def test_revoke_clears_cache(community, fake_session):
    community.api_key = 'ABCDEF'
    fake_session.reply(200)

    community.revoke_web_api_key()

    assert community.api_key is None


def test_failed_revoke_keeps_cache(community, fake_session):
    community.api_key = 'ABCDEF'
    fake_session.reply(403)

    with pytest.raises(CannotRevokeKeyError):
        community.revoke_web_api_key()

    assert community.api_key == 'ABCDEF'


def test_register_uses_session_id(community, fake_session):
    fake_session.reply(200)

    community.register_web_api_key('example.com')

    assert fake_session.calls[0]['data']['sessionid'] == 'abc123sessionid'


def test_session_id_cookie_matches_form_field(community, fake_session):
    assert fake_session.cookies.get('sessionid', domain='steamcommunity.test') == 'abc123sessionid'


def test_session_id_read_from_existing_cookie(fake_session):
    fake_session.cookies.set('sessionid', 'fromcookie', domain='steamcommunity.test')

    community = Community(session=fake_session, base_url='https://steamcommunity.test')

    assert community.session_id == 'fromcookie'


def test_session_id_generated_when_missing(fake_session):
    community = Community(session=fake_session, base_url='https://steamcommunity.test')

    assert re.fullmatch(r'[0-9a-f]{24}', community.session_id)
    assert fake_session.cookies.get('sessionid', domain='steamcommunity.test') == community.session_id


def test_from_config_sets_login_cookie():
    community = Community.from_config(
        {
            'STEAM_COMMUNITY_URL': 'https://steamcommunity.test',
            'STEAM_SESSION_ID': 'cfgsession',
            'STEAM_LOGIN_SECURE': '7656119%7C%7Ctoken',
            'STEAM_USER_AGENT': 'steamkey-tests',
        }
    )

    assert isinstance(community.session, requests.Session)
    assert community.session_id == 'cfgsession'
    assert community.base_url == 'https://steamcommunity.test'
    assert community.session.headers['User-Agent'] == 'steamkey-tests'
    assert community.session.cookies.get('steamLoginSecure', domain='steamcommunity.test') == '7656119%7C%7Ctoken'
