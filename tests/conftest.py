import io

import pytest
import requests

from steamkey.app_factory import create_app
from steamkey.services.community import Community


class FakeRaw(io.BytesIO):
    released = False

    def release_conn(self):
        self.released = True


class FailingRaw(FakeRaw):
    def read(self, *args, **kwargs):
        raise requests.exceptions.ConnectionError('connection reset while reading body')


class FakeSession(requests.Session):
    """Session that records requests and answers from a queue instead of the network."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self.replies = []

    def reply(self, status_code=200, body='', raw_class=FakeRaw):
        response = requests.Response()
        response.status_code = status_code
        response.raw = raw_class(body.encode('utf-8'))
        response.encoding = 'utf-8'
        self.replies.append(response)
        return response

    def fail(self, exc):
        self.replies.append(exc)

    def request(self, method, url, **kwargs):
        self.calls.append({'method': method, 'url': url, **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture()
def fake_session():
    return FakeSession()


@pytest.fixture()
def failing_raw():
    return FailingRaw


@pytest.fixture()
def community(fake_session):
    return Community(session=fake_session, session_id='abc123sessionid', base_url='https://steamcommunity.test')


@pytest.fixture()
def app(community, monkeypatch):
    monkeypatch.setenv('TESTING', 'true')
    monkeypatch.setenv('DEBUG', 'false')
    monkeypatch.delenv('CONTROL_API_TOKEN', raising=False)
    monkeypatch.delenv('STEAM_COMMUNITY_URL', raising=False)

    app = create_app('testing', community=community)
    app.config.update(TESTING=True)
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()
