# tests/conftest.py

import asyncio
from collections import defaultdict

import pytest
import requests

from masjid_console import create_app


@pytest.fixture(scope='session')
def app():
    """Session-wide application for testing."""
    app = create_app('testing')
    return app


@pytest.fixture(scope='function')
def test_client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture(scope='function')
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def mock_adapter(mocker):
    """
    Replaces the display backend adapter everywhere it is looked up.
    Returns the MagicMock so tests can set return values and inspect calls.
    """
    adapter = mocker.MagicMock()
    adapter.fetch_month.return_value = None
    adapter.fetch_masjid_config.return_value = None
    mocker.patch('masjid_console.services.iqamaah_service.get_selected_backend_adapter', return_value=adapter)
    mocker.patch('masjid_console.services.masjid_config_service.get_selected_backend_adapter', return_value=adapter)
    return adapter


def make_response(status_code, body=b''):
    """Builds a real requests.Response with the given status and raw body."""
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.url = 'http://backend.test/api'
    return response


class FakeChannel:
    """
    In-memory stand-in for SocketChannel. Every emit schedules one client:ack
    per entry of `acks`, each entry being (delay_seconds, payload).
    """

    def __init__(self, connected=True, acks=()):
        self.url = None
        self.connected = connected
        self.acks = list(acks)
        self.emitted = []
        self.listeners = defaultdict(list)

    def on(self, event, listener):
        self.listeners[event].append(listener)

    def off(self, event, listener):
        if listener in self.listeners[event]:
            self.listeners[event].remove(listener)

    def listener_count(self, event):
        return len(self.listeners[event])

    async def emit(self, event, data):
        self.emitted.append((event, data))
        loop = asyncio.get_running_loop()
        for delay, payload in self.acks:
            loop.call_later(delay, self.fire, 'client:ack', payload)

    def fire(self, event, data):
        for listener in list(self.listeners[event]):
            listener(data)


@pytest.fixture
def fake_channel_factory():
    return FakeChannel


@pytest.fixture
def response_factory():
    return make_response
