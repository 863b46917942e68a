import os
import sys
import pytest

# Ensure the backend root (containing the `rps` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from rps import create_app, socketio
from rps.models import Player


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'
    MAX_ROUNDS = 3
    HIGHSCORE_LIMIT = 10
    FINISHED_ROOM_TTL_SEC = 60


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def coordinator(flask_app):
    return flask_app.extensions['rps_coordinator']


@pytest.fixture()
def sio_factory(flask_app):
    """Build Socket.IO test clients; all are disconnected on teardown."""
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        if test_client.is_connected():
            test_client.disconnect()


@pytest.fixture()
def ann():
    return Player(id='sid-ann', name='Ann')


@pytest.fixture()
def bo():
    return Player(id='sid-bo', name='Bo')
