import os
import sys
import pytest

# Ensure the backend root (containing the `battleships` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from battleships import create_app, db, socketio
from battleships.services.rooms import SessionStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    JWT_SECRET = 'test-jwt-secret'
    JWT_EXPIRES_DAYS = 7
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    ROOM_ID_LENGTH = 6
    ROOM_MAX_AGE_SEC = 3600
    ROOM_SWEEP_INTERVAL_SEC = 300
    CLIENT_URL = None


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import battleships.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def store(flask_app):
    return flask_app.extensions['session_store']


def _connect(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    test_client.get_received()
    return test_client


@pytest.fixture()
def sio_client(flask_app):
    test_client = _connect(flask_app)
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def make_sio_client(flask_app):
    """Factory for additional connected Socket.IO clients."""
    clients = []

    def _make():
        c = _connect(flask_app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        if c.is_connected():
            c.disconnect()


@pytest.fixture()
def session_store():
    """A standalone store, independent of any app."""
    return SessionStore()
