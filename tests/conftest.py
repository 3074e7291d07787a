# tests/conftest.py

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from app import create_app
from config import Config
from modules.auth.session_manager import SessionManager
from modules.board_service import TaskBoard

from .fakes import FakeIdentityAPI, FakeTaskStore, make_task

# Every board in the tests sees this instant as "now"
NOW = datetime(2025, 3, 5, 12, 0, 0)


def due_in(**delta) -> str:
    return (NOW + timedelta(**delta)).isoformat(timespec='seconds')


@pytest.fixture()
def identity_api() -> FakeIdentityAPI:
    return FakeIdentityAPI()


@pytest.fixture()
def store() -> FakeTaskStore:
    return FakeTaskStore([
        make_task(id='1', title='Write report', description='Quarterly numbers',
                  due_date=due_in(minutes=30), created_at='2025-03-01T09:00:00+00:00'),
        make_task(id='2', title='Water plants', description='Balcony only',
                  due_date=due_in(days=1), category='personal',
                  created_at='2025-03-02T09:00:00+00:00'),
        make_task(id='3', title='Old invoice', description='Paid already',
                  due_date=due_in(days=-2), completed=True,
                  created_at='2025-02-20T09:00:00+00:00'),
        make_task(id='9', title='Someone else', user_id='user-other',
                  created_at='2025-03-03T09:00:00+00:00'),
    ])


@pytest.fixture()
def board_factory(identity_api, store):
    """
    Builds boards over the fakes. The reminder interval is long so only the
    immediate scan runs inside a test.
    """
    boards = []

    def build() -> TaskBoard:
        board = TaskBoard(SessionManager(identity_api), store,
                          reminder_interval=3600, clock=lambda: NOW)
        boards.append(board)
        return board

    build.boards = boards
    yield build
    for b in boards:
        b.close()


@pytest.fixture()
def board(board_factory) -> TaskBoard:
    return board_factory()


@pytest.fixture()
def app(tmp_path: Path, board_factory):
    config = type('TestConfig', (Config,), {
        'TESTING': True,
        'SECRET_KEY': 'test',
        'SESSION_FILE_DIR': str(tmp_path / 'sessions'),
        'BACKEND_URL': 'http://backend.test',
        'BACKEND_ANON_KEY': 'anon-key',
    })
    app = create_app(config)
    registry = app.extensions['task_boards']
    registry.board_factory = board_factory
    yield app
    registry.close_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def signed_in_client(client):
    resp = client.post('/auth/', data={'email': 'lazy@example.com', 'password': 'secret', 'mode': 'login'})
    assert resp.status_code == 302
    return client
