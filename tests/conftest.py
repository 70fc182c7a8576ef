import pytest

from db import dispose_db, get_session
from main import create_app
from tests.factories import ALL_FACTORIES


@pytest.fixture
def app(tmp_path):
    """Application bound to a throw-away SQLite file."""
    app = create_app(f"sqlite:///{tmp_path / 'test.sqlite'}")
    app.config["TESTING"] = True
    yield app
    dispose_db()


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture
def session(app):
    """A session shared by the factories for the duration of one test."""
    s = get_session()
    for fac in ALL_FACTORIES:
        fac._meta.sqlalchemy_session = s
    yield s
    for fac in ALL_FACTORIES:
        fac._meta.sqlalchemy_session = None
    s.close()
