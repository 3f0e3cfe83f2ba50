import pytest
from fastapi.testclient import TestClient

from eduportal.config import Settings
from eduportal.database import Database
from eduportal.main import app
from eduportal.passwords import PasswordHasher


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings pointing at a fresh SQLite file and JSON user store."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("USER_DOCUMENTS_PATH", str(tmp_path / "users.json"))
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "1000")
    monkeypatch.delenv("MONGODB_URL", raising=False)
    return Settings()


@pytest.fixture
def client(settings):
    """A TestClient whose lifespan opens the per-test storage."""
    previous = app.state.settings
    app.state.settings = settings
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.state.settings = previous


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'unit.db'}")
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture
def hasher():
    return PasswordHasher("pbkdf2_sha256", rounds=1000)
