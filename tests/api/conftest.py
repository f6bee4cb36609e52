from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from comicstop.adapters.clock import FrozenClock
from comicstop.adapters.dev_notifier import DevNotifier
from comicstop.adapters.local_storage import LocalBlobStore
from comicstop.adapters.sqlite.migrator import SQLiteMigrator
from comicstop.adapters.sqlite.repos import SQLiteUserRepo
from comicstop.api.auth_utils import issue_token
from comicstop.api.deps import Settings, get_clock, get_notifier, get_settings
from comicstop.api.main import app
from comicstop.domain.entities import User

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings()
    s.data_dir = tmp_path / "data"
    s.data_dir.mkdir()
    s.db_path = str(s.data_dir / "comicstop.db")
    s.blobs_dir = s.data_dir / "blobs"
    s.rules_path = Path("rules.yaml").resolve()
    SQLiteMigrator(s.db_path, s.migrations_dir).run_migrations()
    return s


@pytest.fixture
def notifier() -> DevNotifier:
    return DevNotifier()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(T0)


@pytest.fixture
def client(settings, notifier, clock):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def blob_store(settings) -> LocalBlobStore:
    """Same on-disk store the routes use."""
    return LocalBlobStore(
        settings.blobs_dir,
        public_base_url=settings.public_base_url,
        signing_key=settings.secret_key,
    )


@pytest.fixture
def make_user(settings):
    repo = SQLiteUserRepo(settings.db_path)

    def _make(username: str, **fields) -> User:
        fields.setdefault("email", f"{username}@example.com")
        return repo.save(User(username=username, **fields))

    return _make


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user.id)}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def owner(make_user) -> User:
    return make_user("ana")


@pytest.fixture
def owner_headers(owner) -> dict[str, str]:
    return auth_headers(owner)


@pytest.fixture
def stranger_headers(make_user) -> dict[str, str]:
    return auth_headers(make_user("ben"))
