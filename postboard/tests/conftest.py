"""Shared fixtures for postboard tests."""

import itertools
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from postboard.services.policy import as_utc, is_visible


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from postboard.config import get_settings

    get_settings.cache_clear()

    # 2. Database engine / session factory singletons
    import postboard.services.database as db_mod

    if db_mod._engine is not None:
        db_mod._engine.dispose()
    db_mod._engine = None
    db_mod._session_factory = None

    # 3. Health check cache
    import postboard.main as main_mod

    main_mod._health_cache = None
    main_mod.app.dependency_overrides.clear()


@pytest.fixture
def mock_settings(monkeypatch):
    """Provide a Settings object with safe test defaults."""
    from postboard.config import Settings, get_settings

    test_settings = Settings(
        database_url="sqlite://",
        posts_per_page=20,
        cors_origins=["http://localhost:3000"],
    )

    get_settings.cache_clear()
    monkeypatch.setattr("postboard.config.get_settings", lambda: test_settings)

    # Patch get_settings in all modules that import it directly
    # (from postboard.config import get_settings creates a local binding that
    # the postboard.config monkeypatch above does not affect)
    for mod_path in [
        "postboard.main",
        "postboard.services.posts",
        "postboard.services.database",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


@pytest.fixture
def session_factory():
    """In-memory SQLite database shared by every session in a test."""
    from postboard.services.database import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def users(db_session):
    """Two authors, each with a plaintext token in ``.token``."""
    from postboard.auth import create_user

    alice, alice_token = create_user(db_session, "Alice", "alice@example.com")
    bob, bob_token = create_user(db_session, "Bob", "bob@example.com")
    alice.token = alice_token
    bob.token = bob_token
    return SimpleNamespace(alice=alice, bob=bob)


@pytest.fixture
def auth_headers():
    """Build the Authorization header for a user from the ``users`` fixture."""

    def _headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {user.token}"}

    return _headers


@pytest.fixture
def make_post(db_session):
    """Insert a post directly through the SQL store."""
    from postboard.services.post_store import SqlPostStore

    store = SqlPostStore(db_session)

    def _make(owner, **overrides):
        fields = {
            "title": "A post",
            "content": "Some content",
            "is_draft": False,
            "published_at": datetime.now(timezone.utc) - timedelta(days=1),
        }
        fields.update(overrides)
        return store.create(owner, fields)

    return _make


@pytest.fixture
async def client(mock_settings, session_factory):
    """HTTP client against the app, with requests using the test database."""
    from postboard.main import app
    from postboard.services.database import get_session

    def _session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = _session
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c


class FakePostStore:
    """In-memory ``PostStore`` for exercising the post operations."""

    def __init__(self) -> None:
        self.posts: dict[int, SimpleNamespace] = {}
        self.writes = 0
        self._ids = itertools.count(1)

    def create(self, owner, fields):
        now = datetime.now(timezone.utc)
        post = SimpleNamespace(
            id=next(self._ids),
            owner=owner,
            created_at=now,
            updated_at=now,
            **fields,
        )
        self.posts[post.id] = post
        self.writes += 1
        return post

    def get(self, post_id):
        return self.posts.get(post_id)

    def list_visible(self, now, offset, limit):
        visible = [p for p in self.posts.values() if is_visible(p, now)]
        visible.sort(key=lambda p: (as_utc(p.published_at), p.id), reverse=True)
        return visible[offset : offset + limit], len(visible)

    def update(self, post, fields):
        for name, value in fields.items():
            setattr(post, name, value)
        post.updated_at = datetime.now(timezone.utc)
        self.writes += 1
        return post

    def delete(self, post):
        del self.posts[post.id]
        self.writes += 1


@pytest.fixture
def fake_store(mock_settings):
    return FakePostStore()
