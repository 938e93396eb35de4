import pytest
from sqlalchemy.orm import sessionmaker

from blogstore import posts, users
from blogstore.database import init_db, make_engine


@pytest.fixture
def session_local(monkeypatch):
    """Provide an isolated in-memory database for each test."""
    engine = make_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    init_db(bind=engine)
    monkeypatch.setattr(users, "SessionLocal", TestingSessionLocal)
    monkeypatch.setattr(posts, "SessionLocal", TestingSessionLocal)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def alice(session_local):
    return users.create_user("alice", "a@x.com", "hash-a")


@pytest.fixture
def bob(session_local):
    return users.create_user("bob", "b@x.com", "hash-b")
