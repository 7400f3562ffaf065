"""
Configuración de fixtures para pytest.

Este módulo contiene fixtures reutilizables para todos los tests.
"""

import pytest
import os
from typing import Generator, Dict, Any
from datetime import datetime, timedelta
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Configurar para usar base de datos en memoria para tests
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from main import app
from database.db import get_db
from database.models import Base, UserORM, PostORM
from dependencies import get_output_cache, get_rate_limiter
from core.output_cache import OutputCache
from core.rate_limit import FixedWindowRateLimiter


class FakeClock:
    """Reloj manual para controlar la expiración de la caché y las ventanas."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ==================== Database Fixtures ====================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a new database session for a test."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# ==================== Shared component Fixtures ====================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def output_cache(clock: FakeClock) -> OutputCache:
    """Fresh output cache per test, driven by the fake clock."""
    return OutputCache(ttl=60, maxsize=128, timer=clock)


@pytest.fixture
def rate_limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    """Rate limiter generoso para que no interfiera con los tests."""
    return FixedWindowRateLimiter(permit_limit=10_000, window_seconds=60, timer=clock)


@pytest.fixture(scope="function")
def client(
    db_session: Session,
    output_cache: OutputCache,
    rate_limiter: FixedWindowRateLimiter,
) -> Generator[TestClient, None, None]:
    """Create a test client with database session, cache and limiter overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_output_cache] = lambda: output_cache
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==================== User Fixtures ====================

@pytest.fixture
def user_data() -> Dict[str, Any]:
    """Sample user data for testing."""
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
    }


@pytest.fixture
def user_instance(db_session: Session, user_data: Dict[str, Any]) -> UserORM:
    """Create a user in the database."""
    user = UserORM(name=user_data["name"], email=user_data["email"])
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def otro_user(db_session: Session) -> UserORM:
    """Create a second user (used for author filters)."""
    user = UserORM(name="Grace Hopper", email="grace@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


# ==================== Post Fixtures ====================

@pytest.fixture
def post_data(user_instance: UserORM) -> Dict[str, Any]:
    """Sample post payload (wire names)."""
    return {
        "title": "Primer post",
        "content": "Hola mundo",
        "userId": user_instance.id,
    }


@pytest.fixture
def post_instance(db_session: Session, user_instance: UserORM) -> PostORM:
    """Create a post in the database."""
    now = datetime(2024, 1, 1, 12, 0, 0)
    post = PostORM(
        title="Post existente",
        content="Contenido existente",
        user_id=user_instance.id,
        created_at=now,
        updated_at=now,
    )
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post


@pytest.fixture
def many_posts(db_session: Session, user_instance: UserORM, otro_user: UserORM):
    """
    Create 5 posts: 3 by user_instance and 2 by otro_user.

    created_at grows with the index, so the newest is "Post 4".
    """
    base = datetime(2024, 1, 1, 12, 0, 0)
    posts = []
    for i in range(5):
        author = user_instance if i % 2 == 0 else otro_user
        post = PostORM(
            title=f"Post {i}",
            content=f"Contenido {i}",
            user_id=author.id,
            created_at=base + timedelta(minutes=i),
            updated_at=base + timedelta(minutes=i),
        )
        db_session.add(post)
        posts.append(post)
    db_session.commit()
    for post in posts:
        db_session.refresh(post)
    return posts


# ==================== Utility Functions ====================

def assert_datetime_format(dt_string: str) -> bool:
    """Assert that a string is a valid datetime in ISO format."""
    try:
        datetime.fromisoformat(dt_string.replace('Z', '+00:00'))
        return True
    except (ValueError, AttributeError):
        return False
