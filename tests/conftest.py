"""
Pytest fixtures for the auth backend tests.

Uses an in-memory SQLite database per test; the schema (including the unique
constraints the user store relies on) comes from the ORM models.
"""

import os
import sys

# Settings are cached on first use, so the environment must be in place
# before any project module is imported.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("PASSWORD_ENCRYPTION_KEY", "MDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDAwMDA=")
os.environ.setdefault("CLIENT_URL", "http://127.0.0.1:3000")
os.environ.setdefault("COOKIE_DOMAIN", "127.0.0.1")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("GOOGLE_REDIRECT_URL", "http://127.0.0.1:5000/auth/callback/google")

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.config import get_settings  # noqa: E402
from core.db import Base  # noqa: E402
from core.models import User  # noqa: E402
from core.security import CredentialCodec, hash_password  # noqa: E402

TEST_ENCRYPTION_KEY = os.environ["PASSWORD_ENCRYPTION_KEY"]


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh in-memory database for each test."""
    db_url = "sqlite://"
    engine = create_engine(
        db_url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )

    yield db_url, TestingSessionLocal, engine

    engine.dispose()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def codec():
    return CredentialCodec(TEST_ENCRYPTION_KEY)


@pytest.fixture
def local_user(test_db):
    """A local account with password 'correct horse'."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    user = User(
        oauth_provider="local",
        oauth_id="mina",
        nickname="Mina",
        password_hash=hash_password("correct horse", rounds=4),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    session.close()
    return user
