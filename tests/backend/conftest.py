from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.auth.google_oauth import OAuthProfile, ensure_supported, get_oauth_adapter
from backend.app.main import create_app
from core.db import get_db
from core.security import OAuthExchangeError


class FakeOAuthAdapter:
    """Stands in for Google: maps authorization codes to profiles."""

    def __init__(self):
        self.profiles: dict[str, OAuthProfile] = {}
        self.exchanged: list[str] = []

    def authorization_url(self, provider: str) -> str:
        ensure_supported(provider)
        return "https://accounts.google.com/o/oauth2/v2/auth?client_id=test-client-id&scope=profile"

    def exchange_code(self, provider: str, code: str) -> OAuthProfile:
        ensure_supported(provider)
        self.exchanged.append(code)
        profile = self.profiles.get(code)
        if profile is None:
            raise OAuthExchangeError("invalid_grant")
        return profile


@pytest.fixture
def oauth_adapter() -> FakeOAuthAdapter:
    return FakeOAuthAdapter()


@pytest.fixture
def test_app_client(test_db, oauth_adapter) -> Iterator[tuple[TestClient, object]]:
    _, TestingSessionLocal, _ = test_db

    app = create_app()

    def override_get_db() -> Iterator[Session]:
        db = TestingSessionLocal()
        try:
            yield db
            db.commit()  # Auto-commit on success like production
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_oauth_adapter] = lambda: oauth_adapter

    with TestClient(app) as client:
        yield client, TestingSessionLocal
