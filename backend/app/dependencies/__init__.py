"""
FastAPI dependency injection module.

Builds the dependency bundle handed to the auth flows. Every collaborator is
its own dependency so tests can swap any of them through
``app.dependency_overrides``.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from core.config import Settings, get_settings
from core.db import get_db
from core.repositories import UserRepository
from core.security import CredentialCodec, get_credential_codec

from ..auth.google_oauth import GoogleOAuthAdapter, get_oauth_adapter
from ..auth.jwt import SessionIssuer, get_session_issuer
from ..services import AuthDependencies, AuthService

# =============================================================================
# Repository Dependencies
# =============================================================================


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(db)


# =============================================================================
# Service Dependencies
# =============================================================================


def get_auth_dependencies(
    user_store: UserRepository = Depends(get_user_repository),
    session_issuer: SessionIssuer = Depends(get_session_issuer),
    credential_codec: CredentialCodec = Depends(get_credential_codec),
    oauth_adapter: GoogleOAuthAdapter = Depends(get_oauth_adapter),
    settings: Settings = Depends(get_settings),
) -> AuthDependencies:
    """Assemble the collaborators of the auth flows."""
    return AuthDependencies(
        user_store=user_store,
        session_issuer=session_issuer,
        credential_codec=credential_codec,
        oauth_adapter=oauth_adapter,
        settings=settings,
    )


def get_auth_service(deps: AuthDependencies = Depends(get_auth_dependencies)) -> AuthService:
    """Get AuthService instance with injected collaborators."""
    return AuthService(deps)


__all__ = [
    "get_user_repository",
    "get_auth_dependencies",
    "get_auth_service",
]
