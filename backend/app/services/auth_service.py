"""
Auth flow service.

Orchestrates the credential codec, the OAuth adapter, the user store and the
session issuer into the signup, login, OAuth callback and duplicate-check
flows. HTTP concerns (cookies, status codes, redirects) stay in the router.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from urllib.parse import urlencode

from core.config import Settings
from core.logging import get_logger
from core.models import User
from core.repositories import UserRepository
from core.security import (
    CredentialCodec,
    DuplicateUserError,
    LoginFailedError,
    NotFound,
    PasswordEnvelope,
    SignupFailError,
    hash_password,
    verify_password,
)

from ..auth.google_oauth import GoogleOAuthAdapter
from ..auth.jwt import SessionIssuer

logger = get_logger("auth.service")

DUPLICATE_ID_MESSAGE = "중복된 아이디 입니다. 다른 아이디를 입력해 주세요."
DUPLICATE_NICKNAME_MESSAGE = "중복된 닉네임입니다. 다른 닉네임을 입력해 주세요."


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    """Hash of a random secret, compared against when there is no real hash to check."""
    return hash_password(secrets.token_urlsafe(32), rounds=rounds)


@dataclass
class AuthDependencies:
    """Collaborators of the auth flows, assembled per request."""

    user_store: UserRepository
    session_issuer: SessionIssuer
    credential_codec: CredentialCodec
    oauth_adapter: GoogleOAuthAdapter
    settings: Settings


@dataclass(frozen=True)
class IssuedSession:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class LoginResult:
    user: User
    session: IssuedSession


@dataclass(frozen=True)
class OAuthLoginResult:
    user: User
    session: IssuedSession
    redirect_url: str
    created: bool


@dataclass(frozen=True)
class DuplicateCheckResult:
    success: bool
    message: str | None = None


class AuthService:
    """Authentication flows for local and OAuth accounts."""

    def __init__(self, deps: AuthDependencies):
        self.deps = deps

    def _issue_session(self, provider: str, user: User) -> IssuedSession:
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        token = self.deps.session_issuer.issue(provider, user, issued_at=issued_at)
        return IssuedSession(token=token, expires_at=self.deps.session_issuer.expires_at(issued_at))

    # ------------------------------------------------------------------
    # Local accounts
    # ------------------------------------------------------------------

    def signup(
        self,
        provider: str,
        oauth_id: str,
        nickname: str,
        envelope: PasswordEnvelope,
    ) -> User:
        """
        Register a local account. Does not start a session.

        Raises:
            DecodeError: If the password envelope cannot be decoded
            SignupFailError: If the nickname or (provider, id) is taken
        """
        password = self.deps.credential_codec.decode(envelope.iv, envelope.tag, envelope.passwd)
        password_hash = hash_password(password, rounds=self.deps.settings.bcrypt_rounds)

        store = self.deps.user_store
        nickname_free = not store.exists_by_nickname(nickname)
        id_free = not store.exists_by_provider_and_id(provider, oauth_id)
        if not (nickname_free and id_free):
            logger.info(
                "signup_rejected",
                provider=provider,
                nickname_taken=not nickname_free,
                id_taken=not id_free,
            )
            raise SignupFailError()

        try:
            user = store.create(
                oauth_provider=provider,
                oauth_id=oauth_id,
                nickname=nickname,
                password_hash=password_hash,
            )
        except DuplicateUserError:
            # Lost a race with a concurrent signup for the same id or nickname.
            raise SignupFailError() from None

        logger.info("signup_succeeded", provider=provider, user_id=user.id)
        return user

    def login(self, provider: str, oauth_id: str, envelope: PasswordEnvelope) -> LoginResult:
        """
        Verify a local account's password and start a session.

        The envelope is decoded before the identity is looked up, and every
        failing path runs one bcrypt comparison, so neither the response nor
        its timing tells whether the identity exists.

        Raises:
            DecodeError: If the password envelope cannot be decoded
            LoginFailedError: For unknown identities and wrong passwords alike
        """
        password = self.deps.credential_codec.decode(envelope.iv, envelope.tag, envelope.passwd)

        try:
            user = self.deps.user_store.find_by_provider_and_id(provider, oauth_id)
        except NotFound:
            verify_password(password, _dummy_hash(self.deps.settings.bcrypt_rounds))
            logger.info("login_failed", provider=provider, reason="unknown_identity")
            raise LoginFailedError() from None

        if not user.password_hash:
            verify_password(password, _dummy_hash(self.deps.settings.bcrypt_rounds))
            logger.info("login_failed", provider=provider, reason="no_local_password", user_id=user.id)
            raise LoginFailedError()

        if not verify_password(password, user.password_hash):
            logger.info("login_failed", provider=provider, reason="password_mismatch", user_id=user.id)
            raise LoginFailedError()

        session = self._issue_session(user.oauth_provider, user)
        logger.info("login_succeeded", provider=provider, user_id=user.id)
        return LoginResult(user=user, session=session)

    # ------------------------------------------------------------------
    # OAuth
    # ------------------------------------------------------------------

    def oauth_authorization_url(self, provider: str) -> str:
        return self.deps.oauth_adapter.authorization_url(provider)

    def oauth_callback(self, provider: str, code: str) -> OAuthLoginResult:
        """
        Complete an OAuth login: exchange the code, map the external identity
        to a user (creating one on first sight) and start a session.

        New users get the provider's display name as nickname without a
        nickname availability check; the nickname unique constraint still
        applies and a collision raises DuplicateUserError.

        Raises:
            UnsupportedProviderError: For providers other than google
            OAuthExchangeError: If the provider exchange fails
            DuplicateUserError: If the display name collides with an existing nickname
        """
        profile = self.deps.oauth_adapter.exchange_code(provider, code)

        store = self.deps.user_store
        created = False
        if store.exists_by_provider_and_id(provider, profile.external_id):
            user = store.find_by_provider_and_id(provider, profile.external_id)
        else:
            user = store.create(
                oauth_provider=provider,
                oauth_id=profile.external_id,
                nickname=profile.display_name,
            )
            created = True

        session = self._issue_session(user.oauth_provider, user)
        redirect_url = f"{self.deps.settings.client_url.rstrip('/')}/memories?{urlencode({'nickname': user.nickname})}"

        logger.info("oauth_login_succeeded", provider=provider, user_id=user.id, created=created)
        return OAuthLoginResult(user=user, session=session, redirect_url=redirect_url, created=created)

    # ------------------------------------------------------------------
    # Duplicate checks
    # ------------------------------------------------------------------

    def check_id(self, oauth_id: str, provider: str) -> DuplicateCheckResult:
        if self.deps.user_store.exists_by_provider_and_id(provider, oauth_id):
            return DuplicateCheckResult(success=False, message=DUPLICATE_ID_MESSAGE)
        return DuplicateCheckResult(success=True)

    def check_nickname(self, nickname: str) -> DuplicateCheckResult:
        if self.deps.user_store.exists_by_nickname(nickname):
            return DuplicateCheckResult(success=False, message=DUPLICATE_NICKNAME_MESSAGE)
        return DuplicateCheckResult(success=True)
