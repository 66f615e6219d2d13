"""
OAuth exchange adapter for Google.

Only the ``google`` provider is recognized; anything else raises
UnsupportedProviderError.
"""

from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from core.config import Settings, get_settings
from core.logging import get_logger
from core.security.errors import OAuthExchangeError, UnsupportedProviderError

logger = get_logger("auth.google")

GOOGLE_PROVIDER = "google"
GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"


class GoogleUserInfo(BaseModel):
    """Userinfo response; only ``sub`` and ``name`` are required."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    sub: str
    name: str
    given_name: str | None = None
    family_name: str | None = None
    picture: str | None = None


@dataclass(frozen=True)
class OAuthProfile:
    external_id: str
    display_name: str


def ensure_supported(provider: str) -> None:
    if provider != GOOGLE_PROVIDER:
        raise UnsupportedProviderError()


class GoogleOAuthAdapter:
    """Talks to Google's OAuth endpoints."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.client_id = settings.google_client_id
        self.client_secret = settings.google_client_secret
        self.redirect_uri = settings.google_redirect_url
        self.timeout = settings.oauth_timeout_seconds
        self._transport = transport

    def authorization_url(self, provider: str) -> str:
        """Build the consent URL the client should navigate to."""
        ensure_supported(provider)
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "access_type": "offline",
            "scope": "profile",
        }
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"

    def exchange_code(self, provider: str, code: str) -> OAuthProfile:
        """
        Exchange an authorization code for the user's profile claims.

        Raises:
            UnsupportedProviderError: For any provider other than google
            OAuthExchangeError: On network errors, HTTP errors, a missing
                access token, or a userinfo body that does not match the schema
        """
        ensure_supported(provider)
        if not code:
            raise OAuthExchangeError("Missing authorization code")

        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                token_resp = client.post(
                    GOOGLE_TOKEN_URL, data=payload, headers={"Accept": "application/json"}
                )
                token_resp.raise_for_status()
                token_data = token_resp.json()
                access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
                if not access_token:
                    raise OAuthExchangeError("Google token response missing access_token")

                user_resp = client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                user_resp.raise_for_status()
                info = GoogleUserInfo.model_validate(user_resp.json())
        except httpx.HTTPStatusError as exc:
            # Avoid leaking response bodies; status is enough context.
            logger.warning(
                "oauth_http_error",
                provider=provider,
                status_code=exc.response.status_code,
                url=str(exc.request.url),
            )
            raise OAuthExchangeError() from None
        except httpx.HTTPError as exc:
            logger.warning("oauth_network_error", provider=provider, error_type=type(exc).__name__)
            raise OAuthExchangeError() from None
        except (ValidationError, ValueError) as exc:
            logger.warning("oauth_profile_invalid", provider=provider, error_type=type(exc).__name__)
            raise OAuthExchangeError() from None

        if not info.sub or not info.name:
            raise OAuthExchangeError("Google profile missing id or name")

        return OAuthProfile(external_id=info.sub, display_name=info.name)


@lru_cache(maxsize=1)
def get_oauth_adapter() -> GoogleOAuthAdapter:
    """Get the adapter built from application settings."""
    return GoogleOAuthAdapter(get_settings())
