"""
Tests for the Google OAuth adapter against a mocked transport.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from backend.app.auth.google_oauth import (
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
    GoogleOAuthAdapter,
    OAuthProfile,
)
from core.security import OAuthExchangeError, UnsupportedProviderError


def _adapter(settings, handler) -> GoogleOAuthAdapter:
    return GoogleOAuthAdapter(settings, transport=httpx.MockTransport(handler))


def _google(token_response: httpx.Response, userinfo_response: httpx.Response | None = None):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if str(request.url) == GOOGLE_TOKEN_URL:
            return token_response
        if str(request.url) == GOOGLE_USERINFO_URL:
            return userinfo_response or httpx.Response(500)
        return httpx.Response(404)

    return handler, seen


class TestAuthorizationUrl:
    def test_contains_client_parameters(self, settings):
        adapter = GoogleOAuthAdapter(settings)

        url = urlparse(adapter.authorization_url("google"))
        params = parse_qs(url.query)

        assert url.netloc == "accounts.google.com"
        assert params["client_id"] == [settings.google_client_id]
        assert params["redirect_uri"] == [settings.google_redirect_url]
        assert params["response_type"] == ["code"]
        assert params["access_type"] == ["offline"]
        assert params["scope"] == ["profile"]

    def test_unknown_provider(self, settings):
        with pytest.raises(UnsupportedProviderError):
            GoogleOAuthAdapter(settings).authorization_url("github")


class TestExchangeCode:
    def test_success(self, settings):
        handler, seen = _google(
            httpx.Response(200, json={"access_token": "ya29.token", "expires_in": 3599}),
            httpx.Response(200, json={"sub": "1234567890", "name": "Kim Jiwoo", "picture": "https://x"}),
        )

        profile = _adapter(settings, handler).exchange_code("google", "auth-code")

        assert profile == OAuthProfile(external_id="1234567890", display_name="Kim Jiwoo")
        token_request, userinfo_request = seen
        form = parse_qs(token_request.content.decode())
        assert form["code"] == ["auth-code"]
        assert form["grant_type"] == ["authorization_code"]
        assert form["client_secret"] == [settings.google_client_secret]
        assert userinfo_request.headers["authorization"] == "Bearer ya29.token"

    def test_rejected_code(self, settings):
        handler, seen = _google(httpx.Response(400, json={"error": "invalid_grant"}))

        with pytest.raises(OAuthExchangeError):
            _adapter(settings, handler).exchange_code("google", "stale")
        assert len(seen) == 1

    def test_missing_access_token(self, settings):
        handler, seen = _google(httpx.Response(200, json={"token_type": "Bearer"}))

        with pytest.raises(OAuthExchangeError):
            _adapter(settings, handler).exchange_code("google", "auth-code")
        assert len(seen) == 1

    def test_non_json_token_response(self, settings):
        handler, _ = _google(httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(OAuthExchangeError):
            _adapter(settings, handler).exchange_code("google", "auth-code")

    def test_userinfo_missing_name(self, settings):
        handler, _ = _google(
            httpx.Response(200, json={"access_token": "ya29.token"}),
            httpx.Response(200, json={"sub": "1234567890"}),
        )

        with pytest.raises(OAuthExchangeError):
            _adapter(settings, handler).exchange_code("google", "auth-code")

    def test_userinfo_blank_name(self, settings):
        handler, _ = _google(
            httpx.Response(200, json={"access_token": "ya29.token"}),
            httpx.Response(200, json={"sub": "1234567890", "name": "   "}),
        )

        with pytest.raises(OAuthExchangeError):
            _adapter(settings, handler).exchange_code("google", "auth-code")

    def test_userinfo_http_error(self, settings):
        handler, _ = _google(
            httpx.Response(200, json={"access_token": "ya29.token"}),
            httpx.Response(401),
        )

        with pytest.raises(OAuthExchangeError):
            _adapter(settings, handler).exchange_code("google", "auth-code")

    def test_network_error(self, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(OAuthExchangeError):
            _adapter(settings, handler).exchange_code("google", "auth-code")

    def test_empty_code(self, settings):
        handler, seen = _google(httpx.Response(200, json={"access_token": "unused"}))

        with pytest.raises(OAuthExchangeError):
            _adapter(settings, handler).exchange_code("google", "")
        assert seen == []

    def test_unknown_provider_makes_no_requests(self, settings):
        handler, seen = _google(httpx.Response(200, json={"access_token": "unused"}))

        with pytest.raises(UnsupportedProviderError):
            _adapter(settings, handler).exchange_code("kakao", "auth-code")
        assert seen == []
