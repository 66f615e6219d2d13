"""
Authentication router.

Routes:
- GET  /auth/{provider}            OAuth consent URL
- GET  /auth/callback/{provider}   OAuth callback, sets session cookie, redirects to client
- POST /signup                     local signup (no session)
- POST /login                      local login, sets session cookie
- POST /logout                     clears session cookie
- GET  /check-id/{id}              id availability
- GET  /check-nickname/{nickname}  nickname availability

Failures are raised as AuthError subclasses and rendered by
backend.app.error_handlers.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from core.config import Settings, get_settings
from core.logging import get_logger

from ..auth.cookies import clear_session_cookie_kwargs, session_cookie_kwargs
from ..auth.dependencies import SessionClaims, get_current_session
from ..dependencies import get_auth_service
from ..schemas import (
    AuthUrlResponse,
    DuplicateCheckResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    SignupRequest,
)
from ..services import AuthService

logger = get_logger("auth")

router = APIRouter(tags=["auth"])


def _errors(*status_codes: int) -> dict:
    return {code: {"model": ErrorResponse} for code in status_codes}


@router.get("/auth/{provider}", response_model=AuthUrlResponse, responses=_errors(404))
def oauth_login(provider: str, service: AuthService = Depends(get_auth_service)) -> AuthUrlResponse:
    """Return the provider's consent URL for the client to navigate to."""
    return AuthUrlResponse(authUrl=service.oauth_authorization_url(provider))


@router.get("/auth/callback/{provider}", responses=_errors(404, 409, 502))
def oauth_callback(
    provider: str,
    code: str = Query(...),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """
    Handle the provider's redirect after consent.

    Flow:
    1. Exchange the code for the user's profile
    2. Reuse or create the matching user
    3. Issue a session and set it as a cookie
    4. Redirect to the client with the nickname in the query string
    """
    result = service.oauth_callback(provider, code)

    response = RedirectResponse(url=result.redirect_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(**session_cookie_kwargs(settings, result.session.token, result.session.expires_at))
    return response


@router.post("/signup", status_code=status.HTTP_204_NO_CONTENT, responses=_errors(400, 409))
def signup(body: SignupRequest, service: AuthService = Depends(get_auth_service)) -> Response:
    """Create a local account. The client must log in afterwards."""
    service.signup(
        provider=body.provider,
        oauth_id=body.id,
        nickname=body.nickname,
        envelope=body.envelope(),
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/login", response_model=LoginResponse, responses=_errors(400, 401))
def login(
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Verify a local account's password and set the session cookie."""
    result = service.login(provider=body.provider, oauth_id=body.id, envelope=body.envelope())

    response = JSONResponse(
        status_code=status.HTTP_200_OK,
        content=LoginResponse.model_validate(result.user).model_dump(),
    )
    response.set_cookie(**session_cookie_kwargs(settings, result.session.token, result.session.expires_at))
    return response


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, responses=_errors(401))
def logout(
    session: SessionClaims = Depends(get_current_session),
    settings: Settings = Depends(get_settings),
) -> Response:
    """
    Clear the session cookie.

    Tokens are stateless, so a copied token stays valid until it expires.
    """
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(**clear_session_cookie_kwargs(settings))
    logger.info("logout", provider=session.provider)
    return response


@router.get(
    "/check-id/{oauth_id}",
    response_model=DuplicateCheckResponse,
    response_model_exclude_none=True,
)
def check_id(
    oauth_id: str,
    provider: str = Query(...),
    service: AuthService = Depends(get_auth_service),
) -> DuplicateCheckResponse:
    result = service.check_id(oauth_id, provider)
    return DuplicateCheckResponse(success=result.success, message=result.message)


@router.get(
    "/check-nickname/{nickname}",
    response_model=DuplicateCheckResponse,
    response_model_exclude_none=True,
)
def check_nickname(nickname: str, service: AuthService = Depends(get_auth_service)) -> DuplicateCheckResponse:
    result = service.check_nickname(nickname)
    return DuplicateCheckResponse(success=result.success, message=result.message)
