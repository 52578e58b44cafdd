"""Registration, login and logout endpoints.

Provides:
- POST /register, GET /confirm
- POST /login, GET /logout
- GET /auth/oauth/authorize, GET /auth/oauth/callback
"""

# No `from __future__ import annotations` here: slowapi's wrapper hides this
# module's globals from FastAPI, so annotations must be real objects.

import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import RedirectResponse

from recipes_api.api.dependencies import get_auth_service, get_oauth_client
from recipes_api.auth.dependencies import SessionDep, login_session
from recipes_api.cache.rate_limit import rate_limit_auth
from recipes_api.clients.oauth.client import OAuthClient
from recipes_api.clients.oauth.exceptions import (
    OAuthExchangeError,
    OAuthIdentityError,
    OAuthUnavailableError,
)
from recipes_api.core.config import get_settings
from recipes_api.core.exceptions import (
    BadRequestException,
    ConflictException,
    ServiceUnavailableException,
    UnauthorizedException,
)
from recipes_api.observability.logging import get_logger
from recipes_api.schemas.auth import (
    ConfirmResponse,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
)
from recipes_api.schemas.user import UserResponse
from recipes_api.services.auth.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidConfirmationTokenError,
    InvalidCredentialsError,
)
from recipes_api.services.auth.service import AuthService
from recipes_api.services.users.service import to_user_response


logger = get_logger(__name__)

router = APIRouter(tags=["Auth"])

OAUTH_STATE_KEY = "oauth_state"


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        409: {"description": "Email already registered"},
        422: {"description": "Invalid email or password too short"},
        429: {"description": "Too many attempts"},
    },
)
@rate_limit_auth()
async def register(
    request: Request,  # noqa: ARG001 - read by the rate limiter
    response: Response,  # noqa: ARG001 - rate limit headers
    body: RegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserResponse:
    """Register with email and password.

    The account starts unconfirmed; a confirmation link is emailed in the
    background.
    """
    try:
        user = await auth_service.register(body.email, body.name, body.password)
    except EmailAlreadyRegisteredError as e:
        raise ConflictException(str(e)) from e
    return to_user_response(user)


@router.get(
    "/confirm",
    response_model=ConfirmResponse,
    summary="Confirm an email address",
    responses={400: {"description": "Invalid or expired token"}},
)
async def confirm(
    token: Annotated[str, Query(min_length=1)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ConfirmResponse:
    try:
        await auth_service.confirm_email(token)
    except InvalidConfirmationTokenError as e:
        raise BadRequestException("Invalid or expired confirmation token") from e
    return ConfirmResponse()


@router.post(
    "/login",
    response_model=UserResponse,
    summary="Log in with email and password",
    responses={
        401: {"description": "Invalid email or password"},
        429: {"description": "Too many attempts"},
    },
)
@rate_limit_auth()
async def login(
    request: Request,  # noqa: ARG001 - read by the rate limiter
    response: Response,  # noqa: ARG001 - rate limit headers
    body: LoginRequest,
    session: SessionDep,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserResponse:
    """Check credentials and attach the user to the session cookie."""
    try:
        user = await auth_service.authenticate(body.email, body.password)
    except InvalidCredentialsError as e:
        raise UnauthorizedException(str(e)) from e

    login_session(session, user)
    logger.info("User logged in", user_id=str(user.id))
    return to_user_response(user)


@router.get("/logout", response_model=LogoutResponse, summary="Log out")
async def logout(session: SessionDep) -> LogoutResponse:
    """Destroy the session; the response carries a removal cookie."""
    session.destroy()
    return LogoutResponse()


@router.get(
    "/auth/oauth/authorize",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Start OAuth login",
    responses={404: {"description": "OAuth login is not enabled"}},
)
async def oauth_authorize(
    session: SessionDep,
    oauth_client: Annotated[OAuthClient, Depends(get_oauth_client)],
) -> RedirectResponse:
    state = secrets.token_urlsafe(32)
    session.insert(OAUTH_STATE_KEY, state)
    return RedirectResponse(
        oauth_client.authorization_url(state),
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )


@router.get(
    "/auth/oauth/callback",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Finish OAuth login",
    responses={
        400: {"description": "State mismatch or rejected code"},
        404: {"description": "OAuth login is not enabled"},
        409: {"description": "Email belongs to another linked account"},
        503: {"description": "Identity provider unreachable"},
    },
)
async def oauth_callback(
    session: SessionDep,
    oauth_client: Annotated[OAuthClient, Depends(get_oauth_client)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    code: Annotated[str | None, Query()] = None,
    state: Annotated[str | None, Query()] = None,
    error: Annotated[str | None, Query()] = None,
) -> RedirectResponse:
    """Exchange the provider's code, log the user in and return to the frontend."""
    expected_state = session.get(OAUTH_STATE_KEY)
    session.remove(OAUTH_STATE_KEY)

    if error:
        msg = f"Identity provider returned an error: {error}"
        raise BadRequestException(msg)
    if not state or not expected_state or not secrets.compare_digest(
        state, expected_state
    ):
        raise BadRequestException("OAuth state mismatch")
    if not code:
        raise BadRequestException("Missing authorization code")

    try:
        access_token = await oauth_client.exchange_code(code)
        identity = await oauth_client.fetch_identity(access_token)
    except OAuthUnavailableError as e:
        raise ServiceUnavailableException("Identity provider unavailable") from e
    except (OAuthExchangeError, OAuthIdentityError) as e:
        raise BadRequestException(str(e)) from e

    try:
        user = await auth_service.login_oauth(identity)
    except EmailAlreadyRegisteredError as e:
        raise ConflictException(str(e)) from e

    login_session(session, user)
    logger.info("User logged in via OAuth", user_id=str(user.id))

    return RedirectResponse(
        get_settings().api.frontend_url,
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
