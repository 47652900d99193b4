# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for the Supabase Auth flow:
# - login / register / logout with email + password
# - session and user info for the signed-in user
# - the email-confirmation callback (code -> session exchange)
#
# Tokens are handed to browsers as HTTP-only cookies; API clients can use
# the access_token from the login response as a Bearer token instead.
# =============================================================================

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import RedirectResponse
from supabase import AuthError

from app.auth.dependencies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    get_current_user,
    get_current_user_optional,
)
from app.auth.models import (
    AuthUser,
    Credentials,
    LoginResponse,
    LoginUser,
    MessageResponse,
    RegisteredUser,
    RegisterResponse,
    SessionResponse,
    SessionUser,
    UserResponse,
)
from app.config import settings
from app.exceptions import (
    AuthenticationRequiredError,
    BadRequestError,
    InvalidCredentialsError,
    RegistrationError,
)
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

MIN_PASSWORD_LENGTH = 6
DEFAULT_REDIRECT = "/dashboard"
REFRESH_COOKIE_MAX_AGE = 30 * 24 * 3600


def set_session_cookies(response: Response, session) -> None:
    """Hand the Supabase session to the browser as HTTP-only cookies."""
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        session.refresh_token,
        max_age=REFRESH_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
        path="/",
    )


def clear_session_cookies(response: Response) -> None:
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            httponly=True,
            secure=settings.secure_cookies,
            samesite="lax",
        )


def _require_credentials(body: Credentials) -> tuple[str, str]:
    if not body.email or not body.password:
        raise BadRequestError("Email and password are required", fields=["email", "password"])
    return body.email, body.password


def _safe_redirect_path(redirect_to: str | None) -> str:
    """Only same-site relative paths are followed."""
    if redirect_to and redirect_to.startswith("/") and not redirect_to.startswith("//"):
        return redirect_to
    return DEFAULT_REDIRECT


def _site_redirect(path: str) -> RedirectResponse:
    return RedirectResponse(url=f"{settings.SITE_URL.rstrip('/')}{path}", status_code=303)


@router.post("/login", response_model=LoginResponse)
async def login(body: Credentials, response: Response) -> LoginResponse:
    """
    Sign in with email and password.

    Sets the session cookies and also returns the access token for
    non-browser clients.

    Raises:
        400: If email or password is missing
        401: If Supabase rejects the credentials
    """
    email, password = _require_credentials(body)

    client = SupabaseClient.get_auth_client()
    try:
        result = client.auth.sign_in_with_password({"email": email, "password": password})
    except AuthError as e:
        logger.warning(f"Login failed for {email}: {e.message}")
        raise InvalidCredentialsError(e.message)

    if result.session is None or result.user is None:
        raise InvalidCredentialsError("Invalid login credentials")

    set_session_cookies(response, result.session)
    logger.info(f"User {result.user.id} signed in")

    return LoginResponse(
        user=LoginUser(
            id=result.user.id,
            email=result.user.email,
            user_metadata=result.user.user_metadata or {},
            last_sign_in_at=result.user.last_sign_in_at,
        ),
        access_token=result.session.access_token,
        expires_at=result.session.expires_at,
    )


@router.post("/register", response_model=RegisterResponse)
async def register(body: Credentials) -> RegisterResponse:
    """
    Create an account.

    Supabase sends a confirmation email pointing back at
    {SITE_URL}/auth/callback when confirmation is enabled.

    Raises:
        400: If input is missing, the password is too short, or sign-up fails
    """
    email, password = _require_credentials(body)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise RegistrationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )

    client = SupabaseClient.get_auth_client()
    try:
        result = client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {
                "email_redirect_to": f"{settings.SITE_URL.rstrip('/')}/auth/callback",
            },
        })
    except AuthError as e:
        logger.warning(f"Registration failed for {email}: {e.message}")
        raise RegistrationError(e.message)

    user = result.user
    # Supabase returns a user with no identities until the email is confirmed
    confirmation_required = user is not None and user.identities is not None and len(user.identities) == 0

    if user is not None:
        logger.info(f"Registered user {user.id} (confirmation required: {confirmation_required})")

    return RegisterResponse(
        user=RegisteredUser(
            id=user.id,
            email=user.email,
            email_confirmed=not confirmation_required,
        ) if user is not None else None,
        message=(
            "Registration successful. Please check your email to confirm your account."
            if confirmation_required
            else "Registration successful."
        ),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    user: AuthUser | None = Depends(get_current_user_optional),
) -> MessageResponse:
    """
    Sign out.

    The cookies are always cleared; revoking the session server-side is
    best effort.
    """
    if user is not None and user.access_token:
        try:
            SupabaseClient.get_client().auth.admin.sign_out(user.access_token)
            logger.info(f"User {user.id} signed out")
        except (AuthError, SupabaseClientError) as e:
            logger.warning(f"Could not revoke session for {user.id}: {e}")

    clear_session_cookies(response)
    return MessageResponse(message="Successfully signed out")


@router.get("/session", response_model=SessionResponse)
async def get_session(
    user: AuthUser = Depends(get_current_user)
) -> SessionResponse:
    """
    The signed-in user and when their access token expires.

    Raises:
        401: If not authenticated
    """
    return SessionResponse(
        user=SessionUser(id=user.id, email=user.email),
        expires_at=user.expires_at,
    )


@router.get("/user", response_model=UserResponse)
async def get_user(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Full profile of the signed-in user, fetched from Supabase Auth.

    Raises:
        401: If not authenticated or Supabase no longer accepts the token
    """
    client = SupabaseClient.get_auth_client()
    try:
        result = client.auth.get_user(user.access_token)
    except AuthError as e:
        logger.warning(f"Could not fetch user {user.id}: {e.message}")
        raise AuthenticationRequiredError("Not authenticated")

    if result is None or result.user is None:
        raise AuthenticationRequiredError("Not authenticated")

    profile = result.user
    return UserResponse(
        id=profile.id,
        email=profile.email,
        email_verified=profile.email_confirmed_at is not None,
        last_sign_in_at=profile.last_sign_in_at,
        created_at=profile.created_at,
        user_metadata=profile.user_metadata or {},
    )


@router.get("/callback")
async def auth_callback(
    code: str | None = Query(default=None),
    redirect_to: str | None = Query(default=None, alias="redirect_to"),
) -> RedirectResponse:
    """
    Finish an email-link sign-in.

    Exchanges the one-time code for a session, sets the cookies and
    redirects into the site.
    """
    if not code:
        return _site_redirect("/login")

    try:
        client = SupabaseClient.get_auth_client()
        result = client.auth.exchange_code_for_session({"auth_code": code})
    except (AuthError, SupabaseClientError) as e:
        logger.warning(f"Auth code exchange failed: {e}")
        return _site_redirect(f"/login?error={quote('Authentication failed')}")

    redirect = _site_redirect(_safe_redirect_path(redirect_to))
    if result.session is not None:
        set_session_cookies(redirect, result.session)
    return redirect
