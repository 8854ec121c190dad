"""User API: registration, sessions, profile, admin user management and social login."""

from typing import Annotated, Any
from urllib.parse import urlencode

from fastapi import APIRouter, Body, Depends, File, Query, Request, Response, UploadFile
from fastapi.responses import RedirectResponse

from lms.api.v1.dependencies import (
    AdminUser,
    CurrentUser,
    get_oauth_service,
    get_user_service,
    read_image,
)
from lms.application.dtos.auth import AuthTokens
from lms.application.use_cases import OAuthService, UserService
from lms.core.config import get_settings
from lms.core.constants import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from lms.core.limiter import limit_auth, limit_upload, limit_writes
from lms.domain.enums import AuthProvider
from lms.domain.exceptions import AuthenticationException, LmsException
from lms.schemas.common import ApiResponse, MessageResponse, envelope
from lms.schemas.user import (
    ActivationRequest,
    ActivationTicketResponse,
    CreatePasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    SessionResponse,
    UpdatePasswordRequest,
    UpdateRoleRequest,
    UserResponse,
)
from lms.shared.telemetry.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)

Users = Annotated[UserService, Depends(get_user_service)]


def set_session_cookies(response: Response, session: AuthTokens) -> None:
    """Set HTTP-only access and refresh cookies with the configured lifetimes."""
    settings = get_settings()
    common: dict[str, Any] = {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
    }
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        session.access_token,
        max_age=settings.access_token_expire_minutes * 60,
        **common,
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        session.refresh_token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        **common,
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)


# ---- Registration and sessions ----


@router.post(
    "/register",
    response_model=ApiResponse[ActivationTicketResponse],
    status_code=201,
)
@limit_auth
async def register(request: Request, body: RegisterRequest, users: Users):
    """Mail a 4-digit activation code; the returned token is needed to activate."""
    ticket = await users.register(body.name, body.email, body.password)
    return envelope(
        f"Please check your email: {ticket.email} to activate your account", ticket
    )


@router.post("/activate-user", response_model=ApiResponse[UserResponse], status_code=201)
@limit_auth
async def activate_user(request: Request, body: ActivationRequest, users: Users):
    user = await users.activate(body.activation_token, body.activation_code)
    return envelope("Account activated successfully", user)


@router.post("/login", response_model=ApiResponse[SessionResponse])
@limit_auth
async def login(request: Request, response: Response, body: LoginRequest, users: Users):
    """Authenticate; tokens are returned and also set as HTTP-only cookies."""
    session = await users.login(body.email, body.password)
    set_session_cookies(response, session)
    return envelope("Logged in successfully", session)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, current_user: CurrentUser, users: Users):
    await users.logout(current_user.id)
    clear_session_cookies(response)
    return MessageResponse(message="Logged out successfully")


@router.post("/refresh", response_model=ApiResponse[SessionResponse])
@limit_auth
async def refresh(
    request: Request,
    response: Response,
    users: Users,
    body: RefreshRequest | None = None,
):
    """New token pair from the refresh token in the body or the refresh_token cookie."""
    token = (body.refresh_token if body else None) or request.cookies.get(
        REFRESH_TOKEN_COOKIE
    )
    if not token:
        raise AuthenticationException("Refresh token is missing")
    session = await users.refresh(token)
    set_session_cookies(response, session)
    return envelope("Token refreshed", session)


# ---- Profile ----


@router.get("/user-info", response_model=ApiResponse[UserResponse])
async def user_info(current_user: CurrentUser, users: Users):
    return envelope("User retrieved successfully", await users.get_info(current_user.id))


@router.put("/update-info", response_model=ApiResponse[UserResponse])
@limit_writes
async def update_info(
    request: Request,
    current_user: CurrentUser,
    users: Users,
    payload: dict[str, Any] = Body(...),
):
    """Partial profile update; any field other than ``name`` is rejected with 400."""
    user = await users.update_info(current_user.id, payload)
    return envelope("User updated successfully", user)


@router.put("/update-password", response_model=ApiResponse[UserResponse])
@limit_writes
async def update_password(
    request: Request, body: UpdatePasswordRequest, current_user: CurrentUser, users: Users
):
    user = await users.update_password(
        current_user.id, body.old_password, body.new_password
    )
    return envelope("Password updated successfully", user)


@router.put("/create-password", response_model=ApiResponse[UserResponse])
@limit_writes
async def create_password(
    request: Request, body: CreatePasswordRequest, current_user: CurrentUser, users: Users
):
    """Set a first password on an account created through social login."""
    user = await users.create_password(current_user.id, body.password)
    return envelope("Password created successfully", user)


@router.put("/update-avatar", response_model=ApiResponse[UserResponse])
@limit_upload
async def update_avatar(
    request: Request,
    current_user: CurrentUser,
    users: Users,
    file: UploadFile = File(...),
):
    image = await read_image(file)
    user = await users.update_avatar(current_user.id, image)
    return envelope("Avatar updated successfully", user)


# ---- Admin ----


@router.get("/get-all-users/admin", response_model=ApiResponse[list[UserResponse]])
async def get_all_users(admin: AdminUser, users: Users):
    return envelope("Users retrieved successfully", await users.list_users(admin.id))


@router.put("/update-role/admin", response_model=ApiResponse[UserResponse])
@limit_writes
async def update_role(
    request: Request, body: UpdateRoleRequest, admin: AdminUser, users: Users
):
    user = await users.update_role(body.email, body.role)
    return envelope("User role updated successfully", user)


@router.delete("/delete-user/{user_id}", response_model=MessageResponse)
@limit_writes
async def delete_user(request: Request, user_id: str, admin: AdminUser, users: Users):
    """Delete a user with their orders, notifications, reviews and questions."""
    await users.delete_user(user_id=user_id)
    return MessageResponse(message="User deleted successfully")


# ---- Social login ----


def _callback_uri(provider: AuthProvider) -> str:
    return f"{get_settings().oauth_redirect_base_url}/{provider.value}/callback"


@router.get("/auth/{provider}")
async def oauth_start(
    provider: AuthProvider,
    oauth: Annotated[OAuthService, Depends(get_oauth_service)],
):
    """Redirect to the provider consent screen."""
    return RedirectResponse(oauth.start(provider, _callback_uri(provider)))


@router.get("/auth/{provider}/callback")
async def oauth_callback(
    provider: AuthProvider,
    oauth: Annotated[OAuthService, Depends(get_oauth_service)],
    code: str = Query(default=""),
    state: str = Query(default=""),
    error: str | None = Query(default=None),
):
    """Finish social login and redirect back to the client.

    Success sets the session cookies and redirects to ``/auth/success``;
    any failure redirects to ``/auth/failure?error=<message>``.
    """
    client = get_settings().client_base_url.rstrip("/")
    failure = f"{client}/auth/failure"
    if error or not code or not state:
        reason = error or "Missing code or state"
        return RedirectResponse(f"{failure}?{urlencode({'error': reason})}")
    try:
        session = await oauth.complete(provider, code, state, _callback_uri(provider))
    except LmsException as e:
        logger.warning("%s login failed: %s", provider.value, e.message)
        return RedirectResponse(f"{failure}?{urlencode({'error': e.message})}")
    redirect = RedirectResponse(f"{client}/auth/success")
    set_session_cookies(redirect, session)
    return redirect
