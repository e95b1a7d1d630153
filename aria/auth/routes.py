# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST  /auth/register  - Create account, set auth cookie
#   POST  /auth/login     - Check credentials, set auth cookie
#   POST  /auth/logout    - Clear auth cookie
#   GET   /auth/me        - Get current user
#   PATCH /auth/me        - Update display name
#
# =============================================================================

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status

from aria.auth.accounts import AccountManager
from aria.auth.context import AuthContext
from aria.auth.policies import require_auth
from aria.config import get_settings
from aria.core.models import UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


def get_account_manager(request: Request) -> AccountManager:
    return AccountManager(request.app.state.storage)


# =============================================================================
# Cookie helpers
# =============================================================================


def set_auth_cookie(response: Response, token: str) -> None:
    """HTTP-only cookie, usable cross-site (SameSite=None requires Secure)."""
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.token_max_age,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


def clear_auth_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


# =============================================================================
# Public Endpoints
# =============================================================================


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    response: Response,
    data: dict[str, Any] = Body(...),
    accounts: AccountManager = Depends(get_account_manager),
):
    """
    Create a new account.

    Sets the auth cookie and returns the public profile.
    """
    user, token = await accounts.register(
        data.get("email"),
        data.get("password"),
        data.get("displayName"),
    )
    set_auth_cookie(response, token)
    return user


@router.post("/login", response_model=UserResponse)
async def login(
    response: Response,
    data: dict[str, Any] = Body(...),
    accounts: AccountManager = Depends(get_account_manager),
):
    """
    Authenticate and set the auth cookie.
    """
    user, token = await accounts.login(data.get("email"), data.get("password"))
    set_auth_cookie(response, token)
    return user


@router.post("/logout")
async def logout(response: Response):
    """
    Logout by clearing the cookie.

    Tokens are stateless: one copied elsewhere stays valid until it expires.
    """
    clear_auth_cookie(response)
    return {"status": "ok", "message": "Logged out"}


# =============================================================================
# Protected Endpoints
# =============================================================================


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    ctx: AuthContext = Depends(require_auth()),
    accounts: AccountManager = Depends(get_account_manager),
):
    """
    Get the current authenticated user.
    """
    return await accounts.me(ctx.user_id)


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    data: dict[str, Any] = Body(...),
    ctx: AuthContext = Depends(require_auth()),
    accounts: AccountManager = Depends(get_account_manager),
):
    """
    Update the current user's display name.
    """
    return await accounts.update_profile(ctx.user_id, data.get("displayName"))
