"""
Policies - the Auth Gate in front of every protected route.

Just use: `ctx: AuthContext = Depends(require_auth())`

Design:
- the credential comes from the auth cookie, or else from an
  `Authorization: Bearer <token>` header (the cookie wins when both exist)
- no credential raises Unauthenticated, a bad one raises InvalidToken;
  both render as the same 401
- on success the AuthContext is stored on `request.state.auth` and
  returned to the route
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from aria.auth.context import AuthContext
from aria.auth.jwt import verify_token
from aria.config import get_settings
from aria.core.errors import InvalidToken, Unauthenticated

logger = logging.getLogger(__name__)


# Optional bearer (doesn't fail if no header, the cookie may be present)
optional_bearer = HTTPBearer(auto_error=False)


def extract_credential(
    cookies: dict[str, str],
    credentials: HTTPAuthorizationCredentials | None,
    cookie_name: str,
) -> str | None:
    """Pick the token to verify. The cookie takes precedence over the header."""
    token = cookies.get(cookie_name)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


def authenticate(token: str | None) -> AuthContext:
    """
    Resolve a credential to the caller's identity.

    Raises:
        Unauthenticated: no credential
        InvalidToken: signature, payload or expiry check failed
    """
    if not token:
        raise Unauthenticated("No credential supplied")
    payload = verify_token(token)
    return AuthContext.from_token(payload)


def require_auth() -> Callable:
    """
    Require an authenticated caller.

    Usage:
        @router.get("/characters")
        async def list_characters(ctx: AuthContext = Depends(require_auth())):
            ...

    Returns:
        FastAPI Depends that resolves to AuthContext
    """

    async def dependency(
        request: Request,
        credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    ) -> AuthContext:
        token = extract_credential(
            request.cookies,
            credentials,
            get_settings().auth_cookie_name,
        )
        try:
            ctx = authenticate(token)
        except InvalidToken as e:
            logger.info(f"Rejected credential on {request.url.path}: {e}")
            raise
        request.state.auth = ctx
        return ctx

    return dependency
