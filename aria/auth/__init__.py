"""
Authentication - stateless tokens and the gate in front of owned resources.

Design principles:
1. One dependency for every protected route: `Depends(require_auth())`
2. Cookie first, bearer header second
3. All 401 causes look the same to the client
"""

from aria.auth.context import AuthContext
from aria.auth.policies import (
    authenticate,
    extract_credential,
    require_auth,
)
from aria.auth.jwt import (
    TokenPayload,
    issue_token,
    verify_token,
    hash_password,
    verify_password,
)
from aria.auth.accounts import AccountManager
from aria.auth.routes import router as auth_router

__all__ = [
    # Main interface
    "require_auth",
    "authenticate",
    "extract_credential",
    "AuthContext",
    # Accounts
    "AccountManager",
    # JWT
    "TokenPayload",
    "issue_token",
    "verify_token",
    "hash_password",
    "verify_password",
    # Router
    "auth_router",
]
