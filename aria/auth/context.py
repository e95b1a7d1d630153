"""
Auth context - who is making the request.

This is the lightweight object the Auth Gate hands to route handlers once a
token has been verified. Its `user_id` is the owner key for every
character query.
"""

from __future__ import annotations

from dataclasses import dataclass

from aria.auth.jwt import TokenPayload


@dataclass(frozen=True)
class AuthContext:
    """
    Identity of an authenticated caller.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_auth())):
            print(f"User {ctx.user_id} is listing their characters")
    """

    user_id: str
    email: str = ""

    @classmethod
    def from_token(cls, payload: TokenPayload) -> AuthContext:
        return cls(user_id=payload.sub, email=payload.email)
