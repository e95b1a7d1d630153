"""
Account management: registration, login and profile lookups.

The manager works on a DocumentStore and knows nothing about HTTP; the
routes in `aria.auth.routes` turn its results into responses and cookies.
Password hashing runs in the threadpool so it never blocks the event loop.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool

from aria.auth.jwt import hash_password, issue_token, verify_password
from aria.core.errors import EmailTaken, InvalidCredentials, InvalidInput, NotFound
from aria.core.models import UserResponse
from aria.core.utils import normalize_email, utc_now
from aria.storage.base import Collections, DocumentStore, DuplicateDocumentError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidInput(f"{field} is required")
    return value


class AccountManager:
    """Registers users, checks their credentials and serves their profile."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def register(
        self,
        email: Any,
        password: Any,
        display_name: Any = None,
    ) -> tuple[UserResponse, str]:
        """
        Create a user and issue their first token.

        Returns:
            (public profile, session token)

        Raises:
            InvalidInput: missing fields, no "@" in email, short password
            EmailTaken: the normalized email is already registered
        """
        email = normalize_email(_require_text(email, "email"))
        password = _require_text(password, "password")
        if "@" not in email:
            raise InvalidInput("email must contain '@'")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInput(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        if display_name is not None and not isinstance(display_name, str):
            raise InvalidInput("displayName must be a string")

        if await self.store.find_one(Collections.USERS, {"email": email}):
            raise EmailTaken()

        password_hash = await run_in_threadpool(hash_password, password)
        now = utc_now()
        doc = {
            "email": email,
            "passwordHash": password_hash,
            "displayName": (display_name or "").strip(),
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            doc["id"] = await self.store.insert_one(Collections.USERS, doc)
        except DuplicateDocumentError:
            # Lost a race with a concurrent registration
            raise EmailTaken()

        logger.info(f"Registered user {doc['id']}")
        return UserResponse.from_document(doc), issue_token(doc["id"], email)

    async def login(self, email: Any, password: Any) -> tuple[UserResponse, str]:
        """
        Check credentials and issue a token.

        Unknown email and wrong password raise the same InvalidCredentials.
        """
        email = normalize_email(_require_text(email, "email"))
        password = _require_text(password, "password")

        user = await self.store.find_one(Collections.USERS, {"email": email})
        if not user:
            raise InvalidCredentials("Unknown email")

        valid = await run_in_threadpool(verify_password, password, user.get("passwordHash", ""))
        if not valid:
            raise InvalidCredentials("Wrong password")

        return UserResponse.from_document(user), issue_token(user["id"], user["email"])

    async def me(self, user_id: str) -> UserResponse:
        """Public profile of the caller; NotFound once the user is gone."""
        user = await self.store.find_one(Collections.USERS, {"id": user_id})
        if not user:
            raise NotFound("User not found")
        return UserResponse.from_document(user)

    async def update_profile(self, user_id: str, display_name: Any) -> UserResponse:
        """Change the caller's display name."""
        if not isinstance(display_name, str):
            raise InvalidInput("displayName must be a string")

        user = await self.store.find_one_and_update(
            Collections.USERS,
            {"id": user_id},
            {"displayName": display_name.strip(), "updatedAt": utc_now()},
        )
        if not user:
            raise NotFound("User not found")
        return UserResponse.from_document(user)
