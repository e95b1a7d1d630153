"""
Tests for password hashing and session tokens.
"""

from datetime import timedelta

import jwt
import pytest

from aria.auth.jwt import (
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)
from aria.config import get_settings
from aria.core.errors import InvalidToken
from aria.core.utils import utc_now


class TestPasswordHashing:
    def test_hash_is_salted_and_verifiable(self):
        first = hash_password("correct horse")
        second = hash_password("correct horse")

        assert first != second
        assert "correct horse" not in first
        assert verify_password("correct horse", first)
        assert verify_password("correct horse", second)

    def test_wrong_password_rejected(self):
        assert not verify_password("wrong horse", hash_password("correct horse"))

    def test_malformed_hash_rejected(self):
        assert not verify_password("correct horse", "not-a-hash")
        assert not verify_password("correct horse", "")


class TestTokens:
    def test_issue_and_verify(self):
        token = issue_token("user1", "ysolde@example.com")

        payload = verify_token(token)
        assert payload.sub == "user1"
        assert payload.email == "ysolde@example.com"

    def test_expires_after_seven_days(self):
        now = utc_now()
        payload = verify_token(issue_token("user1", "a@example.com", now=now))

        lifetime = payload.exp - payload.iat
        assert lifetime == timedelta(days=7)

    def test_expired_token_rejected(self):
        token = issue_token("user1", "a@example.com", now=utc_now() - timedelta(days=8))

        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_wrong_signature_rejected(self):
        now = utc_now()
        forged = jwt.encode(
            {"sub": "user1", "email": "a@example.com", "iat": now, "exp": now + timedelta(days=1)},
            "some-other-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidToken):
            verify_token(forged)

    def test_missing_subject_rejected(self):
        now = utc_now()
        token = jwt.encode(
            {"email": "a@example.com", "iat": now, "exp": now + timedelta(days=1)},
            get_settings().jwt_secret,
            algorithm="HS256",
        )

        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidToken):
            verify_token("not-a-token")
