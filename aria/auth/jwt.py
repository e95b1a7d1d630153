# =============================================================================
# JWT Authentication Implementation
# =============================================================================
#
# This module provides:
#   - Session token issuance (one stateless token, 7 days by default)
#   - Token validation
#   - Password hashing
#
# Tokens are not stored anywhere. A token stays valid until it expires;
# logging out only clears the client's cookie. There is no revocation list.
#
# =============================================================================

from datetime import datetime, timedelta, timezone
import secrets
import hashlib
import logging

from pydantic import BaseModel
import jwt

from aria.config import get_settings
from aria.core.errors import InvalidToken
from aria.core.utils import utc_now

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


# =============================================================================
# Models
# =============================================================================

class TokenPayload(BaseModel):
    """JWT token payload."""
    sub: str  # user_id
    email: str
    exp: datetime
    iat: datetime


# =============================================================================
# Password Hashing
# =============================================================================

def hash_password(password: str) -> str:
    """
    Hash a password using salted PBKDF2-SHA256.

    Returns: salt:hash format string
    """
    salt = secrets.token_hex(32)
    hash_bytes = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        iterations=PBKDF2_ITERATIONS,
    )
    return f"{salt}:{hash_bytes.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        salt, stored_hash = password_hash.split(':')
        hash_bytes = hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations=PBKDF2_ITERATIONS,
        )
        return secrets.compare_digest(hash_bytes.hex(), stored_hash)
    except (ValueError, AttributeError):
        return False


# =============================================================================
# Token Creation
# =============================================================================

def issue_token(user_id: str, email: str, now: datetime | None = None) -> str:
    """Create a signed session token for a user."""
    settings = get_settings()
    now = now or utc_now()
    expire = now + timedelta(days=settings.jwt_expire_days)

    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": expire,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


# =============================================================================
# Token Validation
# =============================================================================

def verify_token(token: str) -> TokenPayload:
    """
    Decode and validate a session token.

    Raises:
        InvalidToken: bad signature, malformed payload, or expired
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token has expired")
    except jwt.InvalidTokenError as e:
        raise InvalidToken(f"Invalid token: {e}")

    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise InvalidToken("Invalid token: bad subject")

    return TokenPayload(
        sub=payload["sub"],
        email=str(payload.get("email", "")),
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
    )
