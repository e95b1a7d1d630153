"""
Core module - data models, errors and shared helpers.

This module contains:
- models: Character sheet schema and validation, user responses
- errors: The API error taxonomy
- utils: Shared utility functions
"""

from aria.core.models import (
    CHARACTER_SCHEMA_VERSION,
    CharacterSheet,
    CharacterStatus,
    SheetMode,
    StatMode,
    SkillMode,
    UserResponse,
    validate_character,
)

from aria.core.errors import (
    AriaError,
    InvalidInput,
    AuthenticationError,
    Unauthenticated,
    InvalidToken,
    InvalidCredentials,
    EmailTaken,
    NotFound,
    ValidationError,
    StorageError,
    ConfigurationError,
)

from aria.core.utils import (
    normalize_email,
    utc_now,
)

__all__ = [
    # Models
    "CHARACTER_SCHEMA_VERSION",
    "CharacterSheet",
    "CharacterStatus",
    "SheetMode",
    "StatMode",
    "SkillMode",
    "UserResponse",
    "validate_character",
    # Errors
    "AriaError",
    "InvalidInput",
    "AuthenticationError",
    "Unauthenticated",
    "InvalidToken",
    "InvalidCredentials",
    "EmailTaken",
    "NotFound",
    "ValidationError",
    "StorageError",
    "ConfigurationError",
    # Utils
    "normalize_email",
    "utc_now",
]
