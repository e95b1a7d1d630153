"""
Shared utility functions for the Aria backend.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    """Trim and lowercase an email so lookups and the unique index agree."""
    return email.strip().lower()
