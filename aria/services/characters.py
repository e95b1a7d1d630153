"""
Character service - owner-scoped CRUD over character sheets.

Every method takes the authenticated caller's id as `owner_id` and puts it
in the store filter together with the character id. A character that exists
but belongs to someone else therefore behaves exactly like one that does
not exist: the caller gets NotFound either way.

The owner field is always written by the server. Whatever a client sends
for it is dropped by validation and then overwritten.
"""

from __future__ import annotations

import logging
from typing import Any

from aria.core.errors import NotFound
from aria.core.models import CHARACTER_SCHEMA_VERSION, validate_character
from aria.core.utils import utc_now
from aria.storage.base import Collections, DESCENDING, DocumentStore

logger = logging.getLogger(__name__)

# Newest first; the id breaks ties between sheets created in the same instant
LIST_ORDER = [("createdAt", DESCENDING), ("id", DESCENDING)]


class CharacterService:
    """Create, list, read, update and delete the caller's characters."""

    collection = Collections.CHARACTERS

    def __init__(self, store: DocumentStore):
        self.store = store

    async def create_character(self, owner_id: str, fields: Any) -> str:
        """
        Store a new character owned by `owner_id`.

        Returns the new character id.

        Raises:
            ValidationError: the fields break the sheet schema
        """
        document = validate_character(fields)
        now = utc_now()
        document.update({
            "owner": owner_id,
            "schemaVersion": CHARACTER_SCHEMA_VERSION,
            "createdAt": now,
            "updatedAt": now,
        })
        character_id = await self.store.insert_one(self.collection, document)
        logger.info(f"Character {character_id} created for user {owner_id}")
        return character_id

    async def list_characters(self, owner_id: str) -> list[dict[str, Any]]:
        """All characters of `owner_id`, most recently created first."""
        return await self.store.find(
            self.collection,
            {"owner": owner_id},
            sort=LIST_ORDER,
        )

    async def get_character(self, owner_id: str, character_id: str) -> dict[str, Any]:
        character = await self.store.find_one(
            self.collection,
            {"id": character_id, "owner": owner_id},
        )
        if not character:
            raise NotFound("Character not found")
        return character

    async def update_character(self, owner_id: str, character_id: str, fields: Any) -> dict[str, Any]:
        """
        Merge the submitted fields over the stored character.

        Submitted top-level fields replace the stored ones; the rest stay.
        Sending every field amounts to a full replacement.

        Raises:
            ValidationError: a submitted field breaks the sheet schema
            NotFound: no character with this id belongs to `owner_id`
        """
        changes = validate_character(fields, partial=True)
        changes.update({
            "owner": owner_id,
            "updatedAt": utc_now(),
        })
        character = await self.store.find_one_and_update(
            self.collection,
            {"id": character_id, "owner": owner_id},
            changes,
        )
        if not character:
            raise NotFound("Character not found")
        logger.info(f"Character {character_id} updated by user {owner_id}")
        return character

    async def delete_character(self, owner_id: str, character_id: str) -> None:
        deleted = await self.store.delete_one(
            self.collection,
            {"id": character_id, "owner": owner_id},
        )
        if not deleted:
            raise NotFound("Character not found")
        logger.info(f"Character {character_id} deleted by user {owner_id}")
