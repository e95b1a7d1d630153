"""
Tests for owner-scoped character operations.

Core principle: a caller only ever sees and touches their own characters.
"""

import pytest
from bson import ObjectId

from aria.core.errors import NotFound, ValidationError
from aria.core.models import CHARACTER_SCHEMA_VERSION

ALICE = "owner-alice"
BOB = "owner-bob"

SERVER_FIELDS = {"id", "owner", "createdAt", "updatedAt", "schemaVersion"}


# =============================================================================
# Create / Get
# =============================================================================


class TestCreate:
    @pytest.mark.asyncio
    async def test_round_trip(self, characters, sample_character):
        character_id = await characters.create_character(ALICE, sample_character)

        stored = await characters.get_character(ALICE, character_id)

        assert {k: v for k, v in stored.items() if k not in SERVER_FIELDS} == sample_character
        assert stored["id"] == character_id
        assert stored["owner"] == ALICE
        assert stored["schemaVersion"] == CHARACTER_SCHEMA_VERSION
        assert stored["createdAt"] == stored["updatedAt"]

    @pytest.mark.asyncio
    async def test_client_owner_ignored(self, characters):
        character_id = await characters.create_character(ALICE, {"name": "Ysolde", "owner": BOB})

        stored = await characters.get_character(ALICE, character_id)
        assert stored["owner"] == ALICE

        with pytest.raises(NotFound):
            await characters.get_character(BOB, character_id)

    @pytest.mark.asyncio
    async def test_invalid_fields_rejected(self, characters, store):
        with pytest.raises(ValidationError):
            await characters.create_character(ALICE, {"meta": {"status": "published"}})

        assert await store.find("characters") == []


class TestGet:
    @pytest.mark.asyncio
    async def test_foreign_character_looks_missing(self, characters):
        character_id = await characters.create_character(ALICE, {"name": "Ysolde"})

        with pytest.raises(NotFound) as foreign:
            await characters.get_character(BOB, character_id)
        with pytest.raises(NotFound) as missing:
            await characters.get_character(BOB, str(ObjectId()))

        assert foreign.value.to_dict() == missing.value.to_dict()

    @pytest.mark.asyncio
    async def test_malformed_id(self, characters):
        with pytest.raises(NotFound):
            await characters.get_character(ALICE, "../etc/passwd")


# =============================================================================
# List
# =============================================================================


class TestList:
    @pytest.mark.asyncio
    async def test_newest_first(self, characters):
        first = await characters.create_character(ALICE, {"name": "C1"})
        second = await characters.create_character(ALICE, {"name": "C2"})
        third = await characters.create_character(ALICE, {"name": "C3"})

        listed = await characters.list_characters(ALICE)

        assert [c["id"] for c in listed] == [third, second, first]
        assert [c["name"] for c in listed] == ["C3", "C2", "C1"]

    @pytest.mark.asyncio
    async def test_only_own_characters(self, characters):
        await characters.create_character(ALICE, {"name": "Ysolde"})
        await characters.create_character(BOB, {"name": "Bertrand"})
        await characters.create_character(BOB, {"name": "Gaspard", "owner": ALICE})

        alice_list = await characters.list_characters(ALICE)
        bob_list = await characters.list_characters(BOB)

        assert [c["name"] for c in alice_list] == ["Ysolde"]
        assert {c["name"] for c in bob_list} == {"Bertrand", "Gaspard"}
        assert all(c["owner"] == BOB for c in bob_list)

    @pytest.mark.asyncio
    async def test_empty(self, characters):
        assert await characters.list_characters(ALICE) == []


# =============================================================================
# Update
# =============================================================================


class TestUpdate:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, characters, sample_character):
        character_id = await characters.create_character(ALICE, sample_character)

        updated = await characters.update_character(ALICE, character_id, {"xp": 200, "name": "Ysolde II"})

        assert updated["xp"] == 200
        assert updated["name"] == "Ysolde II"
        assert updated["stats"] == sample_character["stats"]
        assert updated["updatedAt"] >= updated["createdAt"]

    @pytest.mark.asyncio
    async def test_status_moves_freely(self, characters):
        character_id = await characters.create_character(ALICE, {"meta": {"status": "validated"}})

        updated = await characters.update_character(ALICE, character_id, {"meta": {"status": "draft"}})
        assert updated["meta"]["status"] == "draft"

    @pytest.mark.asyncio
    async def test_owner_cannot_be_reassigned(self, characters):
        character_id = await characters.create_character(ALICE, {"name": "Ysolde"})

        updated = await characters.update_character(ALICE, character_id, {"owner": BOB})

        assert updated["owner"] == ALICE
        assert await characters.list_characters(BOB) == []

    @pytest.mark.asyncio
    async def test_foreign_update_rejected_and_harmless(self, characters):
        character_id = await characters.create_character(ALICE, {"name": "Ysolde"})

        with pytest.raises(NotFound):
            await characters.update_character(BOB, character_id, {"name": "Stolen"})

        assert (await characters.get_character(ALICE, character_id))["name"] == "Ysolde"

    @pytest.mark.asyncio
    async def test_invalid_update_rejected(self, characters):
        character_id = await characters.create_character(ALICE, {"name": "Ysolde"})

        with pytest.raises(ValidationError):
            await characters.update_character(ALICE, character_id, {"age": -5})

        assert (await characters.get_character(ALICE, character_id))["age"] is None


# =============================================================================
# Delete
# =============================================================================


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_twice(self, characters):
        character_id = await characters.create_character(ALICE, {"name": "Ysolde"})

        await characters.delete_character(ALICE, character_id)

        with pytest.raises(NotFound):
            await characters.delete_character(ALICE, character_id)
        with pytest.raises(NotFound):
            await characters.get_character(ALICE, character_id)

    @pytest.mark.asyncio
    async def test_foreign_delete_rejected(self, characters):
        character_id = await characters.create_character(ALICE, {"name": "Ysolde"})

        with pytest.raises(NotFound):
            await characters.delete_character(BOB, character_id)

        assert (await characters.get_character(ALICE, character_id))["name"] == "Ysolde"
