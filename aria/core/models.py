"""
Core data models for the Aria backend.

Characters are stored and served as plain dicts. The pydantic models below
describe the sheet schema and are only used by `validate_character()`, which
runs before every write. Field names are snake_case in Python and camelCase
on the wire and in the database, matching what the sheet editor sends.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from aria.core.errors import ValidationError


# Bumped whenever the stored shape of a character changes
CHARACTER_SCHEMA_VERSION = 1

# BSON stores integers in at most 8 bytes
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _storable_number(value: Any) -> Any:
    """Reject numbers that cannot round-trip through BSON and JSON."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and not INT64_MIN <= value <= INT64_MAX:
        raise ValueError("integer must fit in 64 bits")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("number must be finite")
    return value


Number = Annotated[Union[int, float], BeforeValidator(_storable_number)]


class CamelModel(BaseModel):
    """camelCase aliases on the wire, unknown keys dropped, finite numbers only."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        allow_inf_nan=False,
    )


# =============================================================================
# Enums
# =============================================================================


class CharacterStatus(str, Enum):
    """Where the sheet is in its life. Transitions are left to the client."""

    DRAFT = "draft"
    EDITING = "editing"
    VALIDATED = "validated"


class SheetMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    VALIDATED = "validated"


class StatMode(str, Enum):
    DICE = "3d6"
    POINT_BUY = "point-buy"


class SkillMode(str, Enum):
    READY = "ready"
    CUSTOM = "custom"


# =============================================================================
# Sheet fragments
# =============================================================================


class Stat(CamelModel):
    id: Optional[str] = None
    label: Optional[str] = None
    value: Optional[Number] = None
    min: Optional[Number] = None
    max: Optional[Number] = None


class Competence(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    score: Optional[Number] = None
    from_stat: Optional[str] = None
    locked: Optional[bool] = None


class SpecialCompetence(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    score: Optional[Number] = None
    locked: Optional[bool] = None


class InventoryItem(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[Number] = None
    from_kit: Optional[bool] = None
    category: Optional[str] = None
    icon: Optional[str] = None


class Weapon(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    damage: Optional[str] = None
    icon: Optional[str] = None
    validated: Optional[bool] = None


class AlchemyPotion(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    effect: Optional[str] = None
    difficulty: Optional[str] = None
    quantity: Optional[Number] = None


class SheetMeta(CamelModel):
    status: CharacterStatus = CharacterStatus.DRAFT
    sheet_mode: SheetMode = SheetMode.CREATE


# =============================================================================
# Character
# =============================================================================


class CharacterSheet(CamelModel):
    """
    The client-writable part of a character.

    Server-owned fields (id, owner, timestamps, schemaVersion) are not
    declared here, so anything a client sends for them is dropped.
    """

    # Identity
    player: str = ""
    name: str = ""
    age: Optional[Number] = None
    profession: str = ""

    meta: SheetMeta = Field(default_factory=SheetMeta)

    # Stats
    stats: list[Stat] = Field(default_factory=list)
    stat_mode: StatMode = StatMode.DICE
    stat_points_pool: Number = 0

    # Skills
    skill_mode: SkillMode = SkillMode.READY
    competences: list[Competence] = Field(default_factory=list)
    special_competences: list[SpecialCompetence] = Field(default_factory=list)

    # Inventory, weapons, purse
    inventory: list[InventoryItem] = Field(default_factory=list)
    weapons: list[Weapon] = Field(default_factory=list)
    purse_fer: Number = 0

    # Progress
    xp: Number = 0
    is_creation_done: bool = False

    # Alchemy
    is_alchemist: bool = False
    alchemy_potions: list[AlchemyPotion] = Field(default_factory=list)

    # Free text
    phrase_genial: str = ""
    phrase_societe: str = ""

    # Base64-encoded image
    portrait: str = ""

    @field_validator("age")
    @classmethod
    def _age_not_negative(cls, value: Optional[Number]) -> Optional[Number]:
        if value is not None and value < 0:
            raise ValueError("age must be greater than or equal to 0")
        return value


def validate_character(payload: Any, partial: bool = False) -> dict[str, Any]:
    """
    Validate client-submitted character fields.

    With `partial=False` the result is a complete document with defaults
    filled in. With `partial=True` only the submitted top-level fields are
    returned (each one fully validated, nested defaults included), ready to
    be merged over a stored document.

    Raises:
        ValidationError: the payload breaks a type, enum or range constraint.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Character data must be a JSON object")

    try:
        sheet = CharacterSheet.model_validate(payload)
    except PydanticValidationError as e:
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        raise ValidationError(details=details) from e

    document = sheet.model_dump(by_alias=True, mode="json")
    if not partial:
        return document

    submitted = {to_camel(name) for name in sheet.model_fields_set}
    return {key: value for key, value in document.items() if key in submitted}


# =============================================================================
# Users
# =============================================================================


class UserResponse(CamelModel):
    """User data returned to client (no sensitive fields)."""

    id: str
    email: str
    display_name: str = ""

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> UserResponse:
        return cls(
            id=doc["id"],
            email=doc["email"],
            display_name=doc.get("displayName") or "",
        )
