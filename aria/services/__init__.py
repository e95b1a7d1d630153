"""Services - the operations behind the HTTP routes."""

from aria.services.characters import CharacterService

__all__ = [
    "CharacterService",
]
