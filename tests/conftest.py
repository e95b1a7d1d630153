"""
Shared fixtures.

Settings are read from the environment, so the required values are set
before anything from `aria` is imported.
"""

import os

os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["JWT_SECRET"] = "test-secret-do-not-use"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SENTRY_DSN"] = ""

import pytest
from fastapi.testclient import TestClient

from aria.api.app import create_app
from aria.auth.accounts import AccountManager
from aria.services.characters import CharacterService
from aria.storage.local import InMemoryDocumentStore


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store():
    """Fresh, empty in-memory store."""
    return InMemoryDocumentStore()


@pytest.fixture
def accounts(store):
    return AccountManager(store)


@pytest.fixture
def characters(store):
    return CharacterService(store)


@pytest.fixture
def client(store):
    """HTTP client over https so the Secure auth cookie is sent back."""
    with TestClient(create_app(storage=store), base_url="https://testserver") as c:
        yield c


@pytest.fixture
def sample_character():
    """A complete sheet, as the editor would send it."""
    return {
        "player": "Camille",
        "name": "Ysolde",
        "age": 27,
        "profession": "Herboriste",
        "meta": {"status": "editing", "sheetMode": "edit"},
        "stats": [
            {"id": "for", "label": "Force", "value": 11, "min": 3, "max": 18},
            {"id": "int", "label": "Intelligence", "value": 15, "min": 3, "max": 18},
        ],
        "statMode": "point-buy",
        "statPointsPool": 2,
        "skillMode": "custom",
        "competences": [
            {"id": "herbs", "name": "Herboristerie", "score": 70, "fromStat": "int", "locked": False},
        ],
        "specialCompetences": [
            {"id": "poisons", "name": "Poisons", "score": 40, "locked": True},
        ],
        "inventory": [
            {"id": "mortar", "name": "Mortier", "quantity": 1, "fromKit": True,
             "category": "outil", "icon": "mortar.png"},
        ],
        "weapons": [
            {"id": "dagger", "name": "Dague", "damage": "1d4", "icon": "dagger.png", "validated": True},
        ],
        "purseFer": 35,
        "xp": 120,
        "isCreationDone": True,
        "isAlchemist": True,
        "alchemyPotions": [
            {"id": "heal", "name": "Baume", "effect": "Soigne 1d6", "difficulty": "facile", "quantity": 2},
        ],
        "phraseGenial": "Je connais chaque plante du val.",
        "phraseSociete": "Fille du meunier.",
        "portrait": "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk",
    }


# =============================================================================
# Helpers
# =============================================================================


def register_user(client, email, password="correct horse", display_name=None):
    """
    Register through the API and return bearer headers for the new user.

    The cookie jar is emptied so later requests authenticate only through
    the returned header.
    """
    body = {"email": email, "password": password}
    if display_name is not None:
        body["displayName"] = display_name
    response = client.post("/auth/register", json=body)
    assert response.status_code == 201, response.text
    token = response.cookies["token"]
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}
