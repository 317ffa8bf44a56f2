"""Shared fixtures: a fresh flat-file store per test, a real token verifier, sample input."""

import copy
import json

import pytest
from httpx import ASGITransport, AsyncClient

from animals import AnimalService
from auth import TokenVerifier, issue_token
from main import app, get_service, get_store
from storage import JsonFileStore

TEST_SECRET = "test-secret"

FOX = {
    "name": "Fox",
    "sciName": "Vulpes vulpes",
    "description": ["a", "b"],
    "images": ["img1"],
    "events": [{"name": "Sighting", "date": "05/01/2023", "url": "http://x"}],
}


class FakeVerifier:
    """Maps known tokens to user ids; anything else is rejected."""

    def __init__(self, users=None, error=None):
        self.users = users or {}
        self.error = error
        self.calls = []

    async def authenticate(self, token):
        self.calls.append(token)
        if self.error is not None:
            raise self.error
        return self.users.get(token)


@pytest.fixture
def fox():
    return copy.deepcopy(FOX)


@pytest.fixture
def fox_json(fox):
    return json.dumps(fox)


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def secret():
    return TEST_SECRET


@pytest.fixture
def verifier():
    return TokenVerifier(TEST_SECRET)


@pytest.fixture
def token():
    return issue_token(TEST_SECRET, "u1")


@pytest.fixture
def service(store, verifier):
    return AnimalService(store, verifier)


@pytest.fixture
async def client(store, service):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_service] = lambda: service
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fake_verifier():
    return FakeVerifier
