import pytest
from fastapi.testclient import TestClient

from election_registry.config import Settings
from election_registry.main import create_app
from election_registry.registry import ElectionRegistry

ADMIN = "0xadmin"
VOTER = "0xvoter"
OTHER = "0xother"


@pytest.fixture
def registry():
    return ElectionRegistry.create(ADMIN)


@pytest.fixture
def settings():
    return Settings(registry_admin=ADMIN)


@pytest.fixture
def client(registry, settings):
    return TestClient(create_app(registry=registry, settings=settings))


def as_caller(identity):
    return {"X-Caller-Identity": identity}
