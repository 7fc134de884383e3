import pytest
from fastapi.testclient import TestClient

from recipe_api.framework.app import create_microservice
from recipe_api.recipes.store import RecipeStore
from recipe_api.shared.lib.kv import MemoryBucket
from tests.factories import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bucket():
    return MemoryBucket("recipes")


@pytest.fixture
def store(bucket, clock):
    return RecipeStore(bucket, clock=clock)


@pytest.fixture
def client(store):
    """Test client over an in-memory bucket."""
    app = create_microservice("recipes", lambda: store)
    with TestClient(app) as c:
        yield c
