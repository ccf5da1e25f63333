import os

import pytest
from fastapi.testclient import TestClient

# Default to the memory backend and two known users before the app is imported
os.environ["PERSISTENCE_BACKEND"] = "memory"
os.environ["AUTH_MODE"] = "basic"
os.environ["AUTH_USERS"] = "alice:alice-pw,bob:bob-pw"

from todo_service.main import app  # noqa: E402
from todo_service.models import Actor, TodoEntity  # noqa: E402
from todo_service.repositories import InMemoryRepository, Repository, get_repository  # noqa: E402
from todo_service.schemas import TodoCreate  # noqa: E402

ALICE = Actor(id="alice")
BOB = Actor(id="bob")
ALICE_AUTH = ("alice", "alice-pw")
BOB_AUTH = ("bob", "bob-pw")


def make_todo(repo: Repository, owner: Actor, title: str = "Write tests", complete: bool = False) -> TodoEntity:
    """Persist a todo directly through the repository, bypassing the controller."""
    return repo.insert(owner.id, TodoCreate(title=title, complete=complete))


@pytest.fixture(autouse=True)
def fresh_repository():
    # get_repository() is cached per process; start every test with an empty store
    get_repository.cache_clear()
    yield
    get_repository.cache_clear()


@pytest.fixture
def repo() -> Repository:
    """The repository instance the app is using."""
    return get_repository()


@pytest.fixture
def memory_repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def client() -> TestClient:
    """Client authenticated as alice."""
    c = TestClient(app)
    c.auth = ALICE_AUTH
    return c


@pytest.fixture
def bob_client() -> TestClient:
    c = TestClient(app)
    c.auth = BOB_AUTH
    return c


@pytest.fixture
def anonymous_client() -> TestClient:
    return TestClient(app)
