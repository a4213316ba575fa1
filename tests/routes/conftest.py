import pytest
from fastapi.testclient import TestClient

from courtside.api.dependencies import get_current_player
from courtside.main import create_app
from courtside.repositories.stores import Stores


class ActingPlayer:
    """Stands in for the bearer-token lookup; tests switch who is calling."""

    def __init__(self):
        self.player = None

    def __call__(self):
        return self.player


@pytest.fixture
def route_stores():
    return Stores.in_memory()

@pytest.fixture
def acting():
    return ActingPlayer()

@pytest.fixture
def app(route_stores, acting):
    app = create_app(stores=route_stores)
    app.dependency_overrides[get_current_player] = acting
    yield app
    app.dependency_overrides.clear()

@pytest.fixture
def client(app):
    return TestClient(app)

@pytest.fixture
def register(route_stores):
    counter = {"n": 0}

    def _register(display_name=None, ntrp_rating=3.5, role="user"):
        counter["n"] += 1
        return route_stores.players.create({
            "user_id": f"google-{counter['n']}",
            "display_name": display_name or f"Player {counter['n']}",
            "email": f"player{counter['n']}@example.com",
            "ntrp_rating": ntrp_rating,
            "role": role,
        })
    return _register

TOURNAMENT_PAYLOAD = {
    "name": "Austin Spring Ladder",
    "tournament_format": "singles",
    "tournament_type": "positional",
    "ntrp_level": 3.5,
    "city": "Austin",
    "state": "TX",
    "start_date": "2025-01-01",
    "end_date": "2025-01-31",
}

@pytest.fixture
def tournament_payload():
    return dict(TOURNAMENT_PAYLOAD)
