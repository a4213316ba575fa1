from datetime import date, timedelta

import pytest

from courtside.models._common import utcnow
from courtside.repositories.stores import Stores
from courtside.services.player_service import PlayerService
from courtside.services.tournament_service import TournamentService


class FakeClock:
    """A clock tests can move forward by hand."""

    def __init__(self):
        self.now = utcnow()

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def stores():
    return Stores.in_memory()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def player_service(stores):
    return PlayerService(stores.players)

@pytest.fixture
def make_player(player_service):
    counter = {"n": 0}

    def _make(display_name=None, ntrp_rating=3.5, role="user"):
        counter["n"] += 1
        n = counter["n"]
        return player_service.create_player(
            user_id=f"google-{n}",
            display_name=display_name or f"Player {n}",
            email=f"player{n}@example.com",
            ntrp_rating=ntrp_rating,
            role=role,
        )
    return _make

@pytest.fixture
def tournament_data():
    return {
        "name": "Austin Spring Ladder",
        "sport": "tennis",
        "tournament_format": "singles",
        "tournament_type": "positional",
        "ntrp_level": 3.5,
        "city": "Austin",
        "state": "TX",
        "start_date": date(2025, 1, 1),
        "end_date": date(2025, 1, 31),
    }

@pytest.fixture
def make_tournament(stores, make_player, tournament_data):
    def _make(organizer=None, **overrides):
        data = dict(tournament_data)
        data.update(overrides)
        return TournamentService(stores).create_tournament(data, organizer or make_player("Organizer"))
    return _make
