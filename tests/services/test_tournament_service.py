import json
from datetime import date

import pytest

from courtside.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from courtside.repositories.stores import Stores
from courtside.services.tournament_service import TournamentService, default_rules

@pytest.fixture
def tournament_service(stores):
    return TournamentService(stores)

@pytest.fixture
def organizer(make_player):
    return make_player("Organizer")


class TestTournamentService:

    def test_create_tournament_success(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament = tournament_service.create_tournament(tournament_data, organizer)
        assert tournament.id is not None
        assert tournament.status == "open"
        assert tournament.organizer_id == organizer.id
        assert tournament.max_participants == 16
        assert "up to 3 positions above" in tournament.rules

    def test_create_tournament_persists_to_json_file(self, tmp_path, tournament_data):
        stores = Stores.json_files(str(tmp_path))
        organizer = stores.players.create({"user_id": "g-1", "display_name": "Org"})
        tournament = TournamentService(stores).create_tournament(tournament_data, organizer)

        with open(tmp_path / "tournaments.json", "r") as f:
            tournaments_in_file = json.load(f)
        assert len(tournaments_in_file) == 1
        assert tournaments_in_file[0]["id"] == tournament.id
        assert tournaments_in_file[0]["start_date"] == "2025-01-01"

    def test_create_tournament_invalid_date_range(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament_data["end_date"] = tournament_data["start_date"]
        with pytest.raises(ValidationError, match="invalid date range"):
            tournament_service.create_tournament(tournament_data, organizer)

    def test_create_tournament_duplicate(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament_service.create_tournament(tournament_data, organizer)
        tournament_data["start_date"] = date(2025, 6, 1)
        tournament_data["end_date"] = date(2025, 6, 30)
        with pytest.raises(ValidationError, match="duplicate tournament"):
            tournament_service.create_tournament(tournament_data, organizer)

    def test_invalid_date_range_is_checked_before_duplicates(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament_service.create_tournament(tournament_data, organizer)
        tournament_data["end_date"] = date(2024, 12, 1)
        with pytest.raises(ValidationError, match="invalid date range"):
            tournament_service.create_tournament(tournament_data, organizer)

    def test_fourth_overlapping_tournament_is_rejected(self, tournament_service: TournamentService, tournament_data, organizer):
        for i in range(3):
            tournament_data["name"] = f"Austin Ladder {i}"
            tournament_service.create_tournament(tournament_data, organizer)

        tournament_data["name"] = "Austin Ladder 3"
        tournament_data["start_date"] = date(2025, 1, 31)
        tournament_data["end_date"] = date(2025, 2, 28)
        with pytest.raises(ValidationError, match="capacity exceeded for this level/location/timeframe"):
            tournament_service.create_tournament(tournament_data, organizer)

    def test_overlap_cap_ignores_other_levels_dates_and_closed_tournaments(self, tournament_service: TournamentService, tournament_data, organizer):
        for i in range(3):
            tournament_data["name"] = f"Austin Ladder {i}"
            created = tournament_service.create_tournament(tournament_data, organizer)
        tournament_service.update_tournament_status(created.id, "cancelled", organizer)

        tournament_data["name"] = "Austin Ladder 3"
        assert tournament_service.create_tournament(tournament_data, organizer).status == "open"

        tournament_data["name"] = "Austin Ladder 4.0"
        tournament_data["ntrp_level"] = 4.0
        assert tournament_service.create_tournament(tournament_data, organizer)

        tournament_data["name"] = "Austin Summer"
        tournament_data["ntrp_level"] = 3.5
        tournament_data["start_date"] = date(2025, 2, 1)
        tournament_data["end_date"] = date(2025, 2, 28)
        assert tournament_service.create_tournament(tournament_data, organizer)

    def test_points_robin_has_no_capacity(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament_data.update(tournament_type="points_robin", max_participants=12)
        tournament = tournament_service.create_tournament(tournament_data, organizer)
        assert tournament.max_participants is None

    def test_doubles_defaults(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament_data["tournament_format"] = "doubles"
        tournament = tournament_service.create_tournament(tournament_data, organizer)
        assert tournament.max_participants == 8
        assert "Teams can challenge" in tournament.rules
        assert "Both players must be present" in tournament.rules

    def test_custom_rules_are_kept(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament_data["rules"] = "House rules"
        assert tournament_service.create_tournament(tournament_data, organizer).rules == "House rules"

    def test_default_rules_singles(self):
        rules = default_rules("singles", 3.5)
        assert "3.5 NTRP" in rules
        assert "Matches are best of 3 sets" in rules
        assert "Both players must be present" not in rules

    def test_get_tournament_not_found(self, tournament_service: TournamentService):
        with pytest.raises(NotFoundError):
            tournament_service.get_tournament("nonexistent_id")

    def test_search_tournaments(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament_service.create_tournament(tournament_data, organizer)
        tournament_data.update(name="Dallas Pickleball", city="Dallas", sport="pickleball")
        tournament_service.create_tournament(tournament_data, organizer)

        assert [t.name for t in tournament_service.search_tournaments(search="austin")] == ["Austin Spring Ladder"]
        assert [t.name for t in tournament_service.search_tournaments(sport="pickleball")] == ["Dallas Pickleball"]
        assert len(tournament_service.search_tournaments(location="tx")) == 2
        assert len(tournament_service.search_tournaments(ntrp_level=3.5, status="open")) == 2
        assert tournament_service.search_tournaments(tournament_format="doubles") == []

    def test_status_transitions(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament = tournament_service.create_tournament(tournament_data, organizer)
        assert tournament_service.update_tournament_status(tournament.id, "active", organizer).status == "active"
        assert tournament_service.update_tournament_status(tournament.id, "completed", organizer).status == "completed"
        with pytest.raises(ValidationError, match="Cannot move a tournament from completed to active"):
            tournament_service.update_tournament_status(tournament.id, "active", organizer)

    def test_status_change_requires_organizer_or_admin(self, tournament_service: TournamentService, tournament_data, organizer, make_player):
        tournament = tournament_service.create_tournament(tournament_data, organizer)
        with pytest.raises(PermissionDeniedError):
            tournament_service.update_tournament_status(tournament.id, "active", make_player())
        admin = make_player(role="admin")
        assert tournament_service.update_tournament_status(tournament.id, "cancelled", admin).status == "cancelled"

    def test_delete_tournament_cascades(self, stores, tournament_service: TournamentService, tournament_data, organizer, make_player):
        tournament = tournament_service.create_tournament(tournament_data, organizer)
        for position in (1, 2):
            stores.participants.create({
                "tournament_id": tournament.id,
                "player_id": make_player().id,
                "current_position": position,
                "initial_position": position,
            })
        participants = stores.participants.list()
        stores.matches.create({
            "tournament_id": tournament.id,
            "challenger_id": participants[1].player_id,
            "opponent_id": participants[0].player_id,
            "proposed_date": "2025-01-10T18:00:00Z",
        })

        tournament_service.delete_tournament(tournament.id, make_player(role="admin"))
        assert stores.tournaments.list() == []
        assert stores.participants.list() == []
        assert stores.matches.list() == []

    def test_delete_tournament_admin_only(self, tournament_service: TournamentService, tournament_data, organizer):
        tournament = tournament_service.create_tournament(tournament_data, organizer)
        with pytest.raises(PermissionDeniedError, match="Only administrators"):
            tournament_service.delete_tournament(tournament.id, organizer)
