from datetime import datetime, timedelta, timezone

from courtside.models.match_model import MatchModel
from courtside.models.participant_model import ParticipantModel
from courtside.services.match_service import LadderMatchService
from courtside.services.roster_service import RosterService
from courtside.services.standings_service import (
    StandingsService,
    compute_differential_standings,
    compute_standings,
    win_percentage,
)

PROPOSED = datetime(2025, 1, 10, 18, tzinfo=timezone.utc)

def participant(player_id, position, initial=None, points=0, wins=0, losses=0, **extra):
    return ParticipantModel(
        tournament_id="t-1",
        player_id=player_id,
        current_position=position,
        initial_position=initial or position,
        points=points,
        wins=wins,
        losses=losses,
        **extra,
    )

def match(challenger, opponent, status="completed", winner=None, **extra):
    return MatchModel(
        tournament_id="t-1",
        challenger_id=challenger,
        opponent_id=opponent,
        status=status,
        winner_id=winner,
        proposed_date=PROPOSED,
        **extra,
    )


class TestComputeStandings:

    def test_positional_orders_by_current_position(self):
        rows = compute_standings(
            [participant("z", 1, initial=3, wins=1), participant("x", 3, initial=1, losses=1), participant("y", 2)],
            [],
            "positional",
        )
        assert [r.player_id for r in rows] == ["z", "y", "x"]
        assert [r.rank for r in rows] == [1, 2, 3]
        assert rows[0].position_change == 2
        assert rows[2].position_change == -2
        assert rows[1].position_change == 0

    def test_points_robin_orders_by_points_then_player(self):
        rows = compute_standings(
            [participant("b", 1, points=30), participant("c", 2, points=40), participant("a", 3, points=30)],
            [],
            "points_robin",
        )
        assert [r.player_id for r in rows] == ["c", "a", "b"]

    def test_win_percentage(self):
        assert win_percentage(0, 0) == 0.0
        assert win_percentage(2, 1) == 66.7
        assert win_percentage(3, 0) == 100.0
        row = compute_standings([participant("a", 1, wins=1, losses=3)], [], "positional")[0]
        assert row.win_percentage == 25.0
        assert row.matches_played == 4

    def test_open_challenges_are_counted(self):
        matches = [
            match("y", "x", status="proposed"),
            match("z", "x", status="accepted"),
            match("z", "y", status="cancelled"),
            match("y", "x", winner="x"),
        ]
        rows = {r.player_id: r for r in compute_standings(
            [participant("x", 1), participant("y", 2), participant("z", 3)], matches, "positional"
        )}
        assert rows["x"].open_challenges == 2
        assert rows["y"].open_challenges == 1
        assert rows["z"].open_challenges == 1

    def test_standings_are_stable_across_calls(self):
        participants = [participant("a", 2, points=10), participant("b", 1, points=10)]
        assert compute_standings(participants, [], "points_robin") == compute_standings(participants, [], "points_robin")

    def test_one_win_and_one_loss_after_one_match(self, stores, make_tournament, make_player, clock):
        tournament = make_tournament()
        a, b = make_player(), make_player()
        roster = RosterService(stores)
        roster.join_tournament(tournament.id, a)
        roster.join_tournament(tournament.id, b)
        matches = LadderMatchService(stores, clock=clock)
        proposed = matches.propose_match(tournament.id, b.id, a.id, clock() + timedelta(days=1))
        matches.respond_to_match(proposed.id, a.id, "accept")
        matches.report_score(proposed.id, a.id, a.id, "6-1, 6-1")

        rows = StandingsService(stores).get_standings(tournament.id)
        assert sum(r.wins for r in rows) == 1
        assert sum(r.losses for r in rows) == 1


class TestDifferentialStandings:

    def test_points_for_and_against_from_game_scores(self):
        games = [
            {"game_number": 1, "team1_score": 11, "team2_score": 5},
            {"game_number": 2, "team1_score": 11, "team2_score": 9},
        ]
        rows = compute_differential_standings(
            [participant("a", 1), participant("b", 2), participant("c", 3)],
            [
                match("a", "b", winner="a", game_scores=games),
                match("c", "b", winner="b", team1_score=0, team2_score=2),
                match("a", "c", status="accepted"),
            ],
        )
        by_player = {r.player_id: r for r in rows}
        assert (by_player["a"].points_for, by_player["a"].points_against) == (22, 14)
        assert by_player["b"].point_differential == -8 + 2
        assert (by_player["c"].wins, by_player["c"].losses) == (0, 1)

    def test_sorted_by_win_percentage_then_differential(self):
        rows = compute_differential_standings(
            [participant("a", 1), participant("b", 2), participant("c", 3), participant("d", 4)],
            [
                match("a", "b", winner="a", team1_score=2, team2_score=0),
                match("c", "d", winner="c", team1_score=2, team2_score=1),
            ],
        )
        assert [r.player_id for r in rows] == ["a", "c", "d", "b"]
        assert [r.rank for r in rows] == [1, 2, 3, 4]

    def test_matches_outside_the_roster_are_ignored(self):
        rows = compute_differential_standings([participant("a", 1)], [match("x", "y", winner="x")])
        assert rows[0].matches_played == 0
