"""Standings projection.

Pure functions over participant and match records: nothing is cached and
nothing is written, so the same inputs always give the same rows.
"""
from typing import Dict, Iterable, List

from courtside.models.match_model import MatchModel, MatchStatus
from courtside.models.participant_model import ParticipantModel
from courtside.models.tournament_model import TournamentType
from courtside.repositories.stores import Stores
from courtside.schemas.standings_schemas import DifferentialRow, StandingRow

OPEN_MATCH_STATUSES = (MatchStatus.PROPOSED.value, MatchStatus.ACCEPTED.value)


def win_percentage(wins: int, losses: int) -> float:
    played = wins + losses
    if played == 0:
        return 0.0
    return round(wins / played * 100, 1)


def compute_standings(
    participants: Iterable[ParticipantModel],
    matches: Iterable[MatchModel],
    tournament_type: str,
) -> List[StandingRow]:
    """
    Positional ladders are ordered by current position; points_robin tables by
    points, highest first, with ties broken by player id so the order is stable.
    """
    participants = list(participants)
    open_challenges: Dict[str, int] = {}
    for match in matches:
        if match.status in OPEN_MATCH_STATUSES:
            for player_id in (match.challenger_id, match.opponent_id):
                open_challenges[player_id] = open_challenges.get(player_id, 0) + 1

    if tournament_type == TournamentType.POINTS_ROBIN.value:
        ordered = sorted(participants, key=lambda p: (-p.points, p.player_id))
    else:
        ordered = sorted(participants, key=lambda p: (p.current_position, p.player_id))

    rows = []
    for rank, p in enumerate(ordered, start=1):
        rows.append(StandingRow(
            rank=rank,
            participant_id=p.id,
            player_id=p.player_id,
            partner_id=p.partner_id,
            team_name=p.team_name,
            current_position=p.current_position,
            initial_position=p.initial_position,
            position_change=p.initial_position - p.current_position,
            points=p.points,
            wins=p.wins,
            losses=p.losses,
            matches_played=p.wins + p.losses,
            win_percentage=win_percentage(p.wins, p.losses),
            open_challenges=open_challenges.get(p.player_id, 0),
        ))
    return rows


def _points(match: MatchModel):
    if match.game_scores:
        return (sum(g.team1_score for g in match.game_scores),
                sum(g.team2_score for g in match.game_scores))
    return match.team1_score or 0, match.team2_score or 0


def compute_differential_standings(
    participants: Iterable[ParticipantModel],
    matches: Iterable[MatchModel],
) -> List[DifferentialRow]:
    """Per-player wins and points for/against from completed matches, best win% first."""
    tally = {}
    for p in participants:
        tally[p.player_id] = {"participant": p, "wins": 0, "losses": 0, "for": 0, "against": 0}

    for match in matches:
        if match.status != MatchStatus.COMPLETED.value or not match.winner_id:
            continue
        challenger_points, opponent_points = _points(match)
        for player_id, scored, conceded in (
            (match.challenger_id, challenger_points, opponent_points),
            (match.opponent_id, opponent_points, challenger_points),
        ):
            entry = tally.get(player_id)
            if entry is None:
                continue
            entry["for"] += scored
            entry["against"] += conceded
            if match.winner_id == player_id:
                entry["wins"] += 1
            else:
                entry["losses"] += 1

    rows = []
    for player_id, entry in tally.items():
        p = entry["participant"]
        rows.append(DifferentialRow(
            rank=0,
            player_id=player_id,
            partner_id=p.partner_id,
            team_name=p.team_name,
            wins=entry["wins"],
            losses=entry["losses"],
            matches_played=entry["wins"] + entry["losses"],
            win_percentage=win_percentage(entry["wins"], entry["losses"]),
            points_for=entry["for"],
            points_against=entry["against"],
            point_differential=entry["for"] - entry["against"],
        ))
    rows.sort(key=lambda r: (-r.win_percentage, -r.point_differential, r.player_id))
    for rank, row in enumerate(rows, start=1):
        row.rank = rank
    return rows


class StandingsService:
    def __init__(self, stores: Stores):
        self.stores = stores

    def get_standings(self, tournament_id: str) -> List[StandingRow]:
        tournament = self.stores.tournaments.get(tournament_id)
        participants = self.stores.participants.filter({"tournament_id": tournament.id})
        matches = self.stores.matches.filter({"tournament_id": tournament.id})
        return compute_standings(participants, matches, tournament.tournament_type)

    def get_differential_standings(self, tournament_id: str) -> List[DifferentialRow]:
        tournament = self.stores.tournaments.get(tournament_id)
        participants = self.stores.participants.filter({"tournament_id": tournament.id})
        matches = self.stores.matches.filter({"tournament_id": tournament.id})
        return compute_differential_standings(participants, matches)
