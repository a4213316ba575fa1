import logging
from typing import List, Mapping, Optional, Union

from courtside.core.exceptions import PermissionDeniedError, ValidationError
from courtside.models.player_model import PlayerModel
from courtside.models.tournament_model import (
    LIVE_STATUSES,
    TournamentFormat,
    TournamentModel,
    TournamentStatus,
    TournamentType,
)
from courtside.repositories.stores import Stores
from courtside.schemas import tournament_schemas

logger = logging.getLogger(__name__)

# How many open/active tournaments may share a city, state and level at the same time
MAX_OVERLAPPING_TOURNAMENTS = 3

DEFAULT_MAX_PARTICIPANTS = {
    TournamentFormat.SINGLES.value: 16,
    TournamentFormat.DOUBLES.value: 8,
}

ALLOWED_STATUS_TRANSITIONS = {
    TournamentStatus.OPEN.value: {TournamentStatus.ACTIVE.value, TournamentStatus.CANCELLED.value},
    TournamentStatus.ACTIVE.value: {TournamentStatus.COMPLETED.value, TournamentStatus.CANCELLED.value},
    TournamentStatus.COMPLETED.value: set(),
    TournamentStatus.CANCELLED.value: set(),
}


def default_rules(tournament_format: str, ntrp_level: float) -> str:
    side = "Players" if tournament_format == TournamentFormat.SINGLES.value else "Teams"
    winner = "challenger" if tournament_format == TournamentFormat.SINGLES.value else "challenger team"
    rules = f"This is a {tournament_format} ladder tournament for {ntrp_level} NTRP level players.\n\n"
    rules += f"{tournament_format.upper()} RULES:\n"
    rules += f"- {side} can challenge opponents up to 3 positions above them\n"
    rules += "- Matches are best of 3 sets\n"
    if tournament_format == TournamentFormat.DOUBLES.value:
        rules += "- Both players must be present for the match\n"
    rules += f"- {side} have 7 days to schedule and complete matches\n"
    rules += f"- If the {winner} wins, they take the opponent's position\n\n"
    rules += "MATCH SCHEDULING:\n"
    rules += "- Matches should be played at mutually agreed upon courts\n"
    rules += "- Report scores within 24 hours of completion\n"
    rules += "- Disputes will be reviewed by the tournament organizer"
    return rules


class TournamentService:
    def __init__(self, stores: Stores):
        self.stores = stores

    def create_tournament(
        self,
        tournament_in: Union[tournament_schemas.TournamentCreate, Mapping],
        organizer: PlayerModel,
    ) -> TournamentModel:
        """
        Validates, in order: the date range, the (name, level, city, state)
        duplicate rule and the overlap cap for (city, state, level). Both
        lookups are read-then-decide, so two concurrent creates can both pass.
        """
        if not isinstance(tournament_in, tournament_schemas.TournamentCreate):
            tournament_in = tournament_schemas.TournamentCreate.model_validate(tournament_in)

        if tournament_in.end_date <= tournament_in.start_date:
            raise ValidationError("invalid date range")

        duplicates = self.stores.tournaments.filter({
            "name": tournament_in.name,
            "ntrp_level": tournament_in.ntrp_level,
            "city": tournament_in.city,
            "state": tournament_in.state,
        })
        if duplicates:
            raise ValidationError("duplicate tournament")

        live_nearby = self.stores.tournaments.filter({
            "city": tournament_in.city,
            "state": tournament_in.state,
            "ntrp_level": tournament_in.ntrp_level,
            "status": {"$in": LIVE_STATUSES},
        })
        overlapping = [
            t for t in live_nearby
            if tournament_in.start_date <= t.end_date and tournament_in.end_date >= t.start_date
        ]
        if len(overlapping) >= MAX_OVERLAPPING_TOURNAMENTS:
            raise ValidationError("capacity exceeded for this level/location/timeframe")

        fields = tournament_in.model_dump()
        if fields["tournament_type"] == TournamentType.POINTS_ROBIN.value:
            fields["max_participants"] = None
        elif fields.get("max_participants") is None:
            fields["max_participants"] = DEFAULT_MAX_PARTICIPANTS[fields["tournament_format"]]
        if not fields.get("rules"):
            fields["rules"] = default_rules(fields["tournament_format"], fields["ntrp_level"])
        fields["status"] = TournamentStatus.OPEN.value
        fields["organizer_id"] = organizer.id

        tournament = self.stores.tournaments.create(fields)
        logger.info("Tournament %s '%s' created by player %s", tournament.id, tournament.name, organizer.id)
        return tournament

    def get_tournament(self, tournament_id: str) -> TournamentModel:
        return self.stores.tournaments.get(tournament_id)

    def search_tournaments(
        self,
        search: Optional[str] = None,
        ntrp_level: Optional[float] = None,
        status: Optional[str] = None,
        location: Optional[str] = None,
        sport: Optional[str] = None,
        tournament_format: Optional[str] = None,
    ) -> List[TournamentModel]:
        spec = {}
        if ntrp_level is not None:
            spec["ntrp_level"] = ntrp_level
        if status:
            spec["status"] = status
        if sport:
            spec["sport"] = sport
        if tournament_format:
            spec["tournament_format"] = tournament_format
        tournaments = self.stores.tournaments.filter(spec, sort="-created_date")

        if search:
            term = search.lower()
            tournaments = [
                t for t in tournaments
                if term in t.name.lower() or term in t.city.lower() or term in t.state.lower()
            ]
        if location:
            place = location.lower()
            tournaments = [t for t in tournaments if place in t.city.lower() or place in t.state.lower()]
        return tournaments

    def update_tournament_status(self, tournament_id: str, new_status: str, acting_player: PlayerModel) -> TournamentModel:
        tournament = self.get_tournament(tournament_id)
        if tournament.organizer_id != acting_player.id and acting_player.role != "admin":
            raise PermissionDeniedError("Only the organizer can change the tournament status")
        if new_status not in ALLOWED_STATUS_TRANSITIONS:
            raise ValidationError(f"Invalid status value: {new_status}")
        if new_status not in ALLOWED_STATUS_TRANSITIONS[tournament.status]:
            raise ValidationError(f"Cannot move a tournament from {tournament.status} to {new_status}")

        updated = self.stores.tournaments.update(tournament_id, {"status": new_status})
        logger.info("Tournament %s status %s -> %s", tournament_id, tournament.status, new_status)
        return updated

    def delete_tournament(self, tournament_id: str, acting_player: PlayerModel) -> None:
        """
        Site administrators only. Matches go first, then participants, then the
        tournament itself; a failure part way leaves the remaining records in place
        so the delete can simply be run again.
        """
        if acting_player.role != "admin":
            raise PermissionDeniedError("Only administrators can delete tournaments.")
        tournament = self.get_tournament(tournament_id)

        matches = self.stores.matches.filter({"tournament_id": tournament.id})
        for match in matches:
            self.stores.matches.delete(match.id)
        participants = self.stores.participants.filter({"tournament_id": tournament.id})
        for participant in participants:
            self.stores.participants.delete(participant.id)
        self.stores.tournaments.delete(tournament.id)
        logger.info(
            "Tournament %s deleted with %d matches and %d participants",
            tournament.id, len(matches), len(participants),
        )
