from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from courtside.api.dependencies import (
    get_current_player,
    get_match_service,
    get_player_service,
    get_roster_service,
    get_standings_service,
    get_tournament_service,
)
from courtside.models.participant_model import ParticipantModel
from courtside.models.player_model import PlayerModel
from courtside.schemas import match_schemas, participant_schemas, player_schemas, standings_schemas, tournament_schemas
from courtside.services.match_service import LadderMatchService
from courtside.services.player_service import PlayerService
from courtside.services.roster_service import RosterService
from courtside.services.standings_service import StandingsService
from courtside.services.tournament_service import TournamentService

router = APIRouter()

def _with_players(participants: List[ParticipantModel], player_service: PlayerService) -> List[participant_schemas.ParticipantRead]:
    players = player_service.players_by_id(
        [p.player_id for p in participants] + [p.partner_id for p in participants if p.partner_id]
    )
    return [
        participant_schemas.ParticipantRead(
            **p.model_dump(),
            player=players.get(p.player_id) and players[p.player_id].model_dump(),
            partner=players.get(p.partner_id) and players[p.partner_id].model_dump(),
        )
        for p in participants
    ]

# --- Tournament Registry ---

@router.post("", response_model=tournament_schemas.TournamentRead, status_code=status.HTTP_201_CREATED)
async def create_tournament(
    tournament_in: tournament_schemas.TournamentCreate,
    current_player: PlayerModel = Depends(get_current_player),
    service: TournamentService = Depends(get_tournament_service),
):
    """
    Creates a ladder tournament organized by the authenticated player.

    - **end_date** must be after **start_date**.
    - The same name, level, city and state may not be used twice.
    - At most three open or active tournaments may overlap for one level and location.
    """
    return service.create_tournament(tournament_in, current_player)

@router.get("", response_model=List[tournament_schemas.TournamentRead])
async def search_tournaments(
    search: Optional[str] = None,
    ntrp_level: Optional[float] = None,
    status: Optional[str] = None,
    location: Optional[str] = None,
    sport: Optional[str] = None,
    tournament_format: Optional[str] = None,
    service: TournamentService = Depends(get_tournament_service),
):
    return service.search_tournaments(
        search=search,
        ntrp_level=ntrp_level,
        status=status,
        location=location,
        sport=sport,
        tournament_format=tournament_format,
    )

@router.get("/{tournament_id}", response_model=tournament_schemas.TournamentRead)
async def read_tournament(tournament_id: str, service: TournamentService = Depends(get_tournament_service)):
    return service.get_tournament(tournament_id)

@router.patch("/{tournament_id}/status", response_model=tournament_schemas.TournamentRead)
async def update_tournament_status(
    tournament_id: str,
    status_update: tournament_schemas.TournamentStatusUpdate,
    current_player: PlayerModel = Depends(get_current_player),
    service: TournamentService = Depends(get_tournament_service),
):
    return service.update_tournament_status(tournament_id, status_update.status, current_player)

@router.delete("/{tournament_id}", response_model=Dict[str, str])
async def delete_tournament(
    tournament_id: str,
    current_player: PlayerModel = Depends(get_current_player),
    service: TournamentService = Depends(get_tournament_service),
):
    service.delete_tournament(tournament_id, current_player)
    return {"message": "Tournament deleted successfully"}

# --- Participant Roster ---

@router.post("/{tournament_id}/join", response_model=participant_schemas.ParticipantRead, status_code=status.HTTP_201_CREATED)
async def join_tournament(
    tournament_id: str,
    join_request: participant_schemas.JoinRequest,
    current_player: PlayerModel = Depends(get_current_player),
    roster_service: RosterService = Depends(get_roster_service),
    tournament_service: TournamentService = Depends(get_tournament_service),
    player_service: PlayerService = Depends(get_player_service),
):
    """
    Joins the authenticated player at the bottom of the ladder.

    When the player's rating is more than half a level away from the
    tournament's, the request is refused with 409 until it is repeated with
    **confirm_skill_gap** set.
    """
    tournament = tournament_service.get_tournament(tournament_id)
    if not join_request.confirm_skill_gap and roster_service.requires_skill_confirmation(current_player, tournament):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Your rating ({current_player.ntrp_rating}) differs from the tournament level "
                   f"({tournament.ntrp_level}) by more than {roster_service.skill_gap_tolerance}. "
                   "Repeat the request with confirm_skill_gap to join anyway.",
        )
    participant = roster_service.join_tournament(
        tournament.id, current_player, partner_id=join_request.partner_id, team_name=join_request.team_name
    )
    return _with_players([participant], player_service)[0]

@router.get("/{tournament_id}/participants", response_model=List[participant_schemas.ParticipantRead])
async def list_participants(
    tournament_id: str,
    roster_service: RosterService = Depends(get_roster_service),
    player_service: PlayerService = Depends(get_player_service),
):
    return _with_players(roster_service.list_participants(tournament_id), player_service)

@router.get("/{tournament_id}/partners", response_model=List[player_schemas.PlayerRead])
async def suggest_partners(
    tournament_id: str,
    current_player: PlayerModel = Depends(get_current_player),
    roster_service: RosterService = Depends(get_roster_service),
):
    return roster_service.eligible_partners(tournament_id, current_player)

@router.post("/{tournament_id}/invite", response_model=Dict[str, bool])
async def invite_partner(
    tournament_id: str,
    invite: participant_schemas.PartnerInvite,
    current_player: PlayerModel = Depends(get_current_player),
    roster_service: RosterService = Depends(get_roster_service),
):
    sent = roster_service.invite_partner_by_email(tournament_id, current_player, invite.email, invite.team_name)
    return {"sent": sent}

# --- Standings ---

@router.get("/{tournament_id}/standings", response_model=List[standings_schemas.StandingRow])
async def read_standings(tournament_id: str, service: StandingsService = Depends(get_standings_service)):
    return service.get_standings(tournament_id)

@router.get("/{tournament_id}/standings/differential", response_model=List[standings_schemas.DifferentialRow])
async def read_differential_standings(tournament_id: str, service: StandingsService = Depends(get_standings_service)):
    return service.get_differential_standings(tournament_id)

# --- Challenges ---

@router.post("/{tournament_id}/matches", response_model=match_schemas.MatchRead, status_code=status.HTTP_201_CREATED)
async def propose_match(
    tournament_id: str,
    match_in: match_schemas.MatchCreate,
    current_player: PlayerModel = Depends(get_current_player),
    service: LadderMatchService = Depends(get_match_service),
):
    """
    Challenges another participant. In positional ladders the opponent must
    be one to three places above the challenger.
    """
    return service.propose_match(
        tournament_id,
        current_player.id,
        match_in.opponent_id,
        match_in.proposed_date,
        match_in.proposed_court_ids,
    )

@router.get("/{tournament_id}/matches", response_model=List[match_schemas.MatchRead])
async def list_matches(
    tournament_id: str,
    status: Optional[str] = Query(None, description="Only matches in this status"),
    service: LadderMatchService = Depends(get_match_service),
):
    return service.list_matches(tournament_id, status=status)
