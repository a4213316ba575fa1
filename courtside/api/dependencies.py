from datetime import timedelta

from fastapi import Depends, HTTPException, Request, status

from courtside.core import security
from courtside.core.config import Settings
from courtside.core.exceptions import AuthenticationError, NotFoundError
from courtside.models.player_model import PlayerModel
from courtside.repositories.stores import Stores
from courtside.schemas import auth_schemas
from courtside.services.auth_service import AuthService
from courtside.services.match_service import LadderMatchService
from courtside.services.notification_service import NotificationService
from courtside.services.player_service import PlayerService
from courtside.services.roster_service import RosterService
from courtside.services.standings_service import StandingsService
from courtside.services.tournament_service import TournamentService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_stores(request: Request) -> Stores:
    return request.app.state.stores

def get_notification_service(request: Request, stores: Stores = Depends(get_stores)) -> NotificationService:
    return NotificationService(stores.notifications, request.app.state.email_sender)

def get_player_service(stores: Stores = Depends(get_stores)) -> PlayerService:
    return PlayerService(stores.players)

def get_auth_service(
    settings: Settings = Depends(get_settings),
    player_service: PlayerService = Depends(get_player_service),
) -> AuthService:
    return AuthService(
        player_service,
        google_client_id=settings.GOOGLE_CLIENT_ID,
        secret_key=settings.SECRET_KEY,
        access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )

def get_tournament_service(stores: Stores = Depends(get_stores)) -> TournamentService:
    return TournamentService(stores)

def get_roster_service(
    stores: Stores = Depends(get_stores),
    settings: Settings = Depends(get_settings),
    notification_service: NotificationService = Depends(get_notification_service),
) -> RosterService:
    return RosterService(stores, notification_service, skill_gap_tolerance=settings.SKILL_GAP_TOLERANCE)

def get_match_service(
    stores: Stores = Depends(get_stores),
    settings: Settings = Depends(get_settings),
    notification_service: NotificationService = Depends(get_notification_service),
) -> LadderMatchService:
    return LadderMatchService(
        stores,
        notification_service,
        proposal_ttl=timedelta(days=settings.PROPOSAL_TTL_DAYS),
        min_lead=timedelta(minutes=settings.MIN_PROPOSAL_LEAD_MINUTES),
        max_horizon=timedelta(days=settings.MAX_PROPOSAL_HORIZON_DAYS),
    )

def get_standings_service(stores: Stores = Depends(get_stores)) -> StandingsService:
    return StandingsService(stores)

# --- Authentication Dependencies ---

def get_current_user(
    token: str = Depends(security.oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> auth_schemas.CurrentUser:
    try:
        return auth_service.current_user(token)
    except AuthenticationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

def get_current_player(
    current_user: auth_schemas.CurrentUser = Depends(get_current_user),
    player_service: PlayerService = Depends(get_player_service),
) -> PlayerModel:
    try:
        player = player_service.require_player_for_user(current_user.id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No player profile for this account",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return player
