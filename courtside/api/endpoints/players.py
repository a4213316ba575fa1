from fastapi import APIRouter, Depends

from courtside.api.dependencies import get_current_player, get_player_service
from courtside.models.player_model import PlayerModel
from courtside.schemas import player_schemas
from courtside.services.player_service import PlayerService

router = APIRouter()

@router.get("/me", response_model=player_schemas.PlayerRead)
async def read_current_player(current_player: PlayerModel = Depends(get_current_player)):
    return current_player

@router.patch("/me", response_model=player_schemas.PlayerRead)
async def update_current_player_rating(
    player_update: player_schemas.PlayerUpdate,
    current_player: PlayerModel = Depends(get_current_player),
    player_service: PlayerService = Depends(get_player_service),
):
    return player_service.update_rating(current_player.id, player_update.ntrp_rating)
