from fastapi import APIRouter, Depends

from courtside.api.dependencies import get_current_player, get_match_service
from courtside.models.player_model import PlayerModel
from courtside.schemas import match_schemas
from courtside.services.match_service import LadderMatchService

router = APIRouter()

@router.get("/{match_id}", response_model=match_schemas.MatchRead)
async def read_match(match_id: str, service: LadderMatchService = Depends(get_match_service)):
    return service.get_match(match_id)

@router.post("/{match_id}/respond", response_model=match_schemas.MatchRead)
async def respond_to_match(
    match_id: str,
    response: match_schemas.MatchResponse,
    current_player: PlayerModel = Depends(get_current_player),
    service: LadderMatchService = Depends(get_match_service),
):
    return service.respond_to_match(match_id, current_player.id, response.decision)

@router.post("/{match_id}/score", response_model=match_schemas.ScoreReportRead)
async def report_score(
    match_id: str,
    result: match_schemas.MatchResultUpdate,
    current_player: PlayerModel = Depends(get_current_player),
    service: LadderMatchService = Depends(get_match_service),
):
    """
    Records the winner and score of an accepted match and applies the ladder
    change. Sending the same result again for a completed match finishes a
    ranking update that was interrupted.
    """
    report = service.report_score(match_id, current_player.id, result.winner_id, result.score)
    return report.model_dump()

@router.post("/{match_id}/game-scores", response_model=match_schemas.MatchRead)
async def report_game_scores(
    match_id: str,
    scores: match_schemas.GameScoresUpdate,
    current_player: PlayerModel = Depends(get_current_player),
    service: LadderMatchService = Depends(get_match_service),
):
    return service.report_game_scores(match_id, current_player.id, scores.game_scores)

@router.post("/{match_id}/confirm", response_model=match_schemas.MatchRead)
async def confirm_result(
    match_id: str,
    current_player: PlayerModel = Depends(get_current_player),
    service: LadderMatchService = Depends(get_match_service),
):
    return service.confirm_result(match_id, current_player.id)
