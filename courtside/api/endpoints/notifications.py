from typing import List

from fastapi import APIRouter, Depends, Query

from courtside.api.dependencies import get_current_player, get_notification_service
from courtside.models.player_model import PlayerModel
from courtside.schemas import notification_schemas
from courtside.services.notification_service import NotificationService

router = APIRouter()

@router.get("", response_model=List[notification_schemas.NotificationRead])
async def read_notifications(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_player: PlayerModel = Depends(get_current_player),
    service: NotificationService = Depends(get_notification_service),
):
    return service.get_user_notifications(current_player.user_id, skip=skip, limit=limit)

@router.post("/read-all", response_model=List[notification_schemas.NotificationRead])
async def mark_all_notifications_read(
    current_player: PlayerModel = Depends(get_current_player),
    service: NotificationService = Depends(get_notification_service),
):
    return service.mark_all_user_notifications_as_read(current_player.user_id)

@router.post("/{notification_id}/read", response_model=notification_schemas.NotificationRead)
async def mark_notification_read(
    notification_id: str,
    current_player: PlayerModel = Depends(get_current_player),
    service: NotificationService = Depends(get_notification_service),
):
    return service.mark_notification_as_read(notification_id, current_player.user_id)
