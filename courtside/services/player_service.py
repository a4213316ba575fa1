from typing import Dict, Iterable, List, Optional

from courtside.core.exceptions import NotFoundError, ValidationError
from courtside.models.player_model import PlayerModel
from courtside.repositories.base import EntityStore


class PlayerService:
    def __init__(self, players: EntityStore[PlayerModel]):
        self.players = players

    def create_player(self, user_id: str, display_name: str, email: Optional[str] = None,
                      ntrp_rating: Optional[float] = None, role: str = "user") -> PlayerModel:
        if self.players.first({"user_id": user_id}):
            raise ValidationError(f"Player for user {user_id} already exists.")
        if email and self.players.first({"email": email}):
            raise ValidationError(f"Player with email {email} already exists.")
        return self.players.create({
            "user_id": user_id,
            "display_name": display_name,
            "email": email,
            "ntrp_rating": ntrp_rating,
            "role": role,
        })

    def get_player(self, player_id: str) -> PlayerModel:
        return self.players.get(player_id)

    def get_player_by_user_id(self, user_id: str) -> Optional[PlayerModel]:
        return self.players.first({"user_id": user_id})

    def get_player_by_email(self, email: str) -> Optional[PlayerModel]:
        return self.players.first({"email": email})

    def require_player_for_user(self, user_id: str) -> PlayerModel:
        player = self.get_player_by_user_id(user_id)
        if player is None:
            raise NotFoundError("Player", f"for user {user_id}")
        return player

    def players_by_id(self, player_ids: Iterable[str]) -> Dict[str, PlayerModel]:
        ids = sorted({pid for pid in player_ids if pid})
        if not ids:
            return {}
        return {p.id: p for p in self.players.filter({"id": {"$in": ids}})}

    def update_rating(self, player_id: str, ntrp_rating: float) -> PlayerModel:
        return self.players.update(player_id, {"ntrp_rating": ntrp_rating})

    def list_players(self) -> List[PlayerModel]:
        return self.players.list(sort="display_name")
