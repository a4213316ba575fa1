from typing import List, Optional
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from courtside.models._common import UtcDatetime, new_id, utcnow

class MatchStatus(str, Enum):
    PROPOSED = "proposed"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class GameScore(BaseModel):
    game_number: int = Field(ge=1)
    team1_score: int = Field(ge=0) # Challenger side
    team2_score: int = Field(ge=0) # Opponent side

class MatchModel(BaseModel):
    id: str = Field(default_factory=new_id)
    created_date: UtcDatetime = Field(default_factory=utcnow)
    tournament_id: str
    challenger_id: str # Player ids
    opponent_id: str
    status: MatchStatus = MatchStatus.PROPOSED
    proposed_date: UtcDatetime
    proposed_court_ids: List[str] = Field(default_factory=list) # Advisory only
    challenger_position_before: Optional[int] = None
    opponent_position_before: Optional[int] = None
    winner_id: Optional[str] = None
    score: Optional[str] = None # Free text, e.g. "6-4, 3-6, 6-1"
    confirmed_date: Optional[UtcDatetime] = None

    # Game-by-game reporting
    game_scores: List[GameScore] = Field(default_factory=list)
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    confirmed: Optional[bool] = None
    reported_by: Optional[str] = None
    confirmed_by: Optional[str] = None

    class Config:
        from_attributes = True
        use_enum_values = True


    @model_validator(mode="after")
    def challenger_is_not_opponent(self):
        if self.challenger_id == self.opponent_id:
            raise ValueError("challenger and opponent must be different players")
        return self

    def involves(self, player_id: str) -> bool:
        return player_id in (self.challenger_id, self.opponent_id)

    def other_player(self, player_id: str) -> str:
        return self.opponent_id if player_id == self.challenger_id else self.challenger_id
