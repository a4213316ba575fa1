from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from courtside.models.match_model import GameScore, MatchStatus
from .participant_schemas import ParticipantRead

class MatchCreate(BaseModel):
    opponent_id: str # Player id of the challenged participant
    proposed_date: datetime
    proposed_court_ids: List[str] = Field(default_factory=list)

class MatchRead(BaseModel):
    id: str
    tournament_id: str
    challenger_id: str
    opponent_id: str
    status: MatchStatus
    proposed_date: datetime
    proposed_court_ids: List[str] = Field(default_factory=list)
    challenger_position_before: Optional[int] = None
    opponent_position_before: Optional[int] = None
    winner_id: Optional[str] = None
    score: Optional[str] = None
    confirmed_date: Optional[datetime] = None
    game_scores: List[GameScore] = Field(default_factory=list)
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    confirmed: Optional[bool] = None
    created_date: datetime

    class Config:
        from_attributes = True
        use_enum_values = True

class MatchResponse(BaseModel):
    decision: Literal["accept", "decline"]

class MatchResultUpdate(BaseModel):
    winner_id: str
    score: str = Field(min_length=1)

class GameScoresUpdate(BaseModel):
    game_scores: List[GameScore] = Field(min_length=1)

class ScoreReportRead(BaseModel):
    match: MatchRead
    participants: List[ParticipantRead]
