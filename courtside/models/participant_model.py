from typing import List, Optional

from pydantic import BaseModel, Field

from courtside.models._common import UtcDatetime, new_id, utcnow

class ParticipantModel(BaseModel):
    id: str = Field(default_factory=new_id)
    created_date: UtcDatetime = Field(default_factory=utcnow)
    tournament_id: str
    player_id: str
    partner_id: Optional[str] = None # Doubles only
    team_name: Optional[str] = None
    current_position: int
    initial_position: int
    points: int = 0
    wins: int = 0
    losses: int = 0
    # Completed matches whose ranking change is already in this record
    applied_match_ids: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True

