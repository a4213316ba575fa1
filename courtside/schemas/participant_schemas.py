from typing import Optional

from pydantic import BaseModel, EmailStr

from .player_schemas import PlayerRead

class JoinRequest(BaseModel):
    partner_id: Optional[str] = None # Required for doubles
    team_name: Optional[str] = None
    confirm_skill_gap: bool = False

class ParticipantRead(BaseModel):
    id: str
    tournament_id: str
    player_id: str
    partner_id: Optional[str] = None
    team_name: Optional[str] = None
    current_position: int
    initial_position: int
    points: int
    wins: int
    losses: int
    player: Optional[PlayerRead] = None
    partner: Optional[PlayerRead] = None

    class Config:
        from_attributes = True

class PartnerInvite(BaseModel):
    email: EmailStr
    team_name: Optional[str] = None
