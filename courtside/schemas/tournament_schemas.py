from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from courtside.models.tournament_model import Sport, TournamentFormat, TournamentStatus, TournamentType

class TournamentBase(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = None
    sport: Sport = Sport.TENNIS
    tournament_format: TournamentFormat = TournamentFormat.SINGLES
    tournament_type: TournamentType = TournamentType.POSITIONAL
    ntrp_level: float = Field(ge=1.0, le=7.0)
    max_participants: Optional[int] = Field(default=None, ge=2)
    city: str
    state: str
    start_date: date
    end_date: date
    entry_fee: float = Field(default=0, ge=0)
    rules: Optional[str] = None
    prize_structure: Optional[str] = None
    court_preferences: List[str] = Field(default_factory=list)

    class Config:
        use_enum_values = True

class TournamentCreate(TournamentBase):
    pass

class TournamentRead(TournamentBase):
    id: str
    status: TournamentStatus
    organizer_id: str

    class Config:
        from_attributes = True
        use_enum_values = True

class TournamentStatusUpdate(BaseModel):
    status: TournamentStatus

    class Config:
        use_enum_values = True
