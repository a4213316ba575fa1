from datetime import date
from typing import List, Optional
from enum import Enum

from pydantic import BaseModel, Field

from courtside.models._common import UtcDatetime, new_id, utcnow

class Sport(str, Enum):
    TENNIS = "tennis"
    PICKLEBALL = "pickleball"

class TournamentFormat(str, Enum):
    SINGLES = "singles"
    DOUBLES = "doubles"

class TournamentType(str, Enum):
    POSITIONAL = "positional"
    POINTS_ROBIN = "points_robin"

class TournamentStatus(str, Enum):
    OPEN = "open"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# Statuses that count against the per level/location/timeframe cap
LIVE_STATUSES = [TournamentStatus.OPEN.value, TournamentStatus.ACTIVE.value]

class TournamentModel(BaseModel):
    id: str = Field(default_factory=new_id)
    created_date: UtcDatetime = Field(default_factory=utcnow)
    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = None
    sport: Sport = Sport.TENNIS
    tournament_format: TournamentFormat = TournamentFormat.SINGLES
    tournament_type: TournamentType = TournamentType.POSITIONAL
    ntrp_level: float
    max_participants: Optional[int] = None # None means unlimited
    city: str
    state: str
    start_date: date
    end_date: date
    entry_fee: float = 0
    status: TournamentStatus = TournamentStatus.OPEN
    organizer_id: str # References Player.id
    rules: Optional[str] = None
    prize_structure: Optional[str] = None
    court_preferences: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True
        use_enum_values = True


    @property
    def is_positional(self) -> bool:
        return self.tournament_type == TournamentType.POSITIONAL.value

    @property
    def is_doubles(self) -> bool:
        return self.tournament_format == TournamentFormat.DOUBLES.value
