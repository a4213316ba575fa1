from typing import List, Optional

from pydantic import BaseModel

class StandingRow(BaseModel):
    rank: int
    participant_id: str
    player_id: str
    partner_id: Optional[str] = None
    team_name: Optional[str] = None
    current_position: int
    initial_position: int
    position_change: int # Positive when the player has climbed
    points: int
    wins: int
    losses: int
    matches_played: int
    win_percentage: float
    open_challenges: int

class DifferentialRow(BaseModel):
    rank: int
    player_id: str
    partner_id: Optional[str] = None
    team_name: Optional[str] = None
    wins: int
    losses: int
    matches_played: int
    win_percentage: float
    points_for: int
    points_against: int
    point_differential: int

class StandingsRead(BaseModel):
    tournament_id: str
    tournament_type: str
    rows: List[StandingRow]
