from sqlalchemy import Column, String, Integer, DateTime, JSON, Boolean
from courtside.core.database import Base

class Match(Base):
    __tablename__ = "matches"

    id = Column(String, primary_key=True, index=True)
    created_date = Column(DateTime(timezone=True))
    tournament_id = Column(String, index=True)
    challenger_id = Column(String, index=True)
    opponent_id = Column(String, index=True)
    status = Column(String, default="proposed", index=True) # "proposed", "accepted", "completed", "cancelled"
    proposed_date = Column(DateTime(timezone=True))
    proposed_court_ids = Column(JSON, default=list)
    challenger_position_before = Column(Integer, nullable=True)
    opponent_position_before = Column(Integer, nullable=True)
    winner_id = Column(String, nullable=True)
    score = Column(String, nullable=True) # e.g., "6-4, 6-3"
    confirmed_date = Column(DateTime(timezone=True), nullable=True)

    game_scores = Column(JSON, default=list) # [{game_number, team1_score, team2_score}]
    team1_score = Column(Integer, nullable=True)
    team2_score = Column(Integer, nullable=True)
    confirmed = Column(Boolean, nullable=True)
    reported_by = Column(String, nullable=True)
    confirmed_by = Column(String, nullable=True)
