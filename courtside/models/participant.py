from sqlalchemy import Column, String, Integer, DateTime, JSON
from courtside.core.database import Base

class Participant(Base):
    __tablename__ = "participants"

    id = Column(String, primary_key=True, index=True)
    created_date = Column(DateTime(timezone=True))
    tournament_id = Column(String, index=True)
    player_id = Column(String, index=True)
    partner_id = Column(String, nullable=True)
    team_name = Column(String, nullable=True)
    current_position = Column(Integer)
    initial_position = Column(Integer)
    points = Column(Integer, default=0)
    wins = Column(Integer, default=0)
    losses = Column(Integer, default=0)
    applied_match_ids = Column(JSON, default=list)

    # Uniqueness of (tournament_id, player_id) is checked by the roster service,
    # not by the schema.
