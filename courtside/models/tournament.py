from sqlalchemy import Column, String, Float, Integer, Date, DateTime, JSON, Text
from courtside.core.database import Base

class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(String, primary_key=True, index=True)
    created_date = Column(DateTime(timezone=True))
    name = Column(String, index=True)
    description = Column(Text, nullable=True)
    sport = Column(String) # "tennis" | "pickleball"
    tournament_format = Column(String) # "singles" | "doubles"
    tournament_type = Column(String) # "positional" | "points_robin"
    ntrp_level = Column(Float, index=True)
    max_participants = Column(Integer, nullable=True)
    city = Column(String, index=True)
    state = Column(String, index=True)
    start_date = Column(Date)
    end_date = Column(Date)
    entry_fee = Column(Float, default=0)
    status = Column(String, default="open", index=True)
    organizer_id = Column(String, index=True) # players.id; no FK so records can be written in any order
    rules = Column(Text, nullable=True)
    prize_structure = Column(String, nullable=True)
    court_preferences = Column(JSON, default=list)
