from sqlalchemy import Column, String, Float, DateTime
from courtside.core.database import Base

class Player(Base):
    __tablename__ = "players"

    id = Column(String, primary_key=True, index=True)
    created_date = Column(DateTime(timezone=True))
    user_id = Column(String, unique=True, index=True)
    email = Column(String, index=True, nullable=True)
    display_name = Column(String)
    ntrp_rating = Column(Float, nullable=True)
    role = Column(String, default="user")
