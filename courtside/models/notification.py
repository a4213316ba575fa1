from sqlalchemy import Column, String, DateTime, Boolean
from courtside.core.database import Base

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String, primary_key=True, index=True)
    created_date = Column(DateTime(timezone=True))
    user_id = Column(String, index=True)
    message = Column(String)
    type = Column(String) # e.g., "match_proposed", "match_accepted", "match_result"
    read_status = Column(Boolean, default=False)
