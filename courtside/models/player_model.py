from typing import Optional

from pydantic import BaseModel, Field

from courtside.models._common import UtcDatetime, new_id, utcnow

class PlayerModel(BaseModel):
    id: str = Field(default_factory=new_id)
    created_date: UtcDatetime = Field(default_factory=utcnow)
    user_id: str # Subject id from the auth provider
    email: Optional[str] = None
    display_name: str
    ntrp_rating: Optional[float] = None
    role: str = "user" # "user" or "admin"

    class Config:
        from_attributes = True

