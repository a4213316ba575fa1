from typing import Optional

from pydantic import BaseModel, Field

class PlayerRead(BaseModel):
    id: str
    display_name: str
    email: Optional[str] = None
    ntrp_rating: Optional[float] = None

    class Config:
        from_attributes = True

class PlayerUpdate(BaseModel):
    ntrp_rating: float = Field(ge=1.0, le=7.0)
