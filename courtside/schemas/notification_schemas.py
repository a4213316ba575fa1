from datetime import datetime

from pydantic import BaseModel

class NotificationRead(BaseModel):
    id: str
    user_id: str
    message: str
    type: str
    read_status: bool
    created_date: datetime

    class Config:
        from_attributes = True
