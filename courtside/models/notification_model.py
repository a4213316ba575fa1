from pydantic import BaseModel, Field

from courtside.models._common import UtcDatetime, new_id, utcnow

class NotificationModel(BaseModel):
    id: str = Field(default_factory=new_id)
    created_date: UtcDatetime = Field(default_factory=utcnow)
    user_id: str # Auth user id of the recipient (Player.user_id)
    message: str
    type: str # e.g., "match_proposed", "match_accepted", "match_result", "result_pending"
    read_status: bool = False

    class Config:
        from_attributes = True

