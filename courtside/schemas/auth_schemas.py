from pydantic import BaseModel
from typing import Optional

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    user_id: str # Auth provider subject, carried as 'sub' in the token
    email: Optional[str] = None
    role: str = "user"

class GoogleLoginRequest(BaseModel):
    token: str # This will be the Google ID token received from the client

class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None
    role: str = "user"
