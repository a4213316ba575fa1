from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from fastapi.security import OAuth2PasswordBearer

from courtside.core.config import settings
from courtside.schemas import auth_schemas

ALGORITHM = "HS256"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None, secret_key: Optional[str] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key or settings.SECRET_KEY, algorithm=ALGORITHM)

def verify_token(token: str, credentials_exception: Exception, secret_key: Optional[str] = None) -> auth_schemas.TokenData:
    try:
        payload = jwt.decode(token, secret_key or settings.SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub") # 'sub' carries the auth provider's user id
        if user_id is None:
            raise credentials_exception
        token_data = auth_schemas.TokenData(user_id=user_id, email=payload.get("email"), role=payload.get("role", "user"))
    except JWTError:
        raise credentials_exception
    return token_data
