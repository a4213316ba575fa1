from fastapi import APIRouter, Depends, HTTPException, status

from courtside.api.dependencies import get_auth_service
from courtside.core.exceptions import AuthenticationError
from courtside.schemas import auth_schemas
from courtside.services.auth_service import AuthService

router = APIRouter()

@router.post("/login", response_model=auth_schemas.Token)
async def login_with_google(
    login_request: auth_schemas.GoogleLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchanges a Google ID token for a bearer token, creating the player on first login."""
    try:
        _, access_token = auth_service.login_with_google(login_request.token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": access_token, "token_type": "bearer"}
