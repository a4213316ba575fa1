import logging
from datetime import timedelta
from typing import Optional, Tuple

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from courtside.core import security
from courtside.core.exceptions import AuthenticationError, CollaboratorError
from courtside.models.player_model import PlayerModel
from courtside.schemas import auth_schemas
from courtside.services.player_service import PlayerService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, player_service: PlayerService, google_client_id: Optional[str], secret_key: str,
                 access_token_expire_minutes: int = 30):
        self.player_service = player_service
        self.google_client_id = google_client_id
        self.secret_key = secret_key
        self.access_token_expire_minutes = access_token_expire_minutes

    def verify_google_id_token(self, token: str) -> dict:
        try:
            return id_token.verify_oauth2_token(token, google_requests.Request(), self.google_client_id)
        except google_exceptions.TransportError as e:
            raise CollaboratorError(f"Could not reach Google to verify the token: {e}") from e
        except ValueError as e:
            # Invalid token
            raise AuthenticationError(f"Invalid Google ID token: {e}") from e

    def login_with_google(self, token: str) -> Tuple[PlayerModel, str]:
        idinfo = self.verify_google_id_token(token)
        user_id = idinfo.get("sub") # 'sub' is the standard field for Google ID
        email = idinfo.get("email")
        if not user_id or not email:
            raise AuthenticationError("Email or Google ID missing from token payload")

        player = self.player_service.get_player_by_user_id(user_id)
        if player is None:
            player = self.player_service.create_player(
                user_id=user_id,
                display_name=idinfo.get("name") or email.split("@")[0],
                email=email,
            )
            logger.info("Created player %s for new user %s", player.id, user_id)
        return player, self.issue_token(player)

    def issue_token(self, player: PlayerModel) -> str:
        return security.create_access_token(
            data={"sub": player.user_id, "email": player.email, "role": player.role},
            expires_delta=timedelta(minutes=self.access_token_expire_minutes),
            secret_key=self.secret_key,
        )

    def current_user(self, token: str) -> auth_schemas.CurrentUser:
        token_data = security.verify_token(token, AuthenticationError("Could not validate credentials"),
                                           secret_key=self.secret_key)
        return auth_schemas.CurrentUser(id=token_data.user_id, email=token_data.email, role=token_data.role)
