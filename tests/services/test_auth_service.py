import pytest
from google.auth import exceptions as google_exceptions

from courtside.core.exceptions import AuthenticationError, CollaboratorError
from courtside.services import auth_service as auth_module
from courtside.services.auth_service import AuthService

SECRET = "test-secret"

@pytest.fixture
def auth_service(player_service):
    return AuthService(player_service, google_client_id="client-id", secret_key=SECRET)

@pytest.fixture
def google_token(monkeypatch):
    """Makes any token verify as the given Google identity."""
    def _set(idinfo=None, error=None):
        def verify(token, request, audience):
            assert audience == "client-id"
            if error:
                raise error
            return idinfo
        monkeypatch.setattr(auth_module.id_token, "verify_oauth2_token", verify)
    return _set


class TestAuthService:

    def test_first_login_creates_player(self, auth_service: AuthService, player_service, google_token):
        google_token({"sub": "g-123", "email": "ana@example.com", "name": "Ana"})
        player, token = auth_service.login_with_google("id-token")
        assert player.display_name == "Ana"
        assert player_service.get_player_by_user_id("g-123") == player

        current = auth_service.current_user(token)
        assert current.id == "g-123"
        assert current.email == "ana@example.com"
        assert current.role == "user"

    def test_second_login_reuses_player(self, auth_service: AuthService, player_service, google_token):
        google_token({"sub": "g-123", "email": "ana@example.com"})
        first, _ = auth_service.login_with_google("id-token")
        second, _ = auth_service.login_with_google("id-token")
        assert first.id == second.id
        assert second.display_name == "ana"
        assert len(player_service.list_players()) == 1

    def test_invalid_google_token(self, auth_service: AuthService, google_token):
        google_token(error=ValueError("Token expired"))
        with pytest.raises(AuthenticationError, match="Invalid Google ID token"):
            auth_service.login_with_google("id-token")

    def test_google_unreachable(self, auth_service: AuthService, google_token):
        google_token(error=google_exceptions.TransportError("connection reset"))
        with pytest.raises(CollaboratorError):
            auth_service.login_with_google("id-token")

    def test_payload_without_email(self, auth_service: AuthService, google_token):
        google_token({"sub": "g-123"})
        with pytest.raises(AuthenticationError, match="missing"):
            auth_service.login_with_google("id-token")

    def test_tampered_bearer_token(self, auth_service: AuthService, player_service):
        player = player_service.create_player("g-1", "Ana")
        token = auth_service.issue_token(player)
        other = AuthService(player_service, google_client_id="client-id", secret_key="other-secret")
        with pytest.raises(AuthenticationError):
            other.current_user(token)
