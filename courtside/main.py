import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from courtside.api.endpoints import auth as auth_endpoints
from courtside.api.endpoints import matches as match_endpoints
from courtside.api.endpoints import notifications as notification_endpoints
from courtside.api.endpoints import players as player_endpoints
from courtside.api.endpoints import tournaments as tournament_endpoints
from courtside.core.config import Settings, settings as default_settings
from courtside.core.exceptions import (
    AuthenticationError,
    CollaboratorError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from courtside.core.logging import configure_logging
from courtside.repositories.stores import Stores, build_stores
from courtside.services.notification_service import EmailSender

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, stores: Optional[Stores] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(title="Courtside Ladder API")
    app.state.settings = settings
    app.state.stores = stores or build_stores(settings)
    app.state.email_sender = EmailSender(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME,
        password=settings.SMTP_PASSWORD,
        use_tls=settings.SMTP_USE_TLS,
        from_email=settings.FROM_EMAIL,
    )

    # Include routers
    app.include_router(auth_endpoints.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(player_endpoints.router, prefix="/api/players", tags=["Players"])
    app.include_router(tournament_endpoints.router, prefix="/api/tournaments", tags=["Tournaments"])
    app.include_router(match_endpoints.router, prefix="/api/matches", tags=["Matches"])
    app.include_router(notification_endpoints.router, prefix="/api/notifications", tags=["Notifications"])

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.reason})

    @app.exception_handler(PermissionDeniedError)
    async def permission_error_handler(request: Request, exc: PermissionDeniedError):
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(CollaboratorError)
    async def collaborator_error_handler(request: Request, exc: CollaboratorError):
        logger.error("Backend failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable, please try again."},
        )

    @app.get("/")
    async def root():
        return {"message": "Courtside Ladder API"}

    return app


app = create_app()
