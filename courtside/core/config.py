from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    SECRET_KEY: str = "YOUR_SECRET_KEY_HERE"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    GOOGLE_CLIENT_ID: str = "YOUR_GOOGLE_CLIENT_ID_HERE"

    # "memory", "json" or "sql"
    STORE_BACKEND: str = "memory"
    DATA_DIR: str = "data"
    DATABASE_URL: str = "sqlite:///./courtside.db"
    SQL_ECHO: bool = False

    READ_RETRY_ATTEMPTS: int = 3
    READ_RETRY_BACKOFF_SECONDS: float = 0.2

    PROPOSAL_TTL_DAYS: int = 7
    MIN_PROPOSAL_LEAD_MINUTES: int = 60
    MAX_PROPOSAL_HORIZON_DAYS: int = 30
    SKILL_GAP_TOLERANCE: float = 0.5

    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    FROM_EMAIL: str = "ladder@courtside.local"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
