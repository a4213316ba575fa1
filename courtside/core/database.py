
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from courtside.core.config import settings

Base = declarative_base()


def make_engine(database_url: str = settings.DATABASE_URL, echo: bool = settings.SQL_ECHO) -> Engine:
    # SQLite needs check_same_thread off when sessions cross FastAPI's threadpool
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=echo, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables. Importing the models registers them on Base."""
    import courtside.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


