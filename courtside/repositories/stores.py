import logging
import os
from typing import Optional

from courtside.core.config import Settings
from courtside.models.match_model import MatchModel
from courtside.models.notification_model import NotificationModel
from courtside.models.participant_model import ParticipantModel
from courtside.models.player_model import PlayerModel
from courtside.models.tournament_model import TournamentModel
from courtside.repositories.base import EntityStore
from courtside.repositories.json_file import JsonFileEntityStore
from courtside.repositories.memory import InMemoryEntityStore
from courtside.repositories.retrying import RetryingEntityStore

logger = logging.getLogger(__name__)

KINDS = {
    "tournaments": TournamentModel,
    "participants": ParticipantModel,
    "matches": MatchModel,
    "players": PlayerModel,
    "notifications": NotificationModel,
}


class Stores:
    """The entity stores every service works against, one per record kind."""

    def __init__(
        self,
        tournaments: EntityStore[TournamentModel],
        participants: EntityStore[ParticipantModel],
        matches: EntityStore[MatchModel],
        players: EntityStore[PlayerModel],
        notifications: EntityStore[NotificationModel],
    ):
        self.tournaments = tournaments
        self.participants = participants
        self.matches = matches
        self.players = players
        self.notifications = notifications

    @classmethod
    def in_memory(cls) -> "Stores":
        return cls(**{name: InMemoryEntityStore(model_cls) for name, model_cls in KINDS.items()})

    @classmethod
    def json_files(cls, data_dir: str) -> "Stores":
        return cls(**{
            name: JsonFileEntityStore(model_cls, os.path.join(data_dir, f"{name}.json"))
            for name, model_cls in KINDS.items()
        })

    @classmethod
    def sql(cls, session_factory) -> "Stores":
        from courtside.models import Match, Notification, Participant, Player, Tournament
        from courtside.repositories.sql import SqlAlchemyEntityStore

        tables = {
            "tournaments": Tournament,
            "participants": Participant,
            "matches": Match,
            "players": Player,
            "notifications": Notification,
        }
        return cls(**{
            name: SqlAlchemyEntityStore(KINDS[name], tables[name], session_factory)
            for name in KINDS
        })

    def with_read_retries(self, attempts: int, backoff_seconds: float, sleep=None) -> "Stores":
        return Stores(**{
            name: RetryingEntityStore(getattr(self, name), attempts=attempts, backoff_seconds=backoff_seconds, sleep=sleep)
            for name in KINDS
        })


def build_stores(settings: Settings, session_factory: Optional[object] = None) -> Stores:
    backend = settings.STORE_BACKEND.lower()
    if backend == "memory":
        stores = Stores.in_memory()
    elif backend == "json":
        stores = Stores.json_files(settings.DATA_DIR)
    elif backend == "sql":
        if session_factory is None:
            from courtside.core.database import init_db, make_engine, make_session_factory

            engine = make_engine(settings.DATABASE_URL, settings.SQL_ECHO)
            init_db(engine)
            session_factory = make_session_factory(engine)
        stores = Stores.sql(session_factory)
    else:
        raise ValueError(f"Unknown STORE_BACKEND '{settings.STORE_BACKEND}'")
    logger.info("Using %s entity stores", backend)
    return stores.with_read_retries(settings.READ_RETRY_ATTEMPTS, settings.READ_RETRY_BACKOFF_SECONDS)
