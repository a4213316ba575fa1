from courtside.core.database import Base

# Import all tables here so they are registered with Base before create_all
from .player import Player
from .tournament import Tournament
from .participant import Participant
from .match import Match
from .notification import Notification
