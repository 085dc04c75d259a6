# clarity/models/__init__.py

from clarity.core.config import Base

# Import all models here so metadata.create_all sees every table
from .ema_entry import EmaEntry
from .game_session_entry import GameSessionEntry
from .chat_message import ChatMessage

__all__ = [
    "Base",
    "EmaEntry",
    "GameSessionEntry",
    "ChatMessage",
]
