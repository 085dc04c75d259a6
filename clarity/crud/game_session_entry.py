# crud/game_session_entry.py
from typing import Optional, List
from sqlalchemy.orm import Session

from clarity.core.clock import to_utc_naive
from clarity.core.exceptions import DatabaseConflictError
from clarity.models.game_session_entry import GameSessionEntry
from clarity.schemas.records import GameSession


class CRUDGameSessionEntry:
    """CRUD operations for GameSessionEntry model. Sessions are append-only."""

    def create(self, db: Session, *, obj_in: GameSession) -> GameSessionEntry:
        """
        Append a finished game session.

        Raises:
            DatabaseConflictError: If a session with the same id exists
        """
        if self.get(db, id=obj_in.id):
            raise DatabaseConflictError(f"Game session {obj_in.id} already exists")

        obj_data = obj_in.model_dump()
        obj_data["timestamp"] = to_utc_naive(obj_in.timestamp)

        db_obj = GameSessionEntry(**obj_data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, id: str) -> Optional[GameSessionEntry]:
        return db.query(GameSessionEntry).filter(GameSessionEntry.id == id).first()

    def get_all(self, db: Session) -> List[GameSessionEntry]:
        """All sessions, oldest first."""
        return db.query(GameSessionEntry).order_by(GameSessionEntry.timestamp.asc()).all()


crud_game_session_entry = CRUDGameSessionEntry()
