# clarity/data/record_store.py
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from clarity.core.clock import from_utc_naive, to_local
from clarity.core.exceptions import DatabaseConflictError, DatabaseIntegrityError
from clarity.crud.ema_entry import crud_ema_entry
from clarity.crud.game_session_entry import crud_game_session_entry
from clarity.schemas.records import EMA, GameSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


def pair_sessions_with_emas(
    sessions: List[GameSession], emas: List[EMA]
) -> List[Tuple[GameSession, Optional[EMA]]]:
    """Each session paired with its check-in, None when the link is dangling."""
    ema_map = {ema.id: ema for ema in emas}
    return [
        (session, ema_map.get(session.ema_id) if session.ema_id else None)
        for session in sessions
    ]


# =====================================================================
# INTERFACE
# =====================================================================

class RecordStore(ABC):
    """
    Source of EMA and game-session records for the analytics core.

    Records are append-only. Reads return fully decoded, immutable domain
    records in chronological order.
    """

    @abstractmethod
    def append_ema(self, ema: EMA) -> EMA:
        ...

    @abstractmethod
    def append_session(self, session: GameSession) -> GameSession:
        ...

    @abstractmethod
    def all_emas(self) -> List[EMA]:
        ...

    @abstractmethod
    def all_sessions(self) -> List[GameSession]:
        ...

    @abstractmethod
    def most_recent_ema(self) -> Optional[EMA]:
        ...

    def get_ema(self, ema_id: str) -> Optional[EMA]:
        return next((ema for ema in self.all_emas() if ema.id == ema_id), None)

    def sessions_with_ema(self) -> List[Tuple[GameSession, Optional[EMA]]]:
        return pair_sessions_with_emas(self.all_sessions(), self.all_emas())


# =====================================================================
# SQLALCHEMY IMPLEMENTATION
# =====================================================================

class SqlRecordStore(RecordStore):
    """Record store backed by the ema_entry / game_session_entry tables."""

    def __init__(self, db: Session):
        self.db = db
        self.ema_crud = crud_ema_entry
        self.session_crud = crud_game_session_entry

    @staticmethod
    def _decode_ema(row) -> EMA:
        try:
            ema = EMA.model_validate(row)
        except PydanticValidationError as exc:
            raise DatabaseIntegrityError(f"Malformed EMA record {row.id}") from exc
        return ema.model_copy(update={"timestamp": from_utc_naive(row.timestamp)})

    @staticmethod
    def _decode_session(row) -> GameSession:
        try:
            session = GameSession.model_validate(row)
        except PydanticValidationError as exc:
            raise DatabaseIntegrityError(f"Malformed game session record {row.id}") from exc
        return session.model_copy(update={"timestamp": from_utc_naive(row.timestamp)})

    def _load(self, fetch: Callable[[Session], T], what: str) -> T:
        try:
            return fetch(self.db)
        except LookupError as exc:
            # Unknown enum name in a stored row
            raise DatabaseIntegrityError(f"Malformed {what} record") from exc

    def append_ema(self, ema: EMA) -> EMA:
        row = self.ema_crud.create(self.db, obj_in=ema)
        logger.debug("Stored EMA %s", row.id)
        return self._decode_ema(row)

    def append_session(self, session: GameSession) -> GameSession:
        row = self.session_crud.create(self.db, obj_in=session)
        logger.debug("Stored game session %s (%s)", row.id, row.game_type)
        return self._decode_session(row)

    def all_emas(self) -> List[EMA]:
        rows = self._load(self.ema_crud.get_all, "EMA")
        return [self._decode_ema(row) for row in rows]

    def all_sessions(self) -> List[GameSession]:
        rows = self._load(self.session_crud.get_all, "game session")
        return [self._decode_session(row) for row in rows]

    def most_recent_ema(self) -> Optional[EMA]:
        row = self._load(self.ema_crud.get_most_recent, "EMA")
        return self._decode_ema(row) if row else None

    def get_ema(self, ema_id: str) -> Optional[EMA]:
        row = self._load(lambda db: self.ema_crud.get(db, id=ema_id), "EMA")
        return self._decode_ema(row) if row else None


# =====================================================================
# IN-MEMORY IMPLEMENTATION
# =====================================================================

class InMemoryRecordStore(RecordStore):
    """List-backed store for tests and demos. Each instance owns its data."""

    def __init__(self, emas: Optional[List[EMA]] = None, sessions: Optional[List[GameSession]] = None):
        self._emas: Dict[str, EMA] = {}
        self._sessions: Dict[str, GameSession] = {}
        for ema in emas or []:
            self.append_ema(ema)
        for session in sessions or []:
            self.append_session(session)

    def append_ema(self, ema: EMA) -> EMA:
        if ema.id in self._emas:
            raise DatabaseConflictError(f"EMA {ema.id} already exists")
        self._emas[ema.id] = ema
        return ema

    def append_session(self, session: GameSession) -> GameSession:
        if session.id in self._sessions:
            raise DatabaseConflictError(f"Game session {session.id} already exists")
        self._sessions[session.id] = session
        return session

    def all_emas(self) -> List[EMA]:
        # Stable sort keeps insertion order for equal timestamps
        return sorted(self._emas.values(), key=lambda ema: to_local(ema.timestamp))

    def all_sessions(self) -> List[GameSession]:
        return sorted(self._sessions.values(), key=lambda s: to_local(s.timestamp))

    def most_recent_ema(self) -> Optional[EMA]:
        emas = self.all_emas()
        return emas[-1] if emas else None

    def get_ema(self, ema_id: str) -> Optional[EMA]:
        return self._emas.get(ema_id)
