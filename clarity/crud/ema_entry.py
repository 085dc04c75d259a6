# crud/ema_entry.py
from typing import Optional, List
from sqlalchemy.orm import Session

from clarity.core.clock import to_utc_naive
from clarity.core.exceptions import DatabaseConflictError
from clarity.models.ema_entry import EmaEntry
from clarity.schemas.records import EMA


class CRUDEmaEntry:
    """CRUD operations for EmaEntry model. Check-ins are append-only."""

    # =====================================================================
    # CREATE OPERATIONS
    # =====================================================================

    def create(self, db: Session, *, obj_in: EMA) -> EmaEntry:
        """
        Append a check-in.

        Args:
            db: Database session
            obj_in: Validated EMA record (id and timestamp already assigned)

        Returns:
            Created EmaEntry instance

        Raises:
            DatabaseConflictError: If an EMA with the same id exists
        """
        if self.get(db, id=obj_in.id):
            raise DatabaseConflictError(f"EMA {obj_in.id} already exists")

        obj_data = obj_in.model_dump()
        obj_data["timestamp"] = to_utc_naive(obj_in.timestamp)

        db_obj = EmaEntry(**obj_data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def get(self, db: Session, id: str) -> Optional[EmaEntry]:
        return db.query(EmaEntry).filter(EmaEntry.id == id).first()

    def get_all(self, db: Session) -> List[EmaEntry]:
        """All check-ins, oldest first."""
        return db.query(EmaEntry).order_by(EmaEntry.timestamp.asc()).all()

    def get_most_recent(self, db: Session) -> Optional[EmaEntry]:
        return db.query(EmaEntry).order_by(EmaEntry.timestamp.desc()).first()


# Create singleton instance
crud_ema_entry = CRUDEmaEntry()
