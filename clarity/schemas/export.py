# schemas/export.py
from datetime import datetime
from typing import List

from pydantic import Field

from clarity.schemas.records import EMA, FrozenRecordModel, GameSession


class DataExport(FrozenRecordModel):
    """Full data export: {"emas": [...], "sessions": [...], "exportTimestamp": "..."}"""
    emas: List[EMA] = Field(default_factory=list)
    sessions: List[GameSession] = Field(default_factory=list)
    export_timestamp: datetime

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


def parse_export(text: str) -> DataExport:
    """Parse an export file produced by `DataExport.to_json`."""
    return DataExport.model_validate_json(text)


class ImportResult(FrozenRecordModel):
    emas_imported: int
    sessions_imported: int
    emas_skipped: int
    sessions_skipped: int
