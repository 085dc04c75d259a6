import itertools
import os
from datetime import datetime

# Must be set before clarity.core.config creates the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = ""

import pytest

from clarity.core.config import Base, SessionLocal, engine
from clarity.schemas.records import EMA, GameSession, GameType
import clarity.models  # noqa: F401

# Monday 2 March 2026, 09:00 local time
BASE_TIME = datetime(2026, 3, 2, 9, 0)

_ids = itertools.count(1)


def make_ema(**overrides) -> EMA:
    """A calm, well-rested check-in unless overridden."""
    fields = dict(
        id=f"ema-{next(_ids)}",
        timestamp=BASE_TIME,
        anger=1,
        anxiety=1,
        sadness=1,
        happiness=4,
        recent_stressful_event=False,
        sleep_hours=8.0,
        sleep_quality=4,
        caffeine_recent=False,
    )
    fields.update(overrides)
    return EMA(**fields)


def make_session(**overrides) -> GameSession:
    fields = dict(
        id=f"session-{next(_ids)}",
        timestamp=BASE_TIME,
        game_type=GameType.GO_NO_GO,
        difficulty_level=1,
        score=70,
        accuracy=0.8,
    )
    fields.update(overrides)
    return GameSession(**fields)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
