"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timezone
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from yen_tracker.api.main import create_app
from yen_tracker.infrastructure.database.models import Base
from yen_tracker.infrastructure.database.session import get_db
from yen_tracker.domain.models import ConversionRecord, Direction, RateInfo, StrategySettings


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def strategy_settings() -> StrategySettings:
    """Default settings: bands 200/190/175, caps £2000/£1000, £50k savings, 80% max exposure"""
    return StrategySettings()


@pytest.fixture
def make_conversion() -> Callable[..., ConversionRecord]:
    """Factory for conversion records; defaults to £1000 -> ¥190,000 at 190 on 2024-01-15"""
    counter = {"id": 0}

    def _make(**overrides) -> ConversionRecord:
        counter["id"] += 1
        fields = {
            "id": counter["id"],
            "date": date(2024, 1, 15),
            "direction": Direction.GBP_TO_JPY,
            "gbp_amount": 100000,
            "jpy_amount": 190000,
            "exchange_rate": 190.0,
        }
        fields.update(overrides)
        return ConversionRecord(**fields)

    return _make


@pytest.fixture
def live_rate() -> Callable[[float], RateInfo]:
    """Factory for a fresh rate as the rate API would return it today"""

    def _make(rate: float = 195.0) -> RateInfo:
        return RateInfo(
            rate=rate,
            date=date.today(),
            source="frankfurter",
            is_stale=False,
            fetched_at=datetime.now(timezone.utc),
        )

    return _make
