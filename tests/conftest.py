"""
Shared test fixtures — SQLite test database, test client, sample estimates.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point settings at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from steel_estimator.database import Base, get_db
from steel_estimator.main import app
from steel_estimator.calculators.aggregation import recalculate_all
from steel_estimator.schemas import (
    Estimate,
    MaterialItem,
    MetalDeck,
    MiscellaneousItem,
    MiscellaneousSteel,
    ProjectInfo,
    StructuralSteel,
)


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def build_sample_estimate():
    """
    Structural 10000 + metal deck 5000 + misc 2000 = 17000.

    Structural: 20000 lb, no allowance -> 10 t, one material row at 0.5/lb,
    no labour, no overhead/profit, no trip costs.
    """
    estimate = Estimate(
        project_info=ProjectInfo(
            quote_number="2501-01",
            date="2025-01-15",
            project_name="Warehouse Addition",
            gc_name="Acme Builders",
            contact_person="Pat Lee",
            estimator="Sam Rivera",
        ),
        structural_steel=StructuralSteel(
            area=1000,
            weight=20000,
            connection_allowance=0,
            material=[MaterialItem(description="First Weight", unit_rate=0.5)],
        ),
        metal_deck=MetalDeck(area=1000, cost_per_sqft=5),
        miscellaneous_steel=MiscellaneousSteel(
            items=[MiscellaneousItem(type="S/I", description="Roof hatch ladder", unit=1, unit_rate=2000)],
        ),
    )
    return recalculate_all(estimate)


@pytest.fixture
def sample_estimate():
    return build_sample_estimate()
