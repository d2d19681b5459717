"""Shared fixtures: in-memory SQLite database and a store over it."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from supplier_gate.db_base import Base
import supplier_gate.models  # noqa: F401  registers tables on Base.metadata
from supplier_gate.storage.sql_store import SqlSupplierGateStore


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads (TestClient)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Create in-memory SQLite database session for testing."""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(db_session):
    return SqlSupplierGateStore(db_session)
