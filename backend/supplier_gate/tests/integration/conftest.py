"""App-level fixtures: the real application over the in-memory database."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from supplier_gate.api.dependencies import get_identity_provider
from supplier_gate.database.session import get_db_session
from supplier_gate.main import create_app
from supplier_gate.tests.factories import TEST_JWT_SECRET


@pytest.fixture
def app(db_engine, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.delenv("JWT_AUDIENCE", raising=False)

    SessionLocal = sessionmaker(bind=db_engine, autoflush=False)

    def override_db_session():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app = create_app()
    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_identity_provider] = lambda: None
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
