"""
Common test fixtures.

Every test runs against a fresh in-memory SQLite database. The single connection is
shared through StaticPool, so a test should use either the API client or a database
session at a time, not both at once.
"""
import asyncio
import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

os.environ.setdefault("SHAREDJOURNAL_DB_URI", "sqlite://")

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sharedjournal import db
from sharedjournal.api import app
from sharedjournal.journal import actions
from sharedjournal.journal.data import Identity
from sharedjournal.journal.models import Base


@pytest.fixture
def engine():
    engine = db.create_sharedjournal_engine(
        url="sqlite://",
        pool_size=1,
        max_overflow=0,
        statement_timeout=1000,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def yield_test_connection():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[db.yield_connection_from_env] = yield_test_connection
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def journal(db_session):
    """
    Journal "TRIP2024" created by user u1.
    """
    return asyncio.run(
        actions.create_journal(
            db_session,
            title="Trip",
            share_key="TRIP2024",
            created_by=Identity(id="u1", username="alice"),
        )
    )
