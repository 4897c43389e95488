"""
Test configuration for MemberHub.
"""
from unittest.mock import create_autospec

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from memberhub.common.database.models import Base
from memberhub.common.membership import MemberStore, PaymentVerifier, Notifier


@pytest.fixture
def repo():
    return create_autospec(MemberStore, instance=True)


@pytest.fixture
def payment():
    return create_autospec(PaymentVerifier, instance=True)


@pytest.fixture
def notifier():
    return create_autospec(Notifier, instance=True)


@pytest.fixture
def session():
    """In-memory SQLite session with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
