"""Pytest configuration and shared fixtures."""

from datetime import datetime, time
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
from sqlalchemy import DateTime, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from svcmodel.audit.client import AuditClient
from svcmodel.database.session import create_all_tables, create_sqlite_engine
from svcmodel.models.base import Base, SerializationMixin
from svcmodel.services.service_model import ServiceModel


class Offer(SerializationMixin, Base):
    """Minimal model used to exercise the audit hooks."""

    __tablename__ = "offers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Slot(SerializationMixin, Base):
    """Model with time and datetime columns."""

    __tablename__ = "slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    starts: Mapped[time] = mapped_column(Time, nullable=False)
    booked_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


@pytest.fixture
def credentials() -> Dict[str, Any]:
    """Valid configuration record."""
    return {
        "dbName": "testDb",
        "dbUser": "testName",
        "dbPass": "testPass",
        "dbHost": "localhost",
    }


@pytest.fixture
def audited_credentials(credentials) -> Dict[str, Any]:
    return {
        **credentials,
        "auditEs": "http://audit-es:9200",
        "userId": "550e8400-e29b-41d4-a716-446655440000",
    }


@pytest.fixture
def sqlite_factory():
    """Engine factory producing a fresh in-memory SQLite database."""
    return lambda config: create_sqlite_engine()


@pytest.fixture
def audit_client() -> MagicMock:
    return MagicMock(spec=AuditClient)


@pytest.fixture
def audited_service(audited_credentials, sqlite_factory, audit_client):
    """ServiceModel on SQLite with a mocked audit client and the offers table created."""
    service = ServiceModel(
        audited_credentials,
        engine_factory=sqlite_factory,
        audit_client_factory=lambda config: audit_client,
    )
    create_all_tables(Base.metadata, service.get_db())
    yield service
    service.close_db()


@pytest.fixture
def offer_model():
    return Offer


@pytest.fixture
def slot_model():
    return Slot
