"""
Test configuration and fixtures.

Provides:
- A fresh in-memory SQLite database per test
- Hierarchy factories (zone -> dila -> muqam, jamaats, members)
- A fake external directory client
"""
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Generator

# Tests never touch a real database
os.environ["DATABASE_URL"] = "sqlite+pysqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tajneed.db.base import Base
from tajneed.db.models import Dila, Jamaat, Member, Muqam, Zone


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Session bound to a throwaway in-memory database."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@dataclass
class Hierarchy:
    zone: Zone | None
    dila: Dila | None
    muqam: Muqam


@pytest.fixture
def make_hierarchy(db: Session) -> Callable[..., Hierarchy]:
    """Create a muqam with optional dila/zone ancestors."""

    def _make(name: str = "Ikeja", *, with_dila: bool = True, with_zone: bool = True) -> Hierarchy:
        zone = None
        dila = None
        if with_dila and with_zone:
            zone = Zone(name=f"{name} Zone")
            db.add(zone)
            db.flush()
        if with_dila:
            dila = Dila(name=f"{name} Dila", zone_id=zone.id if zone else None)
            db.add(dila)
            db.flush()
        muqam = Muqam(name=f"{name} Muqam", dila_id=dila.id if dila else None)
        db.add(muqam)
        db.commit()
        return Hierarchy(zone=zone, dila=dila, muqam=muqam)

    return _make


@pytest.fixture
def make_jamaat(db: Session) -> Callable[..., Jamaat]:
    def _make(external_id: int, name: str | None = None, muqam: Muqam | None = None) -> Jamaat:
        jamaat = Jamaat(
            jamaat_id=external_id,
            name=name or f"Jamaat {external_id}",
            muqam_id=muqam.id if muqam else None,
        )
        db.add(jamaat)
        db.commit()
        return jamaat

    return _make


@pytest.fixture
def make_member(db: Session) -> Callable[..., Member]:
    def _make(chanda_no: str, **fields: Any) -> Member:
        fields.setdefault("surname", "Adeyemi")
        member = Member(chanda_no=chanda_no, **fields)
        db.add(member)
        db.commit()
        return member

    return _make


# =============================================================================
# External directory
# =============================================================================

@dataclass
class FakeDirectoryClient:
    """In-memory stand-in for the Tajneed API."""

    jamaats: list[Any] = field(default_factory=list)
    members: list[Any] = field(default_factory=list)
    error: Exception | None = None
    calls: int = 0

    async def fetch_jamaats(self) -> list[Any]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.jamaats)

    async def fetch_members(self) -> list[Any]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.members)


@pytest.fixture
def directory_client() -> FakeDirectoryClient:
    return FakeDirectoryClient()
