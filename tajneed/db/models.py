"""SQLAlchemy ORM models for the directory hierarchy and synced records."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tajneed.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Administrative hierarchy (Zone -> Dila -> Muqam)
# =============================================================================

class Zone(Base):
    """Top-level region."""

    __tablename__ = "zones"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    dilas: Mapped[list["Dila"]] = relationship(back_populates="zone")


class Dila(Base):
    """District within a Zone."""

    __tablename__ = "dilas"
    __table_args__ = (Index("idx_dilas_zone", "zone_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # NULL = not yet assigned to a zone
    zone_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("zones.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    zone: Mapped[Zone | None] = relationship(back_populates="dilas")
    muqams: Mapped[list["Muqam"]] = relationship(back_populates="dila")


class Muqam(Base):
    """Local administrative unit within a Dila. Jamaats are mapped into it."""

    __tablename__ = "muqams"
    __table_args__ = (Index("idx_muqams_dila", "dila_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # NULL = not yet assigned to a dila
    dila_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("dilas.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    dila: Mapped[Dila | None] = relationship(back_populates="muqams")
    jamaats: Mapped[list["Jamaat"]] = relationship(back_populates="muqam")


# =============================================================================
# Records synced from Tajneed
# =============================================================================

class Jamaat(Base):
    """
    A local congregation, sourced from the external directory.

    `jamaat_id` is the external numeric id (natural key for sync).
    `muqam_id` is set locally by mapping and never touched by sync.
    Rows are versioned so concurrent writers fail at flush instead of
    silently overwriting each other.
    """

    __tablename__ = "jamaats"
    __table_args__ = (Index("idx_jamaats_muqam", "muqam_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    jamaat_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    circuit_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # NULL = unmapped
    muqam_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("muqams.id", ondelete="SET NULL"), nullable=True
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )

    muqam: Mapped[Muqam | None] = relationship(back_populates="jamaats")

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_mapped(self) -> bool:
        return self.muqam_id is not None


class Member(Base):
    """
    A person record, sourced from the external directory.

    `chanda_no` is the membership number: natural key for sync and the join
    key to a locally provisioned account. `jamaat_id` holds the external
    Jamaat id; `muqam_id` is a direct link used when the Jamaat is unknown.
    """

    __tablename__ = "members"
    __table_args__ = (
        Index("idx_members_jamaat", "jamaat_id"),
        Index("idx_members_muqam", "muqam_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    chanda_no: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    wasiyat_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    title: Mapped[str | None] = mapped_column(String(50), nullable=True)
    surname: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    middle_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    marital_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_of_kin_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    next_of_kin_phone_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    signature: Mapped[str | None] = mapped_column(Text, nullable=True)
    blood_group: Mapped[str | None] = mapped_column(String(5), nullable=True)
    genotype: Mapped[str | None] = mapped_column(String(5), nullable=True)

    # External Jamaat id (not a FK: the Jamaat may not be synced yet)
    jamaat_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    muqam_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("muqams.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )

    muqam: Mapped[Muqam | None] = relationship()
