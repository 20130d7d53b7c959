"""Jamaat <-> Muqam mapping with domain events.

A Jamaat belongs to at most one Muqam. Mapping to a different Muqam
detaches it from the previous one in the same write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from tajneed.core.structured_logging import build_log_context
from tajneed.db.models import Jamaat
from tajneed.schemas.directory import JamaatRead, MappingStats
from tajneed.services import hierarchy_service
from tajneed.services.directory_events import (
    DirectoryEvent,
    EventSink,
    JamaatMapped,
    JamaatUnmapped,
    LoggingEventSink,
    publish_events,
)
from tajneed.services.errors import (
    DirectoryPersistenceError,
    InvalidStateError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class MappingErrorCode(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"


@dataclass(frozen=True)
class MappingResult:
    """Outcome of a map/unmap call. Failures are returned, not raised."""

    succeeded: bool
    message: str
    error: MappingErrorCode | None = None
    noop: bool = False
    events: tuple[DirectoryEvent, ...] = field(default_factory=tuple)

    @classmethod
    def success(
        cls, message: str, *, events: list[DirectoryEvent] | None = None, noop: bool = False
    ) -> "MappingResult":
        return cls(succeeded=True, message=message, noop=noop, events=tuple(events or ()))

    @classmethod
    def failure(cls, error: MappingErrorCode, message: str) -> "MappingResult":
        return cls(succeeded=False, message=message, error=error)


def _get_jamaat_or_raise(db: Session, jamaat_id: UUID) -> Jamaat:
    jamaat = hierarchy_service.get_jamaat(db, jamaat_id)
    if jamaat is None:
        raise NotFoundError("Jamaat not found")
    return jamaat


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise DirectoryPersistenceError(f"Failed to save jamaat mapping: {exc}") from exc


# =============================================================================
# Map / Unmap
# =============================================================================


def _apply_map(db: Session, jamaat_id: UUID, muqam_id: UUID) -> tuple[list[DirectoryEvent], bool]:
    jamaat = _get_jamaat_or_raise(db, jamaat_id)
    if hierarchy_service.get_muqam(db, muqam_id) is None:
        raise NotFoundError("Muqam not found")

    if jamaat.muqam_id == muqam_id:
        return [], True

    events: list[DirectoryEvent] = []
    previous_muqam_id = jamaat.muqam_id
    jamaat.muqam_id = muqam_id
    if previous_muqam_id is not None:
        events.append(JamaatUnmapped(jamaat_id=jamaat.id, previous_muqam_id=previous_muqam_id))
    events.append(JamaatMapped(jamaat_id=jamaat.id, muqam_id=muqam_id))
    return events, False


def map_jamaat_to_muqam(
    db: Session,
    jamaat_id: UUID,
    muqam_id: UUID,
    event_sink: EventSink | None = None,
) -> MappingResult:
    """
    Map a Jamaat to a Muqam.

    Remapping replaces the previous Muqam (JamaatUnmapped then JamaatMapped).
    Mapping to the current Muqam is a successful no-op with no events.

    Raises:
        DirectoryPersistenceError: If the commit fails
    """
    try:
        events, noop = _apply_map(db, jamaat_id, muqam_id)
    except NotFoundError as exc:
        return MappingResult.failure(MappingErrorCode.NOT_FOUND, str(exc))

    if noop:
        return MappingResult.success("Jamaat is already mapped to this Muqam", noop=True)

    _commit(db)
    logger.info(
        "Mapped jamaat %s to muqam %s",
        jamaat_id,
        muqam_id,
        extra=build_log_context(jamaat_id=str(jamaat_id), muqam_id=str(muqam_id)),
    )
    publish_events(event_sink or LoggingEventSink(), events)
    return MappingResult.success("Jamaat successfully mapped to Muqam", events=events)


def _apply_unmap(db: Session, jamaat_id: UUID) -> list[DirectoryEvent]:
    jamaat = _get_jamaat_or_raise(db, jamaat_id)
    if jamaat.muqam_id is None:
        raise InvalidStateError("Jamaat is not mapped to any Muqam")

    previous_muqam_id = jamaat.muqam_id
    jamaat.muqam_id = None
    return [JamaatUnmapped(jamaat_id=jamaat.id, previous_muqam_id=previous_muqam_id)]


def unmap_jamaat(
    db: Session,
    jamaat_id: UUID,
    event_sink: EventSink | None = None,
) -> MappingResult:
    """
    Detach a Jamaat from its current Muqam.

    Raises:
        DirectoryPersistenceError: If the commit fails
    """
    try:
        events = _apply_unmap(db, jamaat_id)
    except NotFoundError as exc:
        return MappingResult.failure(MappingErrorCode.NOT_FOUND, str(exc))
    except InvalidStateError as exc:
        return MappingResult.failure(MappingErrorCode.INVALID_STATE, str(exc))

    _commit(db)
    logger.info(
        "Unmapped jamaat %s",
        jamaat_id,
        extra=build_log_context(jamaat_id=str(jamaat_id)),
    )
    publish_events(event_sink or LoggingEventSink(), events)
    return MappingResult.success("Jamaat successfully unmapped", events=events)


# =============================================================================
# Queries
# =============================================================================


def get_mapping_stats(db: Session) -> MappingStats:
    """Mapped/unmapped counts and coverage percentage (0 when empty)."""
    total = db.scalar(select(func.count()).select_from(Jamaat)) or 0
    mapped = (
        db.scalar(select(func.count()).select_from(Jamaat).where(Jamaat.muqam_id.is_not(None)))
        or 0
    )
    percentage = round(mapped / total * 100, 2) if total > 0 else 0.0
    return MappingStats(
        total=total,
        mapped=mapped,
        unmapped=total - mapped,
        mapping_percentage=percentage,
    )


def list_jamaats(db: Session, only_unmapped: bool = False) -> list[JamaatRead]:
    """List jamaats ordered by name, optionally only the unmapped ones."""
    query = select(Jamaat).options(joinedload(Jamaat.muqam))
    if only_unmapped:
        query = query.where(Jamaat.muqam_id.is_(None))
    query = query.order_by(Jamaat.name)

    results = []
    for jamaat in db.execute(query).scalars().all():
        item = JamaatRead.model_validate(jamaat)
        results.append(
            item.model_copy(update={"muqam_name": jamaat.muqam.name if jamaat.muqam else None})
        )
    return results
