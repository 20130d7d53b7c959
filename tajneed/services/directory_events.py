"""Jamaat mapping domain events and sinks.

Events are immutable values collected while a mapping operation runs and
published only after its write commits, in call order.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol, Union
from uuid import UUID

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class JamaatMapped:
    jamaat_id: UUID
    muqam_id: UUID
    event_id: UUID = field(default_factory=uuid.uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class JamaatUnmapped:
    jamaat_id: UUID
    previous_muqam_id: UUID
    event_id: UUID = field(default_factory=uuid.uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


DirectoryEvent = Union[JamaatMapped, JamaatUnmapped]


class EventSink(Protocol):
    def publish(self, event: DirectoryEvent) -> None: ...


class LoggingEventSink:
    """Default sink: writes each event to the log."""

    def publish(self, event: DirectoryEvent) -> None:
        if isinstance(event, JamaatMapped):
            logger.info("Jamaat %s mapped to muqam %s", event.jamaat_id, event.muqam_id)
        else:
            logger.info(
                "Jamaat %s unmapped from muqam %s", event.jamaat_id, event.previous_muqam_id
            )


class InMemoryEventSink:
    """Collects published events (tests, in-process subscribers)."""

    def __init__(self) -> None:
        self.events: list[DirectoryEvent] = []

    def publish(self, event: DirectoryEvent) -> None:
        self.events.append(event)


def publish_events(sink: EventSink, events: list[DirectoryEvent]) -> None:
    """Publish events in order. A failing sink never undoes the committed write."""
    for event in events:
        try:
            sink.publish(event)
        except Exception:
            logger.exception("Failed to publish %s for jamaat %s", type(event).__name__, event.jamaat_id)
