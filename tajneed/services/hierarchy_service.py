"""Hierarchy store lookups and ancestor resolution (Muqam -> Dila -> Zone)."""

from __future__ import annotations

import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tajneed.db.enums import OrganizationLevel
from tajneed.db.models import Dila, Jamaat, Member, Muqam, Zone
from tajneed.schemas.directory import DirectoryStatistics, HierarchyContext

logger = logging.getLogger(__name__)


class MemberRef(Protocol):
    """Anything carrying a member's direct hierarchy links."""

    jamaat_id: int | None
    muqam_id: UUID | None


# =============================================================================
# Lookups
# =============================================================================


def get_zone(db: Session, zone_id: UUID) -> Zone | None:
    """Get zone by ID."""
    return db.get(Zone, zone_id)


def get_dila(db: Session, dila_id: UUID) -> Dila | None:
    """Get dila by ID."""
    return db.get(Dila, dila_id)


def get_muqam(db: Session, muqam_id: UUID) -> Muqam | None:
    """Get muqam by ID."""
    return db.get(Muqam, muqam_id)


def get_jamaat(db: Session, jamaat_id: UUID) -> Jamaat | None:
    """Get jamaat by internal ID."""
    return db.get(Jamaat, jamaat_id)


def get_jamaat_by_external_id(db: Session, external_id: int) -> Jamaat | None:
    """Get jamaat by its external directory ID."""
    return db.scalar(select(Jamaat).where(Jamaat.jamaat_id == external_id))


def get_member_by_chanda_no(db: Session, chanda_no: str) -> Member | None:
    """Get member by membership number."""
    return db.scalar(select(Member).where(Member.chanda_no == chanda_no.strip()))


# =============================================================================
# Resolution
# =============================================================================


def determine_organization_level(
    muqam_id: UUID | None,
    dila_id: UUID | None,
    zone_id: UUID | None,
) -> OrganizationLevel | None:
    """Coarsest populated tier wins: zone, then dila, then muqam."""
    if zone_id is not None:
        return OrganizationLevel.ZONE
    if dila_id is not None:
        return OrganizationLevel.DILA
    if muqam_id is not None:
        return OrganizationLevel.MUQAM
    return None


def _walk_from_muqam(db: Session, muqam_id: UUID) -> HierarchyContext:
    # A missing link ends the walk; the more specific ids stay set.
    dila_id = None
    zone_id = None

    muqam = get_muqam(db, muqam_id)
    if muqam is not None and muqam.dila_id is not None:
        dila_id = muqam.dila_id
        dila = get_dila(db, dila_id)
        if dila is not None:
            zone_id = dila.zone_id

    return HierarchyContext(
        muqam_id=muqam_id,
        dila_id=dila_id,
        zone_id=zone_id,
        organization_level=determine_organization_level(muqam_id, dila_id, zone_id),
    )


def resolve_hierarchy(db: Session, member: MemberRef) -> HierarchyContext:
    """
    Resolve the Muqam/Dila/Zone chain and organization level for a member.

    Priority:
    1. The member's Jamaat (by external id), if that Jamaat is mapped
    2. No Jamaat on file: the member's direct Muqam link, walked upwards
    3. Nothing: all fields absent

    A Jamaat that is unknown or unmapped keeps the direct Muqam id but
    does not walk it, so the level stays at Muqam.

    Never raises for missing or dangling data.
    """
    if member.jamaat_id is not None:
        jamaat = get_jamaat_by_external_id(db, member.jamaat_id)
        if jamaat is not None and jamaat.muqam_id is not None:
            return _walk_from_muqam(db, jamaat.muqam_id)
        return HierarchyContext(
            muqam_id=member.muqam_id,
            organization_level=determine_organization_level(member.muqam_id, None, None),
        )

    if member.muqam_id is not None:
        return _walk_from_muqam(db, member.muqam_id)

    return HierarchyContext()


def resolve_member_hierarchy(db: Session, chanda_no: str) -> HierarchyContext | None:
    """
    Resolve hierarchy for the member with this membership number.

    Used when provisioning an account: the account's cached
    muqam/dila/zone/level fields come from here. Returns None when
    no member has the given ChandaNo.
    """
    member = get_member_by_chanda_no(db, chanda_no)
    if member is None:
        return None

    context = resolve_hierarchy(db, member)
    logger.debug(
        "Resolved hierarchy for member %s: level=%s",
        member.chanda_no,
        context.organization_level.value if context.organization_level else None,
    )
    return context


# =============================================================================
# Statistics
# =============================================================================


def get_directory_statistics(db: Session) -> DirectoryStatistics:
    """Counts across the directory, including unassigned dilas/muqams."""

    def _count(stmt) -> int:
        return db.scalar(stmt) or 0

    return DirectoryStatistics(
        total_zones=_count(select(func.count()).select_from(Zone)),
        total_dilas=_count(select(func.count()).select_from(Dila)),
        total_muqams=_count(select(func.count()).select_from(Muqam)),
        total_jamaats=_count(select(func.count()).select_from(Jamaat)),
        total_members=_count(select(func.count()).select_from(Member)),
        unassigned_dilas=_count(select(func.count()).select_from(Dila).where(Dila.zone_id.is_(None))),
        unassigned_muqams=_count(
            select(func.count()).select_from(Muqam).where(Muqam.dila_id.is_(None))
        ),
    )
