"""Directory sync service: reconcile local Jamaats/Members against Tajneed.

Each run:
- Fetches the full external record set in one call
- Upserts every record by natural key (jamaat_id / chanda_no)
- Isolates per-record failures (counted, listed, logged)
- Commits everything in a single transaction at the end

Transport and commit failures abort the whole run; nothing is written.
Only one run per sync type may execute at a time against the same store;
the scheduler guarantees that.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Hashable, Mapping, Sequence

import anyio
from anyio.lowlevel import checkpoint
import httpx
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tajneed.core.config import settings
from tajneed.core.structured_logging import build_log_context
from tajneed.db.enums import BloodGroup, Genotype
from tajneed.db.models import Jamaat, Member
from tajneed.schemas.directory import ExternalJamaat, ExternalMember, SyncResult
from tajneed.services import hierarchy_service
from tajneed.services.directory_client import DirectoryClient
from tajneed.services.errors import DirectoryPersistenceError, DirectoryTransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _SyncTarget:
    """How one record type is parsed, keyed, looked up and written."""

    label: str
    parse: Callable[[Any], BaseModel]
    natural_key: Callable[[Any], Hashable]
    describe: Callable[[Any], str]
    lookup: Callable[[Session, Any], Any]
    values: Callable[[Any], dict[str, Any]]
    create: Callable[[Any, dict[str, Any]], Any]


# =============================================================================
# Helpers
# =============================================================================


def _raw_value(item: Any, *names: str) -> Any:
    for name in names:
        if isinstance(item, Mapping):
            if item.get(name) is not None:
                return item[name]
        elif getattr(item, name, None) is not None:
            return getattr(item, name)
    return None


def _format_error(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'record'}: {error['msg']}"
            for error in exc.errors()
        )
    return str(exc) or type(exc).__name__


def _parse_enum(enum_cls, value: str | None):
    if not value:
        return None
    try:
        return enum_cls(value.strip().upper().replace(" ", ""))
    except ValueError:
        return None


async def _fetch(label: str, fetch: Callable[[], Awaitable[Sequence[Any]]]) -> list[Any]:
    try:
        with anyio.fail_after(settings.DIRECTORY_FETCH_TIMEOUT_SECONDS):
            records = await fetch()
    except TimeoutError as exc:
        raise DirectoryTransportError(
            f"{label} fetch timed out after {settings.DIRECTORY_FETCH_TIMEOUT_SECONDS}s"
        ) from exc
    except (httpx.HTTPError, OSError) as exc:
        raise DirectoryTransportError(f"{label} fetch failed: {exc}") from exc
    return list(records or [])


async def _commit(db: Session, label: str) -> None:
    try:
        # Cancellation lands here at the latest, before anything is written
        await checkpoint()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise DirectoryPersistenceError(f"Failed to save {label} sync: {exc}") from exc
    except BaseException:
        db.rollback()
        raise


# =============================================================================
# Reconciliation loop
# =============================================================================


async def _reconcile(
    db: Session,
    target: _SyncTarget,
    fetch: Callable[[], Awaitable[Sequence[Any]]],
) -> SyncResult:
    log_context = build_log_context(sync_type=target.label)
    logger.info("Starting %s sync from external directory", target.label, extra=log_context)

    records = await _fetch(target.label, fetch)
    logger.info("Fetched %s %ss from external directory", len(records), target.label, extra=log_context)

    result = SyncResult(total_fetched=len(records))
    # Records created or updated in this run, by natural key. Repeated keys
    # in one fetch update the staged row in place (last occurrence wins).
    staged: dict[Hashable, Any] = {}

    try:
        for item in records:
            try:
                record = target.parse(item)
                key = target.natural_key(record)
                # Build every value before touching the row, so a failing
                # record never leaves a half-updated row behind.
                values = target.values(record)

                local = staged.get(key)
                if local is None:
                    local = target.lookup(db, key)

                if local is None:
                    local = target.create(record, values)
                    db.add(local)
                    result.new_count += 1
                else:
                    for field_name, value in values.items():
                        setattr(local, field_name, value)
                    result.updated_count += 1
                staged[key] = local
            except Exception as exc:
                result.failed_count += 1
                error = f"Failed to sync {target.label} {target.describe(item)}: {_format_error(exc)}"
                result.errors.append(error)
                if result.failed_count <= settings.SYNC_ERROR_LOG_LIMIT:
                    logger.error(error, exc_info=exc, extra=log_context)
    except BaseException:
        db.rollback()
        raise

    await _commit(db, target.label)

    if result.failed_count > settings.SYNC_ERROR_LOG_LIMIT:
        logger.warning(
            "%s %s sync errors not logged individually",
            result.failed_count - settings.SYNC_ERROR_LOG_LIMIT,
            target.label,
            extra=log_context,
        )
    logger.info(
        "%s sync completed: %s fetched, %s new, %s updated, %s failed",
        target.label.capitalize(),
        result.total_fetched,
        result.new_count,
        result.updated_count,
        result.failed_count,
        extra=log_context,
    )
    return result


# =============================================================================
# Jamaats
# =============================================================================


def _parse_jamaat(item: Any) -> ExternalJamaat:
    if isinstance(item, ExternalJamaat):
        return item
    return ExternalJamaat.model_validate(item)


def _describe_jamaat(item: Any) -> str:
    jamaat_id = _raw_value(item, "jamaatId", "jamaat_id")
    name = _raw_value(item, "jamaatName", "name")
    return f"{jamaat_id} ({name})"


def _jamaat_values(record: ExternalJamaat) -> dict[str, Any]:
    # muqam_id is a local mapping and is never overwritten by sync
    return {
        "name": record.name,
        "code": record.code,
        "circuit_name": record.circuit_name,
    }


def _create_jamaat(record: ExternalJamaat, values: dict[str, Any]) -> Jamaat:
    return Jamaat(jamaat_id=record.jamaat_id, **values)


JAMAAT_SYNC = _SyncTarget(
    label="jamaat",
    parse=_parse_jamaat,
    natural_key=lambda record: record.jamaat_id,
    describe=_describe_jamaat,
    lookup=hierarchy_service.get_jamaat_by_external_id,
    values=_jamaat_values,
    create=_create_jamaat,
)


async def sync_jamaats(db: Session, client: DirectoryClient) -> SyncResult:
    """
    Sync jamaats from the external directory.

    Returns:
        SyncResult with fetched/new/updated/failed counts and per-item errors

    Raises:
        DirectoryTransportError: If the fetch fails or times out
        DirectoryPersistenceError: If the final commit fails
    """
    return await _reconcile(db, JAMAAT_SYNC, client.fetch_jamaats)


# =============================================================================
# Members
# =============================================================================


def _parse_member(item: Any) -> ExternalMember:
    if isinstance(item, ExternalMember):
        return item
    return ExternalMember.model_validate(item)


def _describe_member(item: Any) -> str:
    return str(_raw_value(item, "chandaNo", "chanda_no"))


def _member_values(record: ExternalMember) -> dict[str, Any]:
    values: dict[str, Any] = {
        "wasiyat_no": record.wasiyat_no,
        "title": record.title,
        "surname": record.surname,
        "first_name": record.first_name,
        "middle_name": record.middle_name,
        "date_of_birth": record.date_of_birth,
        "email": record.email,
        "phone_no": record.phone_no,
        "marital_status": record.marital_status,
        "address": record.address,
        "next_of_kin_name": record.next_of_kin_name,
        "next_of_kin_phone_no": record.next_of_kin_phone_no,
    }
    # Feed gaps keep whatever is already stored for these
    if record.photo_url:
        values["photo_url"] = record.photo_url
    if record.signature:
        values["signature"] = record.signature
    if record.jamaat_id is not None:
        values["jamaat_id"] = record.jamaat_id

    # Medical info is only taken when both values are recognised
    blood_group = _parse_enum(BloodGroup, record.blood_group)
    genotype = _parse_enum(Genotype, record.genotype)
    if blood_group is not None and genotype is not None:
        values["blood_group"] = blood_group.value
        values["genotype"] = genotype.value
    return values


def _create_member(record: ExternalMember, values: dict[str, Any]) -> Member:
    return Member(chanda_no=record.chanda_no, **values)


MEMBER_SYNC = _SyncTarget(
    label="member",
    parse=_parse_member,
    natural_key=lambda record: record.chanda_no,
    describe=_describe_member,
    lookup=hierarchy_service.get_member_by_chanda_no,
    values=_member_values,
    create=_create_member,
)


async def sync_members(db: Session, client: DirectoryClient) -> SyncResult:
    """
    Sync members from the external directory, keyed on ChandaNo.

    Raises:
        DirectoryTransportError: If the fetch fails or times out
        DirectoryPersistenceError: If the final commit fails
    """
    return await _reconcile(db, MEMBER_SYNC, client.fetch_members)
