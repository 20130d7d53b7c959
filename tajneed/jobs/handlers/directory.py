"""Directory sync job handlers."""

from __future__ import annotations

import logging

from tajneed.core.structured_logging import build_log_context
from tajneed.db.enums import JobType
from tajneed.schemas.directory import SyncResult
from tajneed.services.directory_client import DirectoryClient
from tajneed.services.errors import DirectoryError

logger = logging.getLogger(__name__)


async def process_jamaat_sync(db, job, client: DirectoryClient) -> SyncResult:
    """
    Process a JAMAAT_SYNC job - reconcile jamaats against Tajneed.

    Per-jamaat failures are reported in the result; a transport or commit
    failure is re-raised so the scheduler records the run as failed.
    """
    from tajneed.services import directory_sync_service

    log_context = build_log_context(job_id=str(job.id), job_type=JobType.JAMAAT_SYNC.value)
    try:
        result = await directory_sync_service.sync_jamaats(db, client)
    except DirectoryError as exc:
        logger.error("Jamaat sync job %s failed: %s", job.id, exc, extra=log_context)
        raise

    if result.failed_count:
        logger.warning(
            "Jamaat sync job %s finished with %s failed jamaats",
            job.id,
            result.failed_count,
            extra=log_context,
        )
    return result


async def process_member_sync(db, job, client: DirectoryClient) -> SyncResult:
    """
    Process a MEMBER_SYNC job - reconcile members against Tajneed.

    Same failure semantics as process_jamaat_sync.
    """
    from tajneed.services import directory_sync_service

    log_context = build_log_context(job_id=str(job.id), job_type=JobType.MEMBER_SYNC.value)
    try:
        result = await directory_sync_service.sync_members(db, client)
    except DirectoryError as exc:
        logger.error("Member sync job %s failed: %s", job.id, exc, extra=log_context)
        raise

    if result.failed_count:
        logger.warning(
            "Member sync job %s finished with %s failed members",
            job.id,
            result.failed_count,
            extra=log_context,
        )
    return result
