"""Job handler registry."""

from __future__ import annotations

from typing import Awaitable, Callable, Mapping

from tajneed.core.config import settings
from tajneed.db.enums import JobType
from tajneed.jobs.handlers import directory
from tajneed.schemas.directory import SyncResult

JobHandler = Callable[[object, object, object], Awaitable[SyncResult]]

JOB_HANDLERS: Mapping[str, JobHandler] = {
    JobType.JAMAAT_SYNC.value: directory.process_jamaat_sync,
    JobType.MEMBER_SYNC.value: directory.process_member_sync,
}

# Cron schedules for the recurring jobs. The scheduler must not start a
# second run of the same job type while one is still in progress.
RECURRING_JOBS: Mapping[str, str] = {
    JobType.MEMBER_SYNC.value: settings.MEMBER_SYNC_SCHEDULE,
    JobType.JAMAAT_SYNC.value: settings.JAMAAT_SYNC_SCHEDULE,
}
