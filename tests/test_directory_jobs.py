import uuid
from types import SimpleNamespace

import httpx
import pytest

from tajneed.core.config import settings
from tajneed.db.enums import JobType
from tajneed.jobs.handlers import directory
from tajneed.jobs.registry import JOB_HANDLERS, RECURRING_JOBS
from tajneed.services.errors import DirectoryTransportError


def _job(job_type: JobType) -> SimpleNamespace:
    return SimpleNamespace(id=uuid.uuid4(), job_type=job_type.value)


@pytest.mark.asyncio
async def test_jamaat_sync_job_returns_result(db, directory_client):
    directory_client.jamaats = [
        {"jamaatId": 1, "jamaatName": "Agege"},
        {"jamaatId": 2, "jamaatName": ""},
    ]

    result = await directory.process_jamaat_sync(db, _job(JobType.JAMAAT_SYNC), directory_client)

    assert result.new_count == 1
    assert result.failed_count == 1


@pytest.mark.asyncio
async def test_member_sync_job_returns_result(db, directory_client):
    directory_client.members = [{"chandaNo": "M-1", "surname": "Bello"}]

    result = await directory.process_member_sync(db, _job(JobType.MEMBER_SYNC), directory_client)

    assert result.total_fetched == 1
    assert result.new_count == 1


@pytest.mark.asyncio
async def test_sync_job_reraises_transport_failure(db, directory_client):
    directory_client.error = httpx.ReadTimeout("read timed out")

    with pytest.raises(DirectoryTransportError):
        await directory.process_member_sync(db, _job(JobType.MEMBER_SYNC), directory_client)


def test_registry_covers_sync_jobs():
    assert JOB_HANDLERS[JobType.JAMAAT_SYNC.value] is directory.process_jamaat_sync
    assert JOB_HANDLERS[JobType.MEMBER_SYNC.value] is directory.process_member_sync
    assert RECURRING_JOBS == {
        JobType.MEMBER_SYNC.value: settings.MEMBER_SYNC_SCHEDULE,
        JobType.JAMAAT_SYNC.value: settings.JAMAAT_SYNC_SCHEDULE,
    }
