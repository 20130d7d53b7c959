"""Structured logging helpers."""

from typing import Any


def build_log_context(
    *,
    job_id: str | None = None,
    job_type: str | None = None,
    sync_type: str | None = None,
    jamaat_id: str | None = None,
    muqam_id: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict with only the populated keys."""
    context: dict[str, Any] = {}
    if job_id:
        context["job_id"] = job_id
    if job_type:
        context["job_type"] = job_type
    if sync_type:
        context["sync_type"] = sync_type
    if jamaat_id:
        context["jamaat_id"] = jamaat_id
    if muqam_id:
        context["muqam_id"] = muqam_id
    return context
