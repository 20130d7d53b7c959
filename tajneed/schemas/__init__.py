"""Pydantic schemas for directory records and results."""

from tajneed.schemas.directory import (
    DirectoryStatistics,
    ExternalJamaat,
    ExternalMember,
    HierarchyContext,
    JamaatRead,
    MappingStats,
    SyncResult,
)
