"""Service layer modules."""

from tajneed.services.directory_sync_service import sync_jamaats, sync_members
from tajneed.services.hierarchy_service import (
    get_directory_statistics,
    resolve_hierarchy,
    resolve_member_hierarchy,
)
from tajneed.services.jamaat_mapping_service import (
    MappingErrorCode,
    MappingResult,
    get_mapping_stats,
    list_jamaats,
    map_jamaat_to_muqam,
    unmap_jamaat,
)
