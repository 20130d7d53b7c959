"""Interface to the external directory (Tajneed) consumed by sync.

The HTTP client itself lives with the deployment; any object with these
coroutines can be passed to the sync service. Implementations should raise
httpx.HTTPError (or OSError/TimeoutError) on transport failures.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, Union

from tajneed.schemas.directory import ExternalJamaat, ExternalMember

ExternalJamaatItem = Union[ExternalJamaat, Mapping[str, Any]]
ExternalMemberItem = Union[ExternalMember, Mapping[str, Any]]


class DirectoryClient(Protocol):
    async def fetch_jamaats(self) -> Sequence[ExternalJamaatItem]:
        """Fetch every jamaat. Safe to call repeatedly."""
        ...

    async def fetch_members(self) -> Sequence[ExternalMemberItem]:
        """Fetch every member. Safe to call repeatedly."""
        ...
