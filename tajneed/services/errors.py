"""Directory service exceptions."""


class DirectoryError(Exception):
    """Base exception for directory service errors."""

    pass


class NotFoundError(DirectoryError):
    """Referenced Zone/Dila/Muqam/Jamaat/Member id does not exist."""

    pass


class InvalidStateError(DirectoryError):
    """Operation is not valid for the entity's current state."""

    pass


class DirectoryTransportError(DirectoryError):
    """External directory fetch failed (unreachable, timeout, bad response)."""

    pass


class DirectoryPersistenceError(DirectoryError):
    """Committing a batch of changes to the store failed."""

    pass
