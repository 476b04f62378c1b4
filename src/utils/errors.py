"""Error handling utilities."""


class ConsoleError(Exception):
    """Base exception for the catalog console backend."""
    pass


class RemoteStoreError(ConsoleError):
    """Remote document store operation error."""
    pass


class RecordNotFoundError(RemoteStoreError):
    """Requested document does not exist."""
    pass


class InvalidRecordError(ConsoleError):
    """Record payload failed validation before a write."""
    pass


class AdminAuthorizationError(ConsoleError):
    """Caller is not on the admin allow-list."""
    pass
