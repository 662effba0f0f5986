"""Error types raised by the storage core."""

INVALID_TTL_MESSAGE = "Parameter 'ttl' must be a positive numeric value > 100ms."


class StorageError(Exception):
    """Base error for the storage service."""


class InvalidTTLError(StorageError, ValueError):
    """Raised when a caller-supplied TTL is not strictly greater than 100 ms."""

    def __init__(self, message: str = INVALID_TTL_MESSAGE) -> None:
        super().__init__(message)


class SnapshotError(StorageError):
    """Raised when the snapshot file cannot be written, read or parsed."""
