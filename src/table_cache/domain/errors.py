"""Errors raised by the cache pool and its backends."""


class CacheError(Exception):
    """Base class for cache errors."""


class InvalidKeyError(CacheError, ValueError):
    """Raised when a cache key is not usable with the backend."""

    def __init__(self, key: object, reserved: str) -> None:
        self.key = key
        self.reserved = reserved
        super().__init__(
            f"The key '{key}' cannot contain any of the reserved characters: "
            f"'{reserved}'"
        )


class UnsupportedEntryTypeError(CacheError, TypeError):
    """Raised when no converter adapter accepts an entry."""

    def __init__(self, item: object) -> None:
        self.item = item
        super().__init__(f"Unsupported cache entry type: {type(item).__name__}")


class BackendError(CacheError):
    """Raised when the key-value backend call fails."""


class TableNotFoundError(BackendError):
    """Raised when the backend table does not exist."""


class SerializationError(CacheError, ValueError):
    """Raised when a value cannot be converted to or from its storage string."""
