"""Value serializers for the backend value attribute."""

import base64
import binascii
import json
import pickle
from typing import Protocol

from table_cache.domain.errors import SerializationError


class ValueSerializer(Protocol):
    """Converts cache values to and from storage strings.

    Implementations raise ``SerializationError`` for values they cannot handle.
    """

    def dumps(self, value: object) -> str:
        """Return the storage string for a value."""

    def loads(self, raw: str) -> object:
        """Parse a storage string back into a value."""


class JsonSerializer(ValueSerializer):
    """JSON text serializer for plain data values.

    Tuples come back as lists; sets and arbitrary objects are rejected.
    """

    def dumps(self, value: object) -> str:
        try:
            return json.dumps(value, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Value is not JSON serializable: {exc}") from exc

    def loads(self, raw: str) -> object:
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise SerializationError(f"Stored value is not valid JSON: {exc}") from exc


class PickleSerializer(ValueSerializer):
    """Pickle serializer for arbitrary Python objects.

    Payloads are base64 text so they fit a string column. Only use it with
    tables that untrusted parties cannot write to.
    """

    def dumps(self, value: object) -> str:
        try:
            payload = pickle.dumps(value)
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            raise SerializationError(f"Value cannot be pickled: {exc}") from exc
        return base64.b64encode(payload).decode("ascii")

    def loads(self, raw: str) -> object:
        try:
            return pickle.loads(base64.b64decode(raw))  # noqa: S301
        except (binascii.Error, pickle.UnpicklingError, EOFError) as exc:
            raise SerializationError(f"Stored value cannot be unpickled: {exc}") from exc


_SERIALIZERS: dict[str, type[ValueSerializer]] = {
    "json": JsonSerializer,
    "pickle": PickleSerializer,
}


def serializer_for(name: str) -> ValueSerializer:
    """Return a serializer by its configured name."""
    try:
        return _SERIALIZERS[name.strip().lower()]()
    except KeyError:
        raise ValueError(f"Unknown cache serializer: {name}") from None
