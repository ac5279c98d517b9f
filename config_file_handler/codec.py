"""JSON encoding of stored values."""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from config_file_handler.errors import SerializationError

T = TypeVar("T")


class Codec(Protocol[T]):
    def encode(self, value: T) -> bytes: ...

    def decode(self, data: bytes) -> T: ...


class JsonCodec(Generic[T]):
    """Pretty-printed JSON for any type pydantic can validate.

    Decoding is strict: the file must hold exactly the expected type, so
    ``"42"`` does not pass for an ``int`` and ``1`` does not pass for a
    ``bool``.
    """

    indent = 2

    def __init__(self, value_type: Any) -> None:
        self.value_type = value_type
        self._adapter: TypeAdapter[T] = TypeAdapter(value_type)

    def encode(self, value: T) -> bytes:
        try:
            return self._adapter.dump_json(value, indent=self.indent, warnings="error")
        except PydanticSerializationError as exc:
            raise SerializationError(
                f"Cannot encode {value!r} as {self._type_name}: {exc}"
            ) from exc

    def decode(self, data: bytes) -> T:
        try:
            return self._adapter.validate_json(data, strict=True)
        except ValidationError as exc:
            raise SerializationError(
                f"Contents do not parse as {self._type_name}: {exc}"
            ) from exc

    @property
    def _type_name(self) -> str:
        return getattr(self.value_type, "__name__", repr(self.value_type))
