"""Record serialization for serial-transfer.

A record is the fixed-size application value carried in one frame. Codecs
convert records to and from exactly ``size`` bytes with an explicit field
order and byte order.

Contains:
- PayloadError: Raised when a record cannot be converted losslessly
- RecordCodec: Protocol implemented by all codecs
- RawCodec: Records that already are fixed-size ``bytes``
- StructCodec: Records packed with a ``struct`` format
"""

import dataclasses
import struct
from collections.abc import Callable
from typing import Any, Protocol

from common.protocol import MAX_PAYLOAD_LENGTH, MIN_PAYLOAD_LENGTH

# struct byte-order prefixes with standard sizes and no padding
EXPLICIT_BYTE_ORDERS = ("<", ">", "!")


class PayloadError(Exception):
    """Raised when a record does not convert to or from exactly ``size`` bytes."""

    pass


class RecordCodec(Protocol):
    """Protocol for converting records to and from fixed-size byte arrays."""

    @property
    def size(self) -> int: ...
    def pack(self, record: Any) -> bytes: ...
    def unpack(self, data: bytes) -> Any: ...


def _check_size(size: int) -> None:
    if not MIN_PAYLOAD_LENGTH <= size <= MAX_PAYLOAD_LENGTH:
        raise ValueError(
            f"Record size must be {MIN_PAYLOAD_LENGTH}-{MAX_PAYLOAD_LENGTH} bytes, got {size}"
        )


class RawCodec:
    """Codec for records that are plain ``bytes`` of a fixed size."""

    def __init__(self, size: int) -> None:
        _check_size(size)
        self._size = size

    @property
    def size(self) -> int:
        return self._size

    def pack(self, record: bytes) -> bytes:
        data = bytes(record)
        if len(data) != self._size:
            raise PayloadError(f"Expected {self._size} bytes, got {len(data)}")
        return data

    def unpack(self, data: bytes) -> bytes:
        if len(data) != self._size:
            raise PayloadError(f"Expected {self._size} bytes, got {len(data)}")
        return bytes(data)

    def __repr__(self) -> str:
        return f"RawCodec(size={self._size})"


class StructCodec:
    """Codec backed by a ``struct`` format string.

    The format must start with an explicit byte order (``<``, ``>`` or ``!``)
    so the wire layout does not depend on the host.

    ``pack`` accepts a tuple of field values or a dataclass instance. When a
    ``factory`` is given, ``unpack`` returns ``factory(*fields)``; otherwise
    it returns the tuple of fields.

    Usage::

        @dataclass
        class Reading:
            channel: int
            value: float

        codec = StructCodec("<Bf", factory=Reading)
        codec.unpack(codec.pack(Reading(3, 1.5)))
    """

    def __init__(self, fmt: str, factory: Callable[..., Any] | None = None) -> None:
        if not fmt or fmt[0] not in EXPLICIT_BYTE_ORDERS:
            raise ValueError(
                f"Format {fmt!r} must start with an explicit byte order {EXPLICIT_BYTE_ORDERS}"
            )
        self._struct = struct.Struct(fmt)
        _check_size(self._struct.size)
        self._factory = factory

    @property
    def size(self) -> int:
        return self._struct.size

    @property
    def format(self) -> str:
        return self._struct.format

    def pack(self, record: Any) -> bytes:
        try:
            if dataclasses.is_dataclass(record) and not isinstance(record, type):
                fields = dataclasses.astuple(record)
            else:
                fields = tuple(record)
            return self._struct.pack(*fields)
        except (struct.error, TypeError, ValueError, OverflowError) as e:
            raise PayloadError(f"Cannot pack {record!r} as {self.format!r}: {e}") from e

    def unpack(self, data: bytes) -> Any:
        if len(data) != self.size:
            raise PayloadError(f"Expected {self.size} bytes, got {len(data)}")

        try:
            fields = self._struct.unpack(data)
            if self._factory is None:
                return fields
            return self._factory(*fields)
        except (struct.error, TypeError, ValueError) as e:
            raise PayloadError(f"Cannot unpack {bytes(data).hex(' ')} as {self.format!r}: {e}") from e

    def __repr__(self) -> str:
        return f"StructCodec(format={self.format!r})"
