"""Common modules for serial-transfer.

This package contains the framing building blocks used by the session:
- protocol: Wire constants, TransferState/TransferStatus enums, Link Protocol
- crc: Table-driven 8-bit CRC
- stuffing: Start-byte stuffing codec
- framing: Frame dataclass and frame assembly
- record: Record codecs and PayloadError
- device: Serial device setup
- report: Reporting abstractions
"""

from common.crc import CRC, build_table
from common.framing import Frame, build_frame
from common.protocol import (
    CRC_POLYNOMIAL,
    MAX_PAYLOAD_LENGTH,
    MIN_PAYLOAD_LENGTH,
    NO_OVERHEAD,
    START_BYTE,
    STOP_BYTE,
    Link,
    TransferState,
    TransferStatus,
)
from common.record import PayloadError, RawCodec, RecordCodec, StructCodec
from common.stuffing import find_overhead, stuff, unstuff

__all__ = [
    # Protocol
    "START_BYTE",
    "STOP_BYTE",
    "CRC_POLYNOMIAL",
    "MIN_PAYLOAD_LENGTH",
    "MAX_PAYLOAD_LENGTH",
    "NO_OVERHEAD",
    "Link",
    "TransferState",
    "TransferStatus",
    # Checksum and stuffing
    "CRC",
    "build_table",
    "find_overhead",
    "stuff",
    "unstuff",
    # Framing
    "Frame",
    "build_frame",
    # Records
    "RecordCodec",
    "RawCodec",
    "StructCodec",
    # Exceptions
    "PayloadError",
]
