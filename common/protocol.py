"""Protocol definitions for serial-transfer.

Contains:
- Wire constants (start/stop markers, CRC polynomial, payload bounds)
- TransferState enum for the frame parser phases
- TransferStatus enum for parse outcomes
- Link Protocol for type checking
- Logging configuration
"""

import logging
import os
from enum import Enum
from typing import Protocol

# TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Progress logging interval (configurable via envvar)
LOG_PROGRESS_INTERVAL = int(os.environ.get("SERIAL_LOG_INTERVAL", "100"))

# Frame markers
START_BYTE = 0x7E
STOP_BYTE = 0x81

# Generator polynomial for the 8-bit frame checksum
CRC_POLYNOMIAL = 0x9B

# Payload length byte must fall in [MIN_PAYLOAD_LENGTH, MAX_PAYLOAD_LENGTH]
MIN_PAYLOAD_LENGTH = 1
MAX_PAYLOAD_LENGTH = 253

# Overhead byte value meaning "no start byte in the payload"
NO_OVERHEAD = 0xFF

# Identifier byte written on every outgoing frame
DEFAULT_PACKET_ID = 0


class TransferState(Enum):
    """Phases of the frame parser."""

    FIND_START_BYTE = "find_start_byte"
    FIND_ID_BYTE = "find_id_byte"
    FIND_OVERHEAD_BYTE = "find_overhead_byte"
    FIND_PAYLOAD_LENGTH = "find_payload_length"
    FIND_PAYLOAD = "find_payload"
    FIND_CRC = "find_crc"
    FIND_STOP_BYTE = "find_stop_byte"


class TransferStatus(Enum):
    """Outcome of the last parser step."""

    CONTINUE = "continue"
    NEW_DATA = "new_data"
    NO_DATA = "no_data"
    CRC_ERROR = "crc_error"
    PAYLOAD_ERROR = "payload_error"
    STOP_BYTE_ERROR = "stop_byte_error"

    @property
    def is_error(self) -> bool:
        return self in (
            TransferStatus.CRC_ERROR,
            TransferStatus.PAYLOAD_ERROR,
            TransferStatus.STOP_BYTE_ERROR,
        )


class Link(Protocol):
    """Protocol for the byte link a transfer session runs over.

    ``serial.Serial`` satisfies this directly.
    """

    def write(self, data: bytes, /) -> int | None: ...
    def flush(self) -> None: ...
    def read(self, size: int = ..., /) -> bytes: ...
    @property
    def in_waiting(self) -> int: ...
