"""Incremental frame parser for serial-transfer.

Contains:
- FrameParser: Byte-at-a-time state machine that validates frames

The parser keeps its state between calls, so a frame may arrive split across
any number of reads. Corrupt input never raises: the parser records the
failure in ``status`` and goes back to hunting for the next start byte.
"""

import logging

from common.crc import CRC
from common.framing import Frame, validate_length
from common.protocol import (
    START_BYTE,
    STOP_BYTE,
    TRACE,
    TransferState,
    TransferStatus,
)
from common.stuffing import unstuff

logger = logging.getLogger(__name__)


class FrameParser:
    """Frame parser state machine.

    Usage::

        parser = FrameParser()
        for byte in data:
            frame = parser.feed(byte)
            if frame is not None:
                handle(frame.payload)
    """

    def __init__(self, crc: CRC | None = None) -> None:
        self._crc = crc if crc is not None else CRC()
        self.state = TransferState.FIND_START_BYTE
        self.status = TransferStatus.CONTINUE
        self.packet_id = 0
        self.overhead = 0
        self.payload_length = 0
        self._payload = bytearray()

    @property
    def crc(self) -> CRC:
        return self._crc

    @property
    def pending(self) -> int:
        """Number of payload bytes buffered for the frame in progress."""
        return len(self._payload)

    def reset(self) -> None:
        """Drop any partial frame and wait for the next start byte."""
        self.state = TransferState.FIND_START_BYTE
        self.status = TransferStatus.CONTINUE
        self._payload.clear()

    def _fail(self, status: TransferStatus) -> None:
        self.state = TransferState.FIND_START_BYTE
        self.status = status

    def feed(self, byte: int) -> Frame | None:
        """Advance the state machine by one byte.

        Returns the decoded Frame when ``byte`` completes a valid frame,
        otherwise None. ``status`` reflects the outcome of this byte.
        """
        self.status = TransferStatus.CONTINUE

        match self.state:
            case TransferState.FIND_START_BYTE:
                if byte == START_BYTE:
                    self.state = TransferState.FIND_ID_BYTE

            case TransferState.FIND_ID_BYTE:
                self.packet_id = byte
                self.state = TransferState.FIND_OVERHEAD_BYTE

            case TransferState.FIND_OVERHEAD_BYTE:
                self.overhead = byte
                self.state = TransferState.FIND_PAYLOAD_LENGTH

            case TransferState.FIND_PAYLOAD_LENGTH:
                if validate_length(byte):
                    self.payload_length = byte
                    self._payload.clear()
                    self.state = TransferState.FIND_PAYLOAD
                else:
                    logger.debug(f"Invalid payload length {byte}, resyncing")
                    self._fail(TransferStatus.PAYLOAD_ERROR)

            case TransferState.FIND_PAYLOAD:
                self._payload.append(byte)
                if len(self._payload) == self.payload_length:
                    self.state = TransferState.FIND_CRC

            case TransferState.FIND_CRC:
                expected = self._crc.calculate(self._payload, self.payload_length)
                if byte == expected:
                    unstuff(self._payload, self.overhead)
                    self.state = TransferState.FIND_STOP_BYTE
                else:
                    logger.debug(
                        f"CRC mismatch: expected 0x{expected:02X}, got 0x{byte:02X}, resyncing"
                    )
                    self._fail(TransferStatus.CRC_ERROR)

            case TransferState.FIND_STOP_BYTE:
                self.state = TransferState.FIND_START_BYTE
                if byte != STOP_BYTE:
                    logger.debug(f"Bad stop byte 0x{byte:02X}, resyncing")
                    self.status = TransferStatus.STOP_BYTE_ERROR
                    return None

                self.status = TransferStatus.NEW_DATA
                frame = Frame(
                    packet_id=self.packet_id,
                    overhead=self.overhead,
                    payload=bytes(self._payload),
                )
                logger.log(TRACE, f"Parsed {frame}")
                return frame

        return None

    def __repr__(self) -> str:
        return f"FrameParser(state={self.state.name}, status={self.status.name})"
