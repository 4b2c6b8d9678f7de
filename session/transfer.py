"""Transfer session for serial-transfer.

Contains:
- TransferConfig: Session options
- SerialTransfer: Sends records as frames and polls the link for records
"""

import logging
from dataclasses import dataclass
from typing import Any

from common.crc import CRC
from common.framing import build_frame
from common.protocol import (
    CRC_POLYNOMIAL,
    DEFAULT_PACKET_ID,
    LOG_PROGRESS_INTERVAL,
    MAX_PAYLOAD_LENGTH,
    MIN_PAYLOAD_LENGTH,
    TRACE,
    Link,
    TransferStatus,
)
from common.record import PayloadError, RecordCodec
from session.parser import FrameParser
from session.result import TransferStats

logger = logging.getLogger(__name__)


@dataclass
class TransferConfig:
    """Options for a transfer session."""

    polynomial: int = CRC_POLYNOMIAL
    flush_on_send: bool = True


class SerialTransfer:
    """Exchanges fixed-size records over a byte link.

    ``send`` writes one complete frame per record. ``poll`` drains whatever
    the link has ready and returns as soon as a record is decoded or the link
    runs dry; it never waits for more bytes. Link exceptions propagate
    unchanged from both.

    Not safe for concurrent use from multiple threads.

    Usage::

        transfer = SerialTransfer(open_serial("/dev/ttyUSB0"), StructCodec("<hh"))
        transfer.send((10, -4))
        while (record := transfer.poll()) is None:
            ...
    """

    def __init__(
        self,
        link: Link,
        codec: RecordCodec,
        config: TransferConfig | None = None,
    ) -> None:
        if not MIN_PAYLOAD_LENGTH <= codec.size <= MAX_PAYLOAD_LENGTH:
            raise ValueError(
                f"Codec size must be {MIN_PAYLOAD_LENGTH}-{MAX_PAYLOAD_LENGTH} bytes, got {codec.size}"
            )
        self._link = link
        self._codec = codec
        self._config = config if config is not None else TransferConfig()
        self._crc = CRC(self._config.polynomial)
        self._parser = FrameParser(self._crc)
        self._status = TransferStatus.NO_DATA
        self._last_error: TransferStatus | None = None
        self._last_packet_id: int | None = None
        self._stats = TransferStats()

    @property
    def status(self) -> TransferStatus:
        """Outcome of the last byte processed, or NO_DATA after an empty poll."""
        return self._status

    @property
    def last_error(self) -> TransferStatus | None:
        """Most recent framing error seen during the last poll, if any."""
        return self._last_error

    @property
    def last_packet_id(self) -> int | None:
        """Identifier byte of the most recently delivered frame."""
        return self._last_packet_id

    @property
    def stats(self) -> TransferStats:
        return self._stats

    @property
    def codec(self) -> RecordCodec:
        return self._codec

    def reset(self) -> None:
        """Discard any partially received frame."""
        self._parser.reset()
        self._status = TransferStatus.NO_DATA
        self._last_error = None

    def send(self, record: Any) -> int:
        """Frame and write one record. Returns bytes written.

        Raises:
            PayloadError: If the record does not pack to exactly
                ``codec.size`` bytes.
        """
        raw = self._codec.pack(record)
        if len(raw) != self._codec.size:
            raise PayloadError(f"Codec produced {len(raw)} bytes, expected {self._codec.size}")

        frame = build_frame(raw, self._crc, DEFAULT_PACKET_ID)
        written = self._link.write(frame)
        if self._config.flush_on_send:
            self._link.flush()

        self._stats.sent += 1
        self._stats.bytes_sent += len(frame)
        logger.log(TRACE, f"Sent frame {self._stats.sent} ({len(frame)} bytes)")
        return written if written is not None else len(frame)

    def poll(self) -> Any | None:
        """Process available link bytes. Returns a record or None.

        Stops at the first decoded record, leaving any further bytes on the
        link for the next call. Errors met along the way are counted in
        ``stats`` and the latest one is kept in ``last_error``.
        """
        self._last_error = None
        if self._link.in_waiting <= 0:
            self._status = TransferStatus.NO_DATA
            return None

        # Overwritten by the first byte read
        self._status = TransferStatus.NO_DATA
        while self._link.in_waiting > 0:
            data = self._link.read(1)
            if not data:
                break
            self._stats.bytes_received += 1

            frame = self._parser.feed(data[0])
            self._status = self._parser.status

            if self._status.is_error:
                self._last_error = self._status
                self._stats.record_error(self._status)
                continue
            if frame is None:
                continue

            try:
                record = self._codec.unpack(frame.payload)
            except PayloadError as e:
                logger.debug(f"Dropping frame: {e}")
                self._status = TransferStatus.PAYLOAD_ERROR
                self._last_error = self._status
                self._stats.record_error(self._status)
                continue

            self._last_packet_id = frame.packet_id
            self._stats.received += 1
            if self._stats.received % LOG_PROGRESS_INTERVAL == 0:
                logger.debug(
                    f"Received {self._stats.received} records "
                    f"({self._stats.errors} frames dropped)"
                )
            return record

        return None

    def __repr__(self) -> str:
        return f"SerialTransfer(codec={self._codec!r}, status={self._status.name})"
