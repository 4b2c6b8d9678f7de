"""Transfer statistics for serial-transfer.

Contains:
- TransferStats: Counters accumulated by a SerialTransfer session
"""

from dataclasses import dataclass

from common.protocol import TransferStatus


@dataclass
class TransferStats:
    """Counters accumulated over the lifetime of a session.

    Attributes:
        sent: Number of frames written to the link.
        received: Number of records delivered to the caller.
        bytes_sent: Total frame bytes written.
        bytes_received: Total bytes read from the link (noise included).
        crc_errors: Frames dropped on checksum mismatch.
        payload_errors: Frames dropped on a bad length byte or record size.
        stop_byte_errors: Frames dropped on a bad stop byte.
    """

    sent: int = 0
    received: int = 0
    bytes_sent: int = 0
    bytes_received: int = 0
    crc_errors: int = 0
    payload_errors: int = 0
    stop_byte_errors: int = 0

    def record_error(self, status: TransferStatus) -> None:
        """Count a parser failure status."""
        match status:
            case TransferStatus.CRC_ERROR:
                self.crc_errors += 1
            case TransferStatus.PAYLOAD_ERROR:
                self.payload_errors += 1
            case TransferStatus.STOP_BYTE_ERROR:
                self.stop_byte_errors += 1
            case _:
                raise ValueError(f"Not an error status: {status.name}")

    @property
    def errors(self) -> int:
        """Total frames dropped for any reason."""
        return self.crc_errors + self.payload_errors + self.stop_byte_errors

    @property
    def error_rate(self) -> float:
        """Return dropped frames as a percentage (0-100) of all frames seen."""
        total = self.received + self.errors
        if total == 0:
            return 0.0
        return (self.errors / total) * 100
