"""Transfer reporting for serial-transfer.

Contains:
- TransferReport: Summary of a session's traffic and framing errors
"""

from dataclasses import dataclass

from common.report import Report
from session.result import TransferStats


@dataclass
class TransferReport(Report):
    """Report of a session's accumulated statistics."""

    stats: TransferStats

    def print(self) -> None:
        """Print the transfer report."""
        s = self.stats

        status = "OK" if self.success() else "ERRORS"
        print(
            f"Transfer: {status} ({s.sent} sent, {s.received} received, "
            f"{s.errors} dropped)"
        )
        print(f"Bytes: {s.bytes_sent:,} sent, {s.bytes_received:,} received")

        if s.errors:
            print(
                f"Dropped: crc={s.crc_errors} payload={s.payload_errors} "
                f"stop={s.stop_byte_errors} ({s.error_rate:.1f}%)"
            )

    def success(self) -> bool:
        """Return True if no frames were dropped."""
        return self.stats.errors == 0
