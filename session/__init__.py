"""Transfer session package for serial-transfer.

This package turns link bytes into records and records into frames:
- parser: Resumable byte-at-a-time frame state machine
- transfer: SerialTransfer session (send/poll) and its config
- result: Traffic and error counters
- report: Printable session summary
"""

from session.parser import FrameParser
from session.report import TransferReport
from session.result import TransferStats
from session.transfer import SerialTransfer, TransferConfig

__all__ = [
    "FrameParser",
    "SerialTransfer",
    "TransferConfig",
    "TransferReport",
    "TransferStats",
]
