"""Frame assembly for serial-transfer.

Frames carry one stuffed payload between fixed markers:
  [START 0x7E][ID][OVERHEAD][LENGTH][stuffed payload][CRC][STOP 0x81]

All header fields are single unsigned bytes. LENGTH counts stuffed payload
bytes and must fall in [1, 253]. CRC covers the stuffed payload only.
"""

from dataclasses import dataclass

from common.crc import CRC
from common.protocol import (
    DEFAULT_PACKET_ID,
    MAX_PAYLOAD_LENGTH,
    MIN_PAYLOAD_LENGTH,
    START_BYTE,
    STOP_BYTE,
)
from common.stuffing import find_overhead, stuff

# START + ID + OVERHEAD + LENGTH
HEADER_SIZE = 4
# CRC + STOP
TRAILER_SIZE = 2
MAX_FRAME_SIZE = HEADER_SIZE + MAX_PAYLOAD_LENGTH + TRAILER_SIZE


@dataclass
class Frame:
    """A validated inbound frame with its payload already unstuffed."""

    packet_id: int
    overhead: int
    payload: bytes

    def __repr__(self) -> str:
        return (
            f"Frame(packet_id={self.packet_id}, overhead={self.overhead}, "
            f"payload={self.payload.hex(' ')})"
        )


def validate_length(length: int) -> bool:
    """Return True if ``length`` is a legal payload length byte."""
    return MIN_PAYLOAD_LENGTH <= length <= MAX_PAYLOAD_LENGTH


def build_frame(payload: bytes, crc: CRC, packet_id: int = DEFAULT_PACKET_ID) -> bytes:
    """Stuff ``payload`` and wrap it in a complete frame.

    Raises:
        ValueError: If the payload length is outside [1, 253] or the
            packet ID does not fit in a byte.
    """
    if not validate_length(len(payload)):
        raise ValueError(
            f"Payload length must be {MIN_PAYLOAD_LENGTH}-{MAX_PAYLOAD_LENGTH}, got {len(payload)}"
        )
    if not 0 <= packet_id <= 0xFF:
        raise ValueError(f"Packet ID must be 0-255, got {packet_id}")

    overhead = find_overhead(payload)
    stuffed = stuff(payload)
    checksum = crc.calculate(stuffed)

    header = bytes([START_BYTE, packet_id, overhead, len(stuffed)])
    return header + stuffed + bytes([checksum, STOP_BYTE])
