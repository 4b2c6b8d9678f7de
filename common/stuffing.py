"""Start-byte stuffing for serial-transfer payloads.

Every START_BYTE inside a payload is replaced by the distance to the next
START_BYTE, forming a chain. The index of the first occurrence travels in the
frame header as the overhead byte; the last link in the chain holds 0:

    raw:      01 7E 02 7E 03     overhead = 1
    stuffed:  01 02 02 00 03

Contains:
- find_overhead: Overhead byte for a raw payload
- stuff: Replace start bytes with the offset chain
- unstuff: Restore start bytes by walking the chain (in place)
"""

from common.protocol import NO_OVERHEAD, START_BYTE


def find_overhead(payload: bytes) -> int:
    """Return the index of the first START_BYTE, or NO_OVERHEAD if absent."""
    index = payload.find(START_BYTE)
    if index < 0 or index >= NO_OVERHEAD:
        return NO_OVERHEAD
    return index


def stuff(payload: bytes) -> bytes:
    """Return ``payload`` with every START_BYTE replaced by its chain offset."""
    stuffed = bytearray(payload)
    next_index = None

    for index in range(len(stuffed) - 1, -1, -1):
        if stuffed[index] != START_BYTE:
            continue
        stuffed[index] = 0 if next_index is None else (next_index - index) & 0xFF
        next_index = index

    return bytes(stuffed)


def unstuff(payload: bytearray, overhead: int) -> bytearray:
    """Restore START_BYTE values in ``payload`` starting at ``overhead``.

    Modifies ``payload`` in place and returns it. An ``overhead`` outside the
    buffer (NO_OVERHEAD included) leaves it untouched. The walk ends on a zero
    offset or once the next index falls outside the buffer.
    """
    index = overhead
    while 0 <= index < len(payload):
        offset = payload[index]
        payload[index] = START_BYTE
        if offset == 0:
            break
        index += offset
    return payload
