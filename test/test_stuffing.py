"""Unit tests for start-byte stuffing."""

import random

import pytest

from common.protocol import MAX_PAYLOAD_LENGTH, NO_OVERHEAD, START_BYTE
from common.stuffing import find_overhead, stuff, unstuff


def _roundtrip(payload: bytes) -> bytes:
    return bytes(unstuff(bytearray(stuff(payload)), find_overhead(payload)))


@pytest.mark.unit
class TestFindOverhead:
    """Tests for find_overhead."""

    def test_no_start_byte(self) -> None:
        assert find_overhead(b"\x01\x02\x03") == NO_OVERHEAD

    def test_first_occurrence(self) -> None:
        assert find_overhead(b"\x01\x7e\x02\x7e") == 1

    def test_at_index_zero(self) -> None:
        assert find_overhead(b"\x7e\x01\x02") == 0


@pytest.mark.unit
class TestStuff:
    """Tests for stuff."""

    def test_no_start_byte_unchanged(self) -> None:
        payload = b"\x00\x01\x81\xff"
        assert stuff(payload) == payload

    def test_single_occurrence_becomes_zero(self) -> None:
        assert stuff(b"\x7e\x01\x02") == b"\x00\x01\x02"

    def test_chain_offsets(self) -> None:
        assert stuff(b"\x01\x7e\x02\x7e\x03") == b"\x01\x02\x02\x00\x03"

    def test_adjacent_occurrences(self) -> None:
        assert stuff(b"\x7e\x7e\x7e") == b"\x01\x01\x00"

    def test_input_not_modified(self) -> None:
        payload = bytearray(b"\x7e\x01")
        stuff(payload)
        assert payload == b"\x7e\x01"

    def test_no_start_byte_left_from_chain(self) -> None:
        payload = bytes([START_BYTE if i % 3 == 0 else i for i in range(30)])
        stuffed = stuff(payload)
        assert START_BYTE not in stuffed


@pytest.mark.unit
class TestUnstuff:
    """Tests for unstuff."""

    def test_restores_chain(self) -> None:
        assert unstuff(bytearray(b"\x01\x02\x02\x00\x03"), 1) == b"\x01\x7e\x02\x7e\x03"

    def test_in_place(self) -> None:
        buffer = bytearray(b"\x00\x01\x02")
        result = unstuff(buffer, 0)
        assert result is buffer
        assert buffer == b"\x7e\x01\x02"

    def test_no_overhead_untouched(self) -> None:
        buffer = bytearray(b"\x00\x01\x02")
        unstuff(buffer, NO_OVERHEAD)
        assert buffer == b"\x00\x01\x02"

    def test_overhead_past_end_untouched(self) -> None:
        buffer = bytearray(b"\x00\x01\x02")
        unstuff(buffer, 3)
        assert buffer == b"\x00\x01\x02"

    def test_zero_offset_ends_chain(self) -> None:
        """The terminal zero is restored and nothing after it is touched."""
        buffer = bytearray(b"\x00\x00\x00")
        unstuff(buffer, 0)
        assert buffer == b"\x7e\x00\x00"

    def test_offset_leaving_buffer_ends_chain(self) -> None:
        buffer = bytearray(b"\x05\x01")
        unstuff(buffer, 0)
        assert buffer == b"\x7e\x01"


@pytest.mark.unit
class TestRoundtrip:
    """Stuffing followed by unstuffing reproduces the payload."""

    @pytest.mark.parametrize("length", [1, 2, 3, 126, 127, 128, 200, MAX_PAYLOAD_LENGTH])
    def test_every_single_placement(self, length: int) -> None:
        for position in range(length):
            payload = bytearray(b"\x11" * length)
            payload[position] = START_BYTE
            assert _roundtrip(bytes(payload)) == payload

    def test_all_start_bytes_every_length(self) -> None:
        for length in range(1, MAX_PAYLOAD_LENGTH + 1):
            payload = bytes([START_BYTE]) * length
            assert _roundtrip(payload) == payload

    def test_offset_equal_to_start_byte(self) -> None:
        """A chain distance of 0x7E is itself a 0x7E byte in the stuffed data."""
        payload = bytearray(MAX_PAYLOAD_LENGTH)
        payload[0] = START_BYTE
        payload[START_BYTE] = START_BYTE
        assert stuff(bytes(payload))[0] == START_BYTE
        assert _roundtrip(bytes(payload)) == payload

    def test_endpoints(self) -> None:
        payload = bytearray(range(1, MAX_PAYLOAD_LENGTH + 1))
        payload[0] = START_BYTE
        payload[-1] = START_BYTE
        assert _roundtrip(bytes(payload)) == payload

    def test_random_payloads(self) -> None:
        rng = random.Random(0x7E81)
        for _ in range(500):
            length = rng.randint(1, MAX_PAYLOAD_LENGTH)
            # Bias towards START_BYTE so chains are long
            payload = bytes(
                START_BYTE if rng.random() < 0.2 else rng.getrandbits(8)
                for _ in range(length)
            )
            assert _roundtrip(payload) == payload
