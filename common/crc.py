"""Table-driven 8-bit CRC for serial-transfer.

Contains:
- build_table: Precompute the 256-entry lookup table for a polynomial
- CRC: Checksum calculator holding one immutable table
"""

from collections.abc import Sequence

from common.protocol import CRC_POLYNOMIAL

TABLE_SIZE = 256


def build_table(polynomial: int) -> tuple[int, ...]:
    """Build the CRC-8 lookup table for a generator polynomial.

    Each entry is the byte value shifted through eight rounds, XORing in the
    polynomial whenever the top bit falls off. All arithmetic is truncated to
    8 bits.
    """
    polynomial &= 0xFF
    table = []
    for value in range(TABLE_SIZE):
        crc = value
        for _ in range(8):
            if crc & 0x80:
                crc = ((crc << 1) ^ polynomial) & 0xFF
            else:
                crc = (crc << 1) & 0xFF
        table.append(crc)
    return tuple(table)


class CRC:
    """8-bit CRC calculator.

    Usage::

        crc = CRC(0x9B)
        checksum = crc.calculate(b"payload")
    """

    def __init__(self, polynomial: int = CRC_POLYNOMIAL) -> None:
        self._polynomial = polynomial & 0xFF
        self._table = build_table(self._polynomial)

    @property
    def polynomial(self) -> int:
        return self._polynomial

    @property
    def table(self) -> tuple[int, ...]:
        return self._table

    def calculate(self, data: Sequence[int], length: int | None = None) -> int:
        """Calculate the checksum over the first ``length`` bytes of ``data``.

        ``length`` defaults to ``len(data)``. A ``length`` past the end of
        ``data`` stops at the end of ``data`` without raising, so this must
        not be used to check that a buffer holds ``length`` bytes.
        """
        if length is None:
            length = len(data)

        crc = 0
        for byte in data[:length]:
            crc = self._table[crc ^ byte]
        return crc

    def __repr__(self) -> str:
        return f"CRC(polynomial=0x{self._polynomial:02X})"
