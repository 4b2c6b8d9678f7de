"""pytest configuration and fixtures for serial-transfer tests.

Provides:
- MockSerialPort: In-memory link with failure injection
- Fixtures for a port, a raw 3-byte codec and a session over them
- Markers for unit vs integration tests
"""

import io
import threading

import pytest
import serial

from common.record import RawCodec
from session.transfer import SerialTransfer


class MockSerialPort:
    """Mock serial port for unit testing.

    Uses a single buffer shared between read and write operations.
    Data written to the port can be read back immediately, so a session
    sending over it receives its own frames (loopback).

    ``fail_writes`` / ``fail_flush`` / ``fail_reads`` make the matching
    operation raise ``serial.SerialException``. ``short_reads`` makes
    ``read`` return nothing even though ``in_waiting`` reports data.
    """

    def __init__(self) -> None:
        self._buffer = io.BytesIO()
        self._read_pos = 0
        self._lock = threading.Lock()
        self.flush_count = 0
        self.fail_writes = False
        self.fail_flush = False
        self.fail_reads = False
        self.short_reads = False

    def write(self, data: bytes) -> int:
        if self.fail_writes:
            raise serial.SerialException("write failed")
        with self._lock:
            pos = self._buffer.tell()
            self._buffer.seek(0, 2)  # Seek to end
            written = self._buffer.write(data)
            self._buffer.seek(pos)
            return written

    def flush(self) -> None:
        if self.fail_flush:
            raise serial.SerialException("flush failed")
        self.flush_count += 1

    def read(self, size: int = 1, /) -> bytes:
        if self.short_reads:
            return b""
        with self._lock:
            self._buffer.seek(self._read_pos)
            data = self._buffer.read(size)
            self._read_pos = self._buffer.tell()
            return data

    @property
    def in_waiting(self) -> int:
        if self.fail_reads:
            raise serial.SerialException("read failed")
        with self._lock:
            end_pos = self._buffer.seek(0, 2)
            waiting = end_pos - self._read_pos
            return max(0, waiting)

    def inject(self, data: bytes) -> None:
        """Inject data into the buffer as if received from peer."""
        self.write(data)

    def written(self) -> bytes:
        """Return everything written to or injected into the port."""
        with self._lock:
            return self._buffer.getvalue()


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test (uses pyserial loop://)")


@pytest.fixture
def port() -> MockSerialPort:
    return MockSerialPort()


@pytest.fixture
def raw3() -> RawCodec:
    """Codec for 3-byte raw records."""
    return RawCodec(3)


@pytest.fixture
def transfer(port: MockSerialPort, raw3: RawCodec) -> SerialTransfer:
    return SerialTransfer(port, raw3)


@pytest.fixture
def port_factory() -> type[MockSerialPort]:
    """Factory for tests that need several independent ports."""
    return MockSerialPort
