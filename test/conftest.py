"""pytest configuration and fixtures for DoIP codec tests.

Provides:
- ConnectedPorts: In-memory tester <-> diagnostic entity connection
- Markers for unit vs integration tests
"""

import threading

import pytest


class _Channel:
    """One direction of a connection: bytes written by one end, read by the other."""

    def __init__(self) -> None:
        self.data = bytearray()
        self.lock = threading.Lock()


class MockPort:
    """One end of a ConnectedPorts pair, with the read/write surface of a socket file."""

    def __init__(self, rx: _Channel, tx: _Channel) -> None:
        self._rx = rx
        self._tx = tx

    def write(self, data: bytes, /) -> int:
        with self._tx.lock:
            self._tx.data += data
        return len(data)

    def read(self, size: int = 1, /) -> bytes:
        # Like a timed-out serial read: returns what is there, possibly short
        with self._rx.lock:
            data = bytes(self._rx.data[:size])
            del self._rx.data[:size]
        return data

    @property
    def in_waiting(self) -> int:
        with self._rx.lock:
            return len(self._rx.data)


class ConnectedPorts:
    """A tester and a diagnostic entity connected back to back.

    Whatever one end writes, the other end reads.
    """

    def __init__(self) -> None:
        to_entity = _Channel()
        to_tester = _Channel()
        self.tester = MockPort(rx=to_tester, tx=to_entity)
        self.entity = MockPort(rx=to_entity, tx=to_tester)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as using pyserial URL handlers")


@pytest.fixture
def ports() -> ConnectedPorts:
    return ConnectedPorts()
