"""Protocol definitions for the DoIP codec.

Contains:
- ProtocolVersion enum for the header's version byte
- Reserved / VmSpecific carriers for unassigned wire values
- Reader / Writer / Port Protocols for type checking
- Wire constants and environment configuration
- Logging configuration
"""

import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

# TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class ProtocolVersion(IntEnum):
    """DoIP protocol versions carried in the first header byte."""

    ISO_DIS = 0x01
    ISO_2012 = 0x02
    ISO_2019 = 0x03
    VEHICLE_IDENTIFICATION_REQUEST = 0xFF


def parse_protocol_version(text: str) -> int:
    """Parse a protocol version byte: "0x02", "02" and "2" are all accepted."""
    try:
        value = int(text, 0)
    except ValueError:
        try:
            value = int(text, 10)
        except ValueError:
            raise ValueError(f"Invalid DoIP protocol version: {text!r}") from None
    if not 0 <= value <= 0xFF:
        raise ValueError(f"DoIP protocol version out of range 0..255: {text!r}")
    return value


# Protocol version written by the header builder (configurable via envvar)
DEFAULT_PROTOCOL_VERSION = parse_protocol_version(
    os.environ.get("DOIP_PROTOCOL_VERSION", "0x02")
)

# Well-known DoIP ports
TCP_DATA_PORT = 13400
UDP_DISCOVERY_PORT = 13400

# Field widths in bytes
LOGICAL_ADDRESS_SIZE = 2
VIN_SIZE = 17
EID_SIZE = 6
GID_SIZE = 6
RESERVED_SIZE = 4
OEM_SIZE = 4

# A DoIP logical address, for a tester or a diagnostic entity
LogicalAddress = int


@dataclass(frozen=True)
class Reserved:
    """A wire value reserved by ISO 13400, kept exactly as received."""

    value: int


@dataclass(frozen=True)
class VmSpecific:
    """A wire value reserved for vehicle manufacturer use, kept as received."""

    value: int


class Reader(Protocol):
    """Protocol for objects that can read bytes."""

    def read(self, size: int = ..., /) -> bytes: ...


class Writer(Protocol):
    """Protocol for objects that can write bytes."""

    def write(self, data: bytes, /) -> int | None: ...


class Port(Reader, Writer, Protocol):
    """Protocol for a bidirectional byte stream (socket file, serial port)."""

    pass
