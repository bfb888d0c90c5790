"""DoIP generic header encoding/decoding.

Every DoIP message starts with a fixed 8-byte header:
  [1-byte protocol version][1-byte inverse protocol version]
  [2-byte payload type][4-byte payload length]

The inverse version byte is set by the builder but not checked on read, so a
received header may carry any pair of version bytes.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from doip import wire
from doip.payload_type import AnyPayloadType, payload_type_from_code, payload_type_to_code
from doip.protocol import DEFAULT_PROTOCOL_VERSION, Reader, Writer

if TYPE_CHECKING:
    from doip.payload import Payload

HEADER_LENGTH = 8


def inverse_version(protocol_version: int) -> int:
    """Return the bitwise complement of a protocol version byte."""
    return ~protocol_version & 0xFF


@dataclass
class Header:
    """Generic DoIP header. Always precedes a payload of payload_length bytes."""

    protocol_version: int
    inverse_protocol_version: int
    payload_type: AnyPayloadType
    payload_length: int

    @classmethod
    def new(
        cls,
        payload_type: AnyPayloadType,
        payload_length: int,
        protocol_version: int = DEFAULT_PROTOCOL_VERSION,
    ) -> "Header":
        """Build a header, deriving the inverse version byte from protocol_version."""
        version = int(protocol_version)
        return cls(
            protocol_version=version,
            inverse_protocol_version=inverse_version(version),
            payload_type=payload_type,
            payload_length=payload_length,
        )

    @classmethod
    def for_payload(
        cls, payload: "Payload", protocol_version: int = DEFAULT_PROTOCOL_VERSION
    ) -> "Header":
        """Build the header announcing payload, from its type and reported length."""
        return cls.new(payload.payload_type(), payload.length(), protocol_version)

    @classmethod
    def read(cls, reader: Reader) -> "Header":
        """Read a header. Raises TransportError if fewer than 8 bytes are available."""
        return cls.from_bytes(wire.read_exact(reader, HEADER_LENGTH))

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> "Header":
        """Decode a header from the first 8 bytes of data."""
        if len(data) < HEADER_LENGTH:
            raise ValueError(f"Header needs {HEADER_LENGTH} bytes, got {len(data)}")
        return cls(
            protocol_version=data[0],
            inverse_protocol_version=data[1],
            payload_type=payload_type_from_code(wire.uint16_from_bytes(data[2:4])),
            payload_length=wire.uint32_from_bytes(data[4:8]),
        )

    def to_bytes(self) -> bytes:
        return (
            bytes([self.protocol_version, self.inverse_protocol_version])
            + wire.uint16_to_bytes(payload_type_to_code(self.payload_type))
            + wire.uint32_to_bytes(self.payload_length)
        )

    def write(self, writer: Writer) -> None:
        wire.write_all(writer, self.to_bytes())
