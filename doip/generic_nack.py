"""Generic DoIP header negative acknowledgement.

Sent by a DoIP node that could not process a header. Payload:
  [1-byte nack code]
"""

from dataclasses import dataclass
from enum import IntEnum

from doip import wire
from doip.payload import Payload, check_uint, read_fixed
from doip.payload_type import PayloadType
from doip.protocol import Reader, Reserved, Writer

GENERIC_NACK_SIZE = wire.UINT8_SIZE


class NegativeAckCode(IntEnum):
    """Reason why a header was refused. Codes 0x05-0xFF are reserved."""

    INCORRECT_PATTERN_FORMAT = 0x00
    UNKNOWN_PAYLOAD_TYPE = 0x01
    MESSAGE_TOO_LARGE = 0x02
    OUT_OF_MEMORY = 0x03
    INVALID_PAYLOAD_LENGTH = 0x04

    @classmethod
    def from_byte(cls, value: int) -> "NegativeAckCode | Reserved":
        try:
            return cls(value)
        except ValueError:
            return Reserved(value)


@dataclass
class GenericHeaderNack(Payload):
    """Generic DoIP header negative acknowledgement."""

    PAYLOAD_TYPE = PayloadType.GENERIC_HEADER_NACK

    nack_code: NegativeAckCode | Reserved

    def __post_init__(self) -> None:
        check_uint("nack_code", self.nack_code.value, GENERIC_NACK_SIZE)

    @classmethod
    def zeroed(cls) -> "GenericHeaderNack":
        return cls(nack_code=NegativeAckCode.INCORRECT_PATTERN_FORMAT)

    def length(self) -> int:
        return GENERIC_NACK_SIZE

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        data = read_fixed(reader, payload_length, GENERIC_NACK_SIZE)
        self.nack_code = NegativeAckCode.from_byte(data[0])

    def write(self, writer: Writer) -> None:
        wire.write_all(writer, bytes([self.nack_code.value]))
