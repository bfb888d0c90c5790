"""Alive check request/response messages.

The alive check request is sent by the diagnostic entity to a tester to
verify the tester is still connected. The tester answers with its logical
address:
  response: [2-byte source address]
"""

from dataclasses import dataclass

from doip import wire
from doip.payload import EmptyPayload, Payload, check_uint, read_fixed
from doip.payload_type import PayloadType
from doip.protocol import LOGICAL_ADDRESS_SIZE, LogicalAddress, Reader, Writer

ALIVE_CHECK_RESPONSE_SIZE = LOGICAL_ADDRESS_SIZE


@dataclass
class AliveCheckRequest(EmptyPayload):
    """Alive check request message."""

    PAYLOAD_TYPE = PayloadType.ALIVE_CHECK_REQUEST


@dataclass
class AliveCheckResponse(Payload):
    """Alive check response message."""

    PAYLOAD_TYPE = PayloadType.ALIVE_CHECK_RESPONSE

    source_address: LogicalAddress

    def __post_init__(self) -> None:
        check_uint("source_address", self.source_address, LOGICAL_ADDRESS_SIZE)

    @classmethod
    def zeroed(cls) -> "AliveCheckResponse":
        return cls(source_address=0)

    def length(self) -> int:
        return ALIVE_CHECK_RESPONSE_SIZE

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        data = read_fixed(reader, payload_length, ALIVE_CHECK_RESPONSE_SIZE)
        self.source_address = wire.uint16_from_bytes(data)

    def write(self, writer: Writer) -> None:
        wire.write_all(writer, wire.uint16_to_bytes(self.source_address))
