"""DoIP entity status request/response messages.

response: [1-byte node type][1-byte max open sockets][1-byte current open sockets]
          [4-byte max data size]
"""

from dataclasses import dataclass

from doip import wire
from doip.payload import EmptyPayload, Payload, check_uint, read_fixed
from doip.payload_type import PayloadType
from doip.protocol import Reader, Writer

ENTITY_STATUS_RESPONSE_SIZE = 3 + wire.UINT32_SIZE


@dataclass
class EntityStatusRequest(EmptyPayload):
    """Entity status request message."""

    PAYLOAD_TYPE = PayloadType.ENTITY_STATUS_REQUEST


@dataclass
class EntityStatusResponse(Payload):
    """Entity status response.

    Tells the tester about the limits of the diagnostic entity.
    """

    PAYLOAD_TYPE = PayloadType.ENTITY_STATUS_RESPONSE

    node_type: int
    max_open_sockets: int
    cur_open_sockets: int
    max_data_size: int  # Largest DoIP message the entity accepts

    def __post_init__(self) -> None:
        check_uint("node_type", self.node_type, wire.UINT8_SIZE)
        check_uint("max_open_sockets", self.max_open_sockets, wire.UINT8_SIZE)
        check_uint("cur_open_sockets", self.cur_open_sockets, wire.UINT8_SIZE)
        check_uint("max_data_size", self.max_data_size, wire.UINT32_SIZE)

    @classmethod
    def zeroed(cls) -> "EntityStatusResponse":
        return cls(node_type=0, max_open_sockets=0, cur_open_sockets=0, max_data_size=0)

    def length(self) -> int:
        return ENTITY_STATUS_RESPONSE_SIZE

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        data = read_fixed(reader, payload_length, ENTITY_STATUS_RESPONSE_SIZE)
        self.node_type = data[0]
        self.max_open_sockets = data[1]
        self.cur_open_sockets = data[2]
        self.max_data_size = wire.uint32_from_bytes(data[3:7])

    def write(self, writer: Writer) -> None:
        wire.write_all(
            writer,
            bytes([self.node_type, self.max_open_sockets, self.cur_open_sockets])
            + wire.uint32_to_bytes(self.max_data_size),
        )
