"""Diagnostic power mode information request/response messages."""

from dataclasses import dataclass

from doip import wire
from doip.payload import EmptyPayload, Payload, check_uint, read_fixed
from doip.payload_type import PayloadType
from doip.protocol import Reader, Writer

POWER_MODE_RESPONSE_SIZE = wire.UINT8_SIZE


@dataclass
class PowerModeRequest(EmptyPayload):
    """Power mode request message."""

    PAYLOAD_TYPE = PayloadType.POWER_MODE_REQUEST


@dataclass
class PowerModeResponse(Payload):
    """Power mode response message."""

    PAYLOAD_TYPE = PayloadType.POWER_MODE_RESPONSE

    power_mode: int

    def __post_init__(self) -> None:
        check_uint("power_mode", self.power_mode, POWER_MODE_RESPONSE_SIZE)

    @classmethod
    def zeroed(cls) -> "PowerModeResponse":
        return cls(power_mode=0)

    def length(self) -> int:
        return POWER_MODE_RESPONSE_SIZE

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        self.power_mode = read_fixed(reader, payload_length, POWER_MODE_RESPONSE_SIZE)[0]

    def write(self, writer: Writer) -> None:
        wire.write_all(writer, bytes([self.power_mode]))
