"""Routing activation request/response messages.

The routing activation request is usually the first message a tester sends
on a TCP connection: it registers the tester's logical address with the
diagnostic entity before diagnostic messages can flow.

  request:  [2-byte source address][1-byte activation type][4 reserved]
            [4-byte OEM specific, optional]
  response: [2-byte tester address][2-byte entity address][1-byte response code]
            [4 reserved][4-byte OEM specific, optional]

The optional OEM field has no presence flag: it exists when the payload
length is the longer of the two accepted lengths.
"""

from dataclasses import dataclass
from enum import IntEnum

from doip import wire
from doip.errors import (
    PayloadLengthError,
    UnknownActivationTypeError,
    UnknownRoutingActivationResponseCodeError,
)
from doip.payload import Payload, check_uint
from doip.payload_type import PayloadType
from doip.protocol import (
    LOGICAL_ADDRESS_SIZE,
    OEM_SIZE,
    RESERVED_SIZE,
    LogicalAddress,
    Reader,
    Writer,
)

ROUTING_ACTIVATION_REQUEST_SIZE = LOGICAL_ADDRESS_SIZE + 1 + RESERVED_SIZE
ROUTING_ACTIVATION_REQUEST_OEM_SIZE = ROUTING_ACTIVATION_REQUEST_SIZE + OEM_SIZE
ROUTING_ACTIVATION_RESPONSE_SIZE = 2 * LOGICAL_ADDRESS_SIZE + 1 + RESERVED_SIZE
ROUTING_ACTIVATION_RESPONSE_OEM_SIZE = ROUTING_ACTIVATION_RESPONSE_SIZE + OEM_SIZE


class ActivationType(IntEnum):
    """Activation type of a routing activation request."""

    DEFAULT = 0x00
    WWH_OBD = 0x01
    CENTRAL_SECURITY = 0x02

    @classmethod
    def from_byte(cls, value: int) -> "ActivationType":
        """Raises UnknownActivationTypeError for unassigned values."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownActivationTypeError(value) from None


class RoutingActivationResponseCode(IntEnum):
    """Answer of the diagnostic entity to a routing activation request."""

    DENIED_UNKNOWN_SOURCE_ADDRESS = 0x00
    DENIED_ALL_SOCKETS_REGISTERED_AND_ACTIVE = 0x01
    DENIED_SOURCE_ADDRESS_ALREADY_ACTIVATED = 0x02
    DENIED_SOURCE_ADDRESS_ALREADY_REGISTERED = 0x03
    DENIED_MISSING_AUTHENTICATION = 0x04
    DENIED_REJECTED_CONFIRMATION = 0x05
    DENIED_UNSUPPORTED_ACTIVATION_TYPE = 0x06
    DENIED_TLS_REQUIRED = 0x07
    SUCCESSFULLY_ACTIVATED = 0x10
    SUCCESSFULLY_ACTIVATED_CONFIRMATION_REQUIRED = 0x11

    @classmethod
    def from_byte(cls, value: int) -> "RoutingActivationResponseCode":
        """Raises UnknownRoutingActivationResponseCodeError for unassigned values."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownRoutingActivationResponseCodeError(value) from None

    @property
    def activated(self) -> bool:
        """True if routing is active after this response."""
        return self in (
            RoutingActivationResponseCode.SUCCESSFULLY_ACTIVATED,
            RoutingActivationResponseCode.SUCCESSFULLY_ACTIVATED_CONFIRMATION_REQUIRED,
        )


def _has_oem_field(payload_length: int, default_size: int, oem_size: int) -> bool:
    """Infer presence of the OEM field from the payload length."""
    if payload_length == default_size:
        return False
    if payload_length == oem_size:
        return True
    raise PayloadLengthError(payload_length, default_size)


def _check_width(name: str, value: bytes | None, size: int) -> None:
    if value is not None and len(value) != size:
        raise ValueError(f"{name} must be {size} bytes, got {len(value)}")


@dataclass
class RoutingActivationRequest(Payload):
    """Routing activation request message."""

    PAYLOAD_TYPE = PayloadType.ROUTING_ACTIVATION_REQUEST

    source_address: LogicalAddress
    activation_type: ActivationType = ActivationType.DEFAULT
    reserved: bytes = bytes(RESERVED_SIZE)
    reserved_oem: bytes | None = None

    def __post_init__(self) -> None:
        """Validate field ranges and widths."""
        check_uint("source_address", self.source_address, LOGICAL_ADDRESS_SIZE)
        check_uint("activation_type", int(self.activation_type), wire.UINT8_SIZE)
        _check_width("reserved", self.reserved, RESERVED_SIZE)
        _check_width("reserved_oem", self.reserved_oem, OEM_SIZE)

    @classmethod
    def zeroed(cls) -> "RoutingActivationRequest":
        return cls(source_address=0)

    def length(self) -> int:
        if self.reserved_oem is None:
            return ROUTING_ACTIVATION_REQUEST_SIZE
        return ROUTING_ACTIVATION_REQUEST_OEM_SIZE

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        has_oem = _has_oem_field(
            payload_length, ROUTING_ACTIVATION_REQUEST_SIZE, ROUTING_ACTIVATION_REQUEST_OEM_SIZE
        )
        self.source_address = wire.read_u16(reader)
        self.activation_type = ActivationType.from_byte(wire.read_u8(reader))
        self.reserved = wire.read_exact(reader, RESERVED_SIZE)
        self.reserved_oem = wire.read_exact(reader, OEM_SIZE) if has_oem else None

    def write(self, writer: Writer) -> None:
        data = (
            wire.uint16_to_bytes(self.source_address)
            + bytes([self.activation_type])
            + self.reserved
        )
        if self.reserved_oem is not None:
            data += self.reserved_oem
        wire.write_all(writer, data)


@dataclass
class RoutingActivationResponse(Payload):
    """Routing activation response message.

    Reply of the diagnostic entity to a RoutingActivationRequest; the tester
    hopes for SUCCESSFULLY_ACTIVATED.
    """

    PAYLOAD_TYPE = PayloadType.ROUTING_ACTIVATION_RESPONSE

    logical_address_tester: LogicalAddress
    logical_address_of_doip_entity: LogicalAddress
    routing_activation_response_code: RoutingActivationResponseCode
    reserved_oem: bytes = bytes(RESERVED_SIZE)
    oem_specific: bytes | None = None

    def __post_init__(self) -> None:
        """Validate field ranges and widths."""
        check_uint("logical_address_tester", self.logical_address_tester, LOGICAL_ADDRESS_SIZE)
        check_uint(
            "logical_address_of_doip_entity",
            self.logical_address_of_doip_entity,
            LOGICAL_ADDRESS_SIZE,
        )
        check_uint(
            "routing_activation_response_code",
            int(self.routing_activation_response_code),
            wire.UINT8_SIZE,
        )
        _check_width("reserved_oem", self.reserved_oem, RESERVED_SIZE)
        _check_width("oem_specific", self.oem_specific, OEM_SIZE)

    @classmethod
    def zeroed(cls) -> "RoutingActivationResponse":
        return cls(
            logical_address_tester=0,
            logical_address_of_doip_entity=0,
            routing_activation_response_code=(
                RoutingActivationResponseCode.DENIED_UNKNOWN_SOURCE_ADDRESS
            ),
        )

    def length(self) -> int:
        if self.oem_specific is None:
            return ROUTING_ACTIVATION_RESPONSE_SIZE
        return ROUTING_ACTIVATION_RESPONSE_OEM_SIZE

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        has_oem = _has_oem_field(
            payload_length, ROUTING_ACTIVATION_RESPONSE_SIZE, ROUTING_ACTIVATION_RESPONSE_OEM_SIZE
        )
        self.logical_address_tester = wire.read_u16(reader)
        self.logical_address_of_doip_entity = wire.read_u16(reader)
        self.routing_activation_response_code = RoutingActivationResponseCode.from_byte(
            wire.read_u8(reader)
        )
        self.reserved_oem = wire.read_exact(reader, RESERVED_SIZE)
        self.oem_specific = wire.read_exact(reader, OEM_SIZE) if has_oem else None

    def write(self, writer: Writer) -> None:
        data = (
            wire.uint16_to_bytes(self.logical_address_tester)
            + wire.uint16_to_bytes(self.logical_address_of_doip_entity)
            + bytes([self.routing_activation_response_code])
            + self.reserved_oem
        )
        if self.oem_specific is not None:
            data += self.oem_specific
        wire.write_all(writer, data)
