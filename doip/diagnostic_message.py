"""Diagnostic message and its acknowledgements.

The diagnostic message carries the UDS traffic between tester and
diagnostic entity; it is the only DoIP message whose size is unbounded
(think TransferData during a flash download). Layouts:

  message:  [2-byte source][2-byte target][user data...]
  pos ack:  [2-byte source][2-byte target][1-byte ack code][previous data...]
  neg ack:  [2-byte source][2-byte target][1-byte nack code][previous data...]

The opaque part is a UdsBuffer: an OwnedBuffer by default, or a
BorrowedBuffer produced by read_borrowed(), which aliases the caller's
buffer instead of copying it. read_replace() into a borrowed instance
raises BufferTooSmallError.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from doip import wire
from doip.payload import (
    BorrowedBuffer,
    BorrowedPayload,
    OwnedBuffer,
    Payload,
    UdsBuffer,
    check_min_length,
    check_uint,
)
from doip.payload_type import PayloadType
from doip.protocol import LOGICAL_ADDRESS_SIZE, LogicalAddress, Reader, Reserved, Writer

DIAGNOSTIC_MESSAGE_SIZE = 2 * LOGICAL_ADDRESS_SIZE
DIAGNOSTIC_ACK_SIZE = DIAGNOSTIC_MESSAGE_SIZE + wire.UINT8_SIZE


class DiagnosticMessagePositiveAckCode(IntEnum):
    """Positive acknowledgement code. Anything but 0x00 is reserved."""

    ROUTING_CONFIRMATION_ACK = 0x00

    @classmethod
    def from_byte(cls, value: int) -> "DiagnosticMessagePositiveAckCode | Reserved":
        try:
            return cls(value)
        except ValueError:
            return Reserved(value)


class DiagnosticMessageNegativeAckCode(IntEnum):
    """Reason why a diagnostic message was refused. 0x00, 0x01 and 0x09-0xFF are reserved."""

    INVALID_SOURCE_ADDRESS = 0x02
    UNKNOWN_TARGET_ADDRESS = 0x03
    DIAGNOSTIC_MESSAGE_TOO_LARGE = 0x04
    OUT_OF_MEMORY = 0x05
    TARGET_UNREACHABLE = 0x06
    UNKNOWN_NETWORK = 0x07
    TRANSPORT_PROTOCOL_ERROR = 0x08

    @classmethod
    def from_byte(cls, value: int) -> "DiagnosticMessageNegativeAckCode | Reserved":
        try:
            return cls(value)
        except ValueError:
            return Reserved(value)


def _view(payload: bytes | bytearray | memoryview) -> memoryview:
    return memoryview(payload).cast("B")


def _read_addresses(reader: Reader) -> tuple[LogicalAddress, LogicalAddress]:
    data = wire.read_exact(reader, DIAGNOSTIC_MESSAGE_SIZE)
    return wire.uint16_from_bytes(data[0:2]), wire.uint16_from_bytes(data[2:4])


def _get_addresses(view: memoryview) -> tuple[LogicalAddress, LogicalAddress]:
    return wire.uint16_from_bytes(view[0:2]), wire.uint16_from_bytes(view[2:4])


def _check_addresses(source: LogicalAddress, target: LogicalAddress) -> None:
    check_uint("source_address", source, LOGICAL_ADDRESS_SIZE)
    check_uint("target_address", target, LOGICAL_ADDRESS_SIZE)


def _write_addresses(writer: Writer, source: LogicalAddress, target: LogicalAddress) -> None:
    wire.write_all(writer, wire.uint16_to_bytes(source) + wire.uint16_to_bytes(target))


@dataclass
class DiagnosticMessage(Payload, BorrowedPayload):
    """Diagnostic message, carrying one UDS request or response.

    With DoIP gateways, target_address may name an entity behind the one the
    connection ends at; the gateway forwards the message.
    """

    PAYLOAD_TYPE = PayloadType.DIAGNOSTIC_MESSAGE

    source_address: LogicalAddress
    target_address: LogicalAddress
    user_data: UdsBuffer = field(default_factory=OwnedBuffer)

    def __post_init__(self) -> None:
        _check_addresses(self.source_address, self.target_address)

    @classmethod
    def zeroed(cls) -> "DiagnosticMessage":
        return cls(source_address=0, target_address=0)

    def length(self) -> int:
        return DIAGNOSTIC_MESSAGE_SIZE + len(self.user_data)

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        check_min_length(payload_length, DIAGNOSTIC_MESSAGE_SIZE)
        self.source_address, self.target_address = _read_addresses(reader)
        buffer = self.user_data.resize(payload_length - DIAGNOSTIC_MESSAGE_SIZE)
        wire.read_into(reader, buffer)

    def write(self, writer: Writer) -> None:
        _write_addresses(writer, self.source_address, self.target_address)
        wire.write_all(writer, self.user_data.get_ref())

    @classmethod
    def read_borrowed(cls, payload: bytes | bytearray | memoryview) -> "DiagnosticMessage":
        view = _view(payload)
        check_min_length(len(view), DIAGNOSTIC_MESSAGE_SIZE)
        source_address, target_address = _get_addresses(view)
        return cls(
            source_address=source_address,
            target_address=target_address,
            user_data=BorrowedBuffer(view[DIAGNOSTIC_MESSAGE_SIZE:]),
        )


@dataclass
class DiagnosticMessagePositiveAck(Payload, BorrowedPayload):
    """Diagnostic message positive acknowledgement.

    Sent by the diagnostic entity once a DiagnosticMessage was received and
    routed. May echo (part of) the acknowledged message.
    """

    PAYLOAD_TYPE = PayloadType.DIAGNOSTIC_MESSAGE_POSITIVE_ACK

    source_address: LogicalAddress
    target_address: LogicalAddress
    ack_code: DiagnosticMessagePositiveAckCode | Reserved = (
        DiagnosticMessagePositiveAckCode.ROUTING_CONFIRMATION_ACK
    )
    previous_diagnostic_message_data: UdsBuffer = field(default_factory=OwnedBuffer)

    def __post_init__(self) -> None:
        _check_addresses(self.source_address, self.target_address)
        check_uint("ack_code", self.ack_code.value, wire.UINT8_SIZE)

    @classmethod
    def zeroed(cls) -> "DiagnosticMessagePositiveAck":
        return cls(source_address=0, target_address=0)

    def length(self) -> int:
        return DIAGNOSTIC_ACK_SIZE + len(self.previous_diagnostic_message_data)

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        check_min_length(payload_length, DIAGNOSTIC_ACK_SIZE)
        self.source_address, self.target_address = _read_addresses(reader)
        buffer = self.previous_diagnostic_message_data.resize(payload_length - DIAGNOSTIC_ACK_SIZE)
        self.ack_code = DiagnosticMessagePositiveAckCode.from_byte(wire.read_u8(reader))
        wire.read_into(reader, buffer)

    def write(self, writer: Writer) -> None:
        _write_addresses(writer, self.source_address, self.target_address)
        wire.write_all(writer, bytes([self.ack_code.value]))
        wire.write_all(writer, self.previous_diagnostic_message_data.get_ref())

    @classmethod
    def read_borrowed(
        cls, payload: bytes | bytearray | memoryview
    ) -> "DiagnosticMessagePositiveAck":
        view = _view(payload)
        check_min_length(len(view), DIAGNOSTIC_ACK_SIZE)
        source_address, target_address = _get_addresses(view)
        return cls(
            source_address=source_address,
            target_address=target_address,
            ack_code=DiagnosticMessagePositiveAckCode.from_byte(view[DIAGNOSTIC_MESSAGE_SIZE]),
            previous_diagnostic_message_data=BorrowedBuffer(view[DIAGNOSTIC_ACK_SIZE:]),
        )


@dataclass
class DiagnosticMessageNegativeAck(Payload, BorrowedPayload):
    """Diagnostic message negative acknowledgement."""

    PAYLOAD_TYPE = PayloadType.DIAGNOSTIC_MESSAGE_NEGATIVE_ACK

    source_address: LogicalAddress
    target_address: LogicalAddress
    ack_code: DiagnosticMessageNegativeAckCode | Reserved
    previous_diagnostic_message_data: UdsBuffer = field(default_factory=OwnedBuffer)

    def __post_init__(self) -> None:
        _check_addresses(self.source_address, self.target_address)
        check_uint("ack_code", self.ack_code.value, wire.UINT8_SIZE)

    @classmethod
    def zeroed(cls) -> "DiagnosticMessageNegativeAck":
        return cls(
            source_address=0,
            target_address=0,
            ack_code=DiagnosticMessageNegativeAckCode.INVALID_SOURCE_ADDRESS,
        )

    def length(self) -> int:
        return DIAGNOSTIC_ACK_SIZE + len(self.previous_diagnostic_message_data)

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        check_min_length(payload_length, DIAGNOSTIC_ACK_SIZE)
        self.source_address, self.target_address = _read_addresses(reader)
        buffer = self.previous_diagnostic_message_data.resize(payload_length - DIAGNOSTIC_ACK_SIZE)
        self.ack_code = DiagnosticMessageNegativeAckCode.from_byte(wire.read_u8(reader))
        wire.read_into(reader, buffer)

    def write(self, writer: Writer) -> None:
        _write_addresses(writer, self.source_address, self.target_address)
        wire.write_all(writer, bytes([self.ack_code.value]))
        wire.write_all(writer, self.previous_diagnostic_message_data.get_ref())

    @classmethod
    def read_borrowed(
        cls, payload: bytes | bytearray | memoryview
    ) -> "DiagnosticMessageNegativeAck":
        view = _view(payload)
        check_min_length(len(view), DIAGNOSTIC_ACK_SIZE)
        source_address, target_address = _get_addresses(view)
        return cls(
            source_address=source_address,
            target_address=target_address,
            ack_code=DiagnosticMessageNegativeAckCode.from_byte(view[DIAGNOSTIC_MESSAGE_SIZE]),
            previous_diagnostic_message_data=BorrowedBuffer(view[DIAGNOSTIC_ACK_SIZE:]),
        )
