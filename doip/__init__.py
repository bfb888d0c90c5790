"""DoIP (ISO 13400-2) message encoding and decoding.

This package converts between byte streams and typed DoIP messages:
- protocol: ProtocolVersion enum, Reserved/VmSpecific, Reader/Writer Protocols
- payload_type: Payload type registry
- header: The 8-byte generic header
- payload: Payload / BorrowedPayload contracts, owned and borrowed buffers
- alive_check, entity_status, power_mode, generic_nack, routing_activation,
  vehicle_ident, diagnostic_message: One module per message family
- io: read_message / write_message and friends

A typical exchange:

    write_message(RoutingActivationRequest(source_address=0x0E00), sock)
    response = read_message(RoutingActivationResponse, sock)
"""

from doip.alive_check import AliveCheckRequest, AliveCheckResponse
from doip.diagnostic_message import (
    DiagnosticMessage,
    DiagnosticMessageNegativeAck,
    DiagnosticMessageNegativeAckCode,
    DiagnosticMessagePositiveAck,
    DiagnosticMessagePositiveAckCode,
)
from doip.entity_status import EntityStatusRequest, EntityStatusResponse
from doip.errors import (
    BufferTooSmallError,
    DoIpError,
    PayloadLengthError,
    TransportError,
    UnexpectedPayloadTypeError,
    UnknownActivationTypeError,
    UnknownRoutingActivationResponseCodeError,
)
from doip.generic_nack import GenericHeaderNack, NegativeAckCode
from doip.header import HEADER_LENGTH, Header
from doip.io import (
    PAYLOAD_CLASSES,
    encode_message,
    length_message,
    read_any_message,
    read_borrowed_message,
    read_header,
    read_message,
    read_payload,
    read_replace_message,
    read_replace_payload,
    write_message,
)
from doip.payload import BorrowedBuffer, BorrowedPayload, OwnedBuffer, Payload, UdsBuffer
from doip.payload_type import (
    AnyPayloadType,
    PayloadType,
    payload_type_from_code,
    payload_type_to_code,
)
from doip.power_mode import PowerModeRequest, PowerModeResponse
from doip.protocol import (
    DEFAULT_PROTOCOL_VERSION,
    TCP_DATA_PORT,
    UDP_DISCOVERY_PORT,
    LogicalAddress,
    Port,
    ProtocolVersion,
    Reader,
    Reserved,
    VmSpecific,
    Writer,
)
from doip.routing_activation import (
    ActivationType,
    RoutingActivationRequest,
    RoutingActivationResponse,
    RoutingActivationResponseCode,
)
from doip.vehicle_ident import (
    FurtherActionRequired,
    VehicleIdentificationRequest,
    VehicleIdentificationRequestWithEid,
    VehicleIdentificationRequestWithVin,
    VehicleIdentificationResponse,
    VinGidSyncStatus,
)

__all__ = [
    # Protocol
    "DEFAULT_PROTOCOL_VERSION",
    "TCP_DATA_PORT",
    "UDP_DISCOVERY_PORT",
    "LogicalAddress",
    "Port",
    "ProtocolVersion",
    "Reader",
    "Reserved",
    "VmSpecific",
    "Writer",
    # Payload types
    "AnyPayloadType",
    "PayloadType",
    "payload_type_from_code",
    "payload_type_to_code",
    # Header
    "HEADER_LENGTH",
    "Header",
    # Payload contract
    "BorrowedBuffer",
    "BorrowedPayload",
    "OwnedBuffer",
    "Payload",
    "UdsBuffer",
    # Messages
    "ActivationType",
    "AliveCheckRequest",
    "AliveCheckResponse",
    "DiagnosticMessage",
    "DiagnosticMessageNegativeAck",
    "DiagnosticMessageNegativeAckCode",
    "DiagnosticMessagePositiveAck",
    "DiagnosticMessagePositiveAckCode",
    "EntityStatusRequest",
    "EntityStatusResponse",
    "FurtherActionRequired",
    "GenericHeaderNack",
    "NegativeAckCode",
    "PowerModeRequest",
    "PowerModeResponse",
    "RoutingActivationRequest",
    "RoutingActivationResponse",
    "RoutingActivationResponseCode",
    "VehicleIdentificationRequest",
    "VehicleIdentificationRequestWithEid",
    "VehicleIdentificationRequestWithVin",
    "VehicleIdentificationResponse",
    "VinGidSyncStatus",
    # I/O
    "PAYLOAD_CLASSES",
    "encode_message",
    "length_message",
    "read_any_message",
    "read_borrowed_message",
    "read_header",
    "read_message",
    "read_payload",
    "read_replace_message",
    "read_replace_payload",
    "write_message",
    # Exceptions
    "BufferTooSmallError",
    "DoIpError",
    "PayloadLengthError",
    "TransportError",
    "UnexpectedPayloadTypeError",
    "UnknownActivationTypeError",
    "UnknownRoutingActivationResponseCodeError",
]
