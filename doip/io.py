"""DoIP message I/O for the codec.

Contains:
- write_message / encode_message: Emit header + payload
- read_message / read_replace_message: Read header + payload of a known kind
- read_any_message: Read header + payload, dispatching on the payload type
- read_borrowed_message: Decode from a caller buffer without copying
- read_header / read_payload / read_replace_payload: The two halves of a read

A reader or writer is any object with read(size) / write(data): a socket
file, a serial port, io.BytesIO...
"""

import io
import logging
from typing import TypeVar

from doip import wire
from doip.alive_check import AliveCheckRequest, AliveCheckResponse
from doip.diagnostic_message import (
    DiagnosticMessage,
    DiagnosticMessageNegativeAck,
    DiagnosticMessagePositiveAck,
)
from doip.entity_status import EntityStatusRequest, EntityStatusResponse
from doip.errors import PayloadLengthError, UnexpectedPayloadTypeError
from doip.generic_nack import GenericHeaderNack
from doip.header import HEADER_LENGTH, Header
from doip.payload import BorrowedPayload, Payload
from doip.payload_type import PayloadType, payload_type_to_code
from doip.power_mode import PowerModeRequest, PowerModeResponse
from doip.protocol import DEFAULT_PROTOCOL_VERSION, TRACE, Reader, Writer
from doip.routing_activation import RoutingActivationRequest, RoutingActivationResponse
from doip.vehicle_ident import (
    VehicleIdentificationRequest,
    VehicleIdentificationRequestWithEid,
    VehicleIdentificationRequestWithVin,
    VehicleIdentificationResponse,
)

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Payload)
B = TypeVar("B", bound=BorrowedPayload)

PAYLOAD_CLASSES: dict[PayloadType, type[Payload]] = {
    payload_class.PAYLOAD_TYPE: payload_class
    for payload_class in (
        GenericHeaderNack,
        VehicleIdentificationRequest,
        VehicleIdentificationRequestWithEid,
        VehicleIdentificationRequestWithVin,
        VehicleIdentificationResponse,
        RoutingActivationRequest,
        RoutingActivationResponse,
        AliveCheckRequest,
        AliveCheckResponse,
        EntityStatusRequest,
        EntityStatusResponse,
        PowerModeRequest,
        PowerModeResponse,
        DiagnosticMessage,
        DiagnosticMessagePositiveAck,
        DiagnosticMessageNegativeAck,
    )
}


def read_header(reader: Reader) -> Header:
    """Read the 8-byte header preceding every payload."""
    header = Header.read(reader)
    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, "Received header: %s", header)
    return header


def read_payload(payload_class: type[P], reader: Reader, payload_length: int) -> P:
    """Read a payload of a given kind, once its header has been read."""
    return payload_class.read(reader, payload_length)


def read_replace_payload(payload: Payload, reader: Reader, payload_length: int) -> None:
    """Like read_payload, but decoding into an existing payload instance.

    Owned diagnostic data is resized in place instead of reallocated.
    """
    payload.read_replace(reader, payload_length)


def _check_payload_type(header: Header, payload_class: type[Payload]) -> None:
    """Raise UnexpectedPayloadTypeError unless header announces payload_class.

    The payload bytes following the header are left unread in the source.
    """
    if header.payload_type != payload_class.payload_type():
        code = payload_type_to_code(header.payload_type)
        logger.debug(
            "Expected %s, got payload type %#06x (%d bytes left unread)",
            payload_class.__name__,
            code,
            header.payload_length,
        )
        raise UnexpectedPayloadTypeError(code)


def read_message(payload_class: type[P], reader: Reader) -> P:
    """Read a header and the payload of the expected kind.

    Only usable when the kind of the next message is known. If the header
    announces another payload type, raises UnexpectedPayloadTypeError and
    stops reading after the header: on a stream the caller must drain or
    resynchronize before the next read.

    Raises:
        UnexpectedPayloadTypeError: Header announces another payload type.
        PayloadLengthError: Declared length invalid for the payload kind.
        TransportError: Source returned fewer bytes than required.
    """
    header = read_header(reader)
    _check_payload_type(header, payload_class)
    return read_payload(payload_class, reader, header.payload_length)


def read_replace_message(payload: Payload, reader: Reader) -> None:
    """read_message decoding into an existing payload instead of a new one."""
    header = read_header(reader)
    _check_payload_type(header, type(payload))
    read_replace_payload(payload, reader, header.payload_length)


def read_any_message(reader: Reader) -> Payload:
    """Read a header and the payload of whatever kind it announces.

    Raises UnexpectedPayloadTypeError for reserved payload types, leaving the
    payload bytes unread.
    """
    header = read_header(reader)
    payload_class = PAYLOAD_CLASSES.get(header.payload_type)
    if payload_class is None:
        code = payload_type_to_code(header.payload_type)
        logger.debug("No payload kind for type %#06x", code)
        raise UnexpectedPayloadTypeError(code)
    return read_payload(payload_class, reader, header.payload_length)


def read_borrowed_message(payload_class: type[B], buffer: bytes | bytearray | memoryview) -> B:
    """Decode a complete message held in buffer, aliasing its opaque data.

    Bytes of buffer past the declared payload length are ignored. The
    returned payload is valid as long as buffer is alive and unchanged.
    """
    view = memoryview(buffer).cast("B")
    if len(view) < HEADER_LENGTH:
        raise PayloadLengthError(len(view), HEADER_LENGTH)
    header = Header.from_bytes(view[:HEADER_LENGTH])
    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, "Received header: %s", header)
    _check_payload_type(header, payload_class)
    available = len(view) - HEADER_LENGTH
    if available < header.payload_length:
        raise PayloadLengthError(available, header.payload_length)
    end = HEADER_LENGTH + header.payload_length
    return payload_class.read_borrowed(view[HEADER_LENGTH:end])


def write_message(
    payload: Payload, writer: Writer, protocol_version: int = DEFAULT_PROTOCOL_VERSION
) -> None:
    """Write a header computed from payload, then payload itself.

    The whole message is encoded before the first write: a payload that
    fails to encode leaves writer untouched.
    """
    header = Header.for_payload(payload, protocol_version)
    body = io.BytesIO()
    payload.write(body)
    data = header.to_bytes() + body.getvalue()
    if len(data) != HEADER_LENGTH + header.payload_length:
        raise ValueError(
            f"{type(payload).__name__} wrote {len(data) - HEADER_LENGTH} bytes, "
            f"length() reported {header.payload_length}"
        )
    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, "Sending header: %s", header)
    wire.write_all(writer, data)


def encode_message(payload: Payload, protocol_version: int = DEFAULT_PROTOCOL_VERSION) -> bytes:
    """Return header + payload as bytes, eg. for a UDP datagram."""
    buffer = io.BytesIO()
    write_message(payload, buffer, protocol_version)
    return buffer.getvalue()


def length_message(payload: Payload) -> int:
    """Total length of the message: header plus payload."""
    return HEADER_LENGTH + payload.length()
