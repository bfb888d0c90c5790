"""DoIP payload type registry.

Maps the 16-bit payload type code of a header to a logical payload kind and
back. Both directions are total: codes with no named kind land in one of
two reserved buckets which keep the raw code.

  0x0009-0x4000, 0x4005-0x8000, 0x8004-0xEFFF  -> Reserved(code)
  0xF000-0xFFFF                                -> VmSpecific(code)
"""

from enum import IntEnum

from doip.protocol import Reserved, VmSpecific

UINT16_MAX = 0xFFFF
VM_SPECIFIC_START = 0xF000


class PayloadType(IntEnum):
    """Named DoIP payload types. The value is the wire code."""

    GENERIC_HEADER_NACK = 0x0000
    VEHICLE_IDENTIFICATION_REQUEST = 0x0001
    VEHICLE_IDENTIFICATION_REQUEST_WITH_EID = 0x0002
    VEHICLE_IDENTIFICATION_REQUEST_WITH_VIN = 0x0003
    VEHICLE_IDENTIFICATION_RESPONSE = 0x0004
    ROUTING_ACTIVATION_REQUEST = 0x0005
    ROUTING_ACTIVATION_RESPONSE = 0x0006
    ALIVE_CHECK_REQUEST = 0x0007
    ALIVE_CHECK_RESPONSE = 0x0008
    ENTITY_STATUS_REQUEST = 0x4001
    ENTITY_STATUS_RESPONSE = 0x4002
    POWER_MODE_REQUEST = 0x4003
    POWER_MODE_RESPONSE = 0x4004
    DIAGNOSTIC_MESSAGE = 0x8001
    DIAGNOSTIC_MESSAGE_POSITIVE_ACK = 0x8002
    DIAGNOSTIC_MESSAGE_NEGATIVE_ACK = 0x8003


AnyPayloadType = PayloadType | Reserved | VmSpecific

_NAMED_CODES = {member.value: member for member in PayloadType}


def payload_type_from_code(code: int) -> AnyPayloadType:
    """Classify a 16-bit payload type code."""
    if not 0 <= code <= UINT16_MAX:
        raise ValueError(f"Payload type code out of range: {code}")
    named = _NAMED_CODES.get(code)
    if named is not None:
        return named
    if code >= VM_SPECIFIC_START:
        return VmSpecific(code)
    return Reserved(code)


def payload_type_to_code(payload_type: AnyPayloadType) -> int:
    """Return the 16-bit wire code of a payload type."""
    return int(payload_type.value)
