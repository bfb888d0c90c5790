"""Vehicle identification request/response messages.

The requests are broadcast (or unicast) by a tester over UDP to discover
diagnostic entities; all three variants have an empty payload. The response,
also sent unsolicited as vehicle announcement, has a fixed layout:
  [17-byte VIN][2-byte logical address][6-byte EID][6-byte GID]
  [1-byte further action][1-byte VIN/GID sync status]

A GID of all 0x00 or all 0xFF bytes means "not set" and decodes to None.
"""

from dataclasses import dataclass
from enum import IntEnum

from doip import wire
from doip.payload import EmptyPayload, Payload, check_uint, read_fixed
from doip.payload_type import PayloadType
from doip.protocol import (
    EID_SIZE,
    GID_SIZE,
    LOGICAL_ADDRESS_SIZE,
    VIN_SIZE,
    LogicalAddress,
    Reader,
    Reserved,
    VmSpecific,
    Writer,
)

VEHICLE_IDENTIFICATION_RESPONSE_SIZE = VIN_SIZE + LOGICAL_ADDRESS_SIZE + EID_SIZE + GID_SIZE + 2

GID_NOT_SET = (bytes(GID_SIZE), b"\xff" * GID_SIZE)


class FurtherActionRequired(IntEnum):
    """Further action the tester is asked to take.

    0x01-0x0F are reserved, 0x11-0xFF are vehicle manufacturer specific.
    """

    NO_FURTHER_ACTION_REQUIRED = 0x00
    ROUTING_ACTIVATION_REQUIRED_FOR_CENTRAL_SECURITY = 0x10

    @classmethod
    def from_byte(cls, value: int) -> "FurtherActionRequired | Reserved | VmSpecific":
        try:
            return cls(value)
        except ValueError:
            pass
        if value < cls.ROUTING_ACTIVATION_REQUIRED_FOR_CENTRAL_SECURITY:
            return Reserved(value)
        return VmSpecific(value)


class VinGidSyncStatus(IntEnum):
    """Whether all entities of the vehicle agree on VIN/GID."""

    SYNCHRONIZED = 0x00
    INCOMPLETE = 0x10

    @classmethod
    def from_byte(cls, value: int) -> "VinGidSyncStatus | Reserved":
        try:
            return cls(value)
        except ValueError:
            return Reserved(value)


@dataclass
class VehicleIdentificationRequest(EmptyPayload):
    """Vehicle identification request."""

    PAYLOAD_TYPE = PayloadType.VEHICLE_IDENTIFICATION_REQUEST


@dataclass
class VehicleIdentificationRequestWithEid(EmptyPayload):
    """Vehicle identification request, asking for an EID in the response."""

    PAYLOAD_TYPE = PayloadType.VEHICLE_IDENTIFICATION_REQUEST_WITH_EID


@dataclass
class VehicleIdentificationRequestWithVin(EmptyPayload):
    """Vehicle identification request, asking for a VIN in the response."""

    PAYLOAD_TYPE = PayloadType.VEHICLE_IDENTIFICATION_REQUEST_WITH_VIN


@dataclass
class VehicleIdentificationResponse(Payload):
    """Vehicle identification response / vehicle announcement."""

    PAYLOAD_TYPE = PayloadType.VEHICLE_IDENTIFICATION_RESPONSE

    vin: bytes
    logical_address: LogicalAddress
    eid: bytes  # Entity identification, e.g. MAC address
    gid: bytes | None  # Group identification, None when not set
    further_action: FurtherActionRequired | Reserved | VmSpecific = (
        FurtherActionRequired.NO_FURTHER_ACTION_REQUIRED
    )
    vin_gid_sync_status: VinGidSyncStatus | Reserved = VinGidSyncStatus.SYNCHRONIZED

    def __post_init__(self) -> None:
        """Validate field ranges, widths and GID sentinels."""
        check_uint("logical_address", self.logical_address, LOGICAL_ADDRESS_SIZE)
        check_uint("further_action", self.further_action.value, wire.UINT8_SIZE)
        check_uint("vin_gid_sync_status", self.vin_gid_sync_status.value, wire.UINT8_SIZE)
        if len(self.vin) != VIN_SIZE:
            raise ValueError(f"vin must be {VIN_SIZE} bytes, got {len(self.vin)}")
        if len(self.eid) != EID_SIZE:
            raise ValueError(f"eid must be {EID_SIZE} bytes, got {len(self.eid)}")
        if self.gid is not None:
            if len(self.gid) != GID_SIZE:
                raise ValueError(f"gid must be {GID_SIZE} bytes, got {len(self.gid)}")
            if self.gid in GID_NOT_SET:
                raise ValueError(f"gid {self.gid.hex()} means 'not set', use None instead")

    @classmethod
    def zeroed(cls) -> "VehicleIdentificationResponse":
        return cls(vin=bytes(VIN_SIZE), logical_address=0, eid=bytes(EID_SIZE), gid=None)

    def length(self) -> int:
        return VEHICLE_IDENTIFICATION_RESPONSE_SIZE

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        data = read_fixed(reader, payload_length, VEHICLE_IDENTIFICATION_RESPONSE_SIZE)
        offset = 0
        self.vin = data[offset : offset + VIN_SIZE]
        offset += VIN_SIZE
        self.logical_address = wire.uint16_from_bytes(data[offset : offset + LOGICAL_ADDRESS_SIZE])
        offset += LOGICAL_ADDRESS_SIZE
        self.eid = data[offset : offset + EID_SIZE]
        offset += EID_SIZE
        gid = data[offset : offset + GID_SIZE]
        offset += GID_SIZE
        # ISO 13400-2 Table 1: 0x00 or 0xFF for every byte means "value not set"
        self.gid = None if gid in GID_NOT_SET else gid
        self.further_action = FurtherActionRequired.from_byte(data[offset])
        self.vin_gid_sync_status = VinGidSyncStatus.from_byte(data[offset + 1])

    def write(self, writer: Writer) -> None:
        wire.write_all(
            writer,
            self.vin
            + wire.uint16_to_bytes(self.logical_address)
            + self.eid
            + (self.gid if self.gid is not None else bytes(GID_SIZE))
            + bytes([self.further_action.value, self.vin_gid_sync_status.value]),
        )

    @property
    def vin_text(self) -> str:
        """VIN as ASCII text."""
        return self.vin.decode("ascii", errors="replace")
