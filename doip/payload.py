"""DoIP payload abstractions.

Contains:
- Payload ABC: encode/decode contract implemented by every message kind
- BorrowedPayload ABC: zero-copy decoding, diagnostic message family only
- UdsBuffer: opaque payload bytes, either owned or borrowed
- EmptyPayload: base for the payload kinds without any field
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, TypeVar

from doip import wire
from doip.errors import BufferTooSmallError, PayloadLengthError
from doip.payload_type import PayloadType
from doip.protocol import Reader, Writer

P = TypeVar("P", bound="Payload")
B = TypeVar("B", bound="BorrowedPayload")


def check_exact_length(payload_length: int, expected: int) -> None:
    """Raise PayloadLengthError unless payload_length == expected."""
    if payload_length != expected:
        raise PayloadLengthError(payload_length, expected)


def check_min_length(payload_length: int, minimum: int) -> None:
    """Raise PayloadLengthError if payload_length < minimum."""
    if payload_length < minimum:
        raise PayloadLengthError(payload_length, minimum)


def check_uint(name: str, value: int, size: int) -> None:
    """Raise ValueError unless value fits an unsigned field of size bytes."""
    if not 0 <= value < 1 << (8 * size):
        raise ValueError(f"{name} does not fit {size} byte(s): {value:#x}")


class Payload(ABC):
    """A DoIP payload, ie. the message body following a header.

    read() builds the zeroed instance of the kind and decodes into it with
    read_replace(). read_replace() is not atomic: when it raises, fields
    decoded before the failure keep their new values.
    """

    PAYLOAD_TYPE: ClassVar[PayloadType]

    @classmethod
    def payload_type(cls) -> PayloadType:
        """Return the wire payload type of this kind."""
        return cls.PAYLOAD_TYPE

    @classmethod
    @abstractmethod
    def zeroed(cls: type[P]) -> P:
        """Return a default instance, used as the target of read()."""
        pass

    @abstractmethod
    def length(self) -> int:
        """Return the number of bytes write() emits for this instance."""
        pass

    @classmethod
    def read(cls: type[P], reader: Reader, payload_length: int) -> P:
        """Decode a payload of payload_length bytes from reader."""
        payload = cls.zeroed()
        payload.read_replace(reader, payload_length)
        return payload

    @abstractmethod
    def read_replace(self, reader: Reader, payload_length: int) -> None:
        """Decode payload_length bytes from reader into this instance."""
        pass

    @abstractmethod
    def write(self, writer: Writer) -> None:
        """Encode this payload to writer."""
        pass


class BorrowedPayload(ABC):
    """A payload which can be decoded without copying its opaque data."""

    @classmethod
    @abstractmethod
    def read_borrowed(cls: type[B], payload: bytes | bytearray | memoryview) -> B:
        """Decode a complete payload whose opaque data aliases the given buffer."""
        pass


class UdsBuffer(ABC):
    """Opaque diagnostic bytes carried by the diagnostic message family."""

    @abstractmethod
    def get_ref(self) -> bytes | bytearray | memoryview:
        """Return the bytes held, without copying."""
        pass

    @abstractmethod
    def resize(self, size: int) -> bytearray:
        """Resize to size bytes and return the storage to fill."""
        pass

    def __len__(self) -> int:
        return len(self.get_ref())

    def __bytes__(self) -> bytes:
        return bytes(self.get_ref())


@dataclass
class OwnedBuffer(UdsBuffer):
    """Bytes exclusively held by the payload. Grows and shrinks on read_replace()."""

    data: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytearray):
            self.data = bytearray(self.data)

    def get_ref(self) -> bytearray:
        return self.data

    def resize(self, size: int) -> bytearray:
        current = len(self.data)
        if size < current:
            del self.data[size:]
        elif size > current:
            self.data.extend(bytes(size - current))
        return self.data


@dataclass
class BorrowedBuffer(UdsBuffer):
    """Read-only view into memory owned by the caller.

    Valid as long as the caller keeps the underlying object alive and
    unchanged. Never resized or written by the codec.
    """

    data: memoryview

    def __post_init__(self) -> None:
        self.data = memoryview(self.data).cast("B").toreadonly()

    def get_ref(self) -> memoryview:
        return self.data

    def resize(self, size: int) -> bytearray:
        raise BufferTooSmallError()


class EmptyPayload(Payload):
    """A payload kind without any field. Its payload length must be 0."""

    @classmethod
    def zeroed(cls: type[P]) -> P:
        return cls()

    def length(self) -> int:
        return 0

    def read_replace(self, reader: Reader, payload_length: int) -> None:
        check_exact_length(payload_length, 0)

    def write(self, writer: Writer) -> None:
        pass


def read_fixed(reader: Reader, payload_length: int, expected: int) -> bytes:
    """Check a fixed-size payload length, then read the whole payload."""
    check_exact_length(payload_length, expected)
    return wire.read_exact(reader, expected)
