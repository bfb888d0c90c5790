"""Big-endian field encoding and exact reads/writes for the DoIP codec.

All multi-byte integers on the wire are big-endian unsigned.
"""

from typing import Literal

from doip.errors import TransportError
from doip.protocol import Reader, Writer

UINT8_SIZE = 1
UINT16_SIZE = 2
UINT32_SIZE = 4
BYTE_ORDER: Literal["little", "big"] = "big"


def uint16_to_bytes(value: int) -> bytes:
    """Encode unsigned 16-bit int as big-endian bytes."""
    return value.to_bytes(UINT16_SIZE, BYTE_ORDER, signed=False)


def uint16_from_bytes(data: bytes) -> int:
    """Decode big-endian bytes to unsigned 16-bit int."""
    return int.from_bytes(data, BYTE_ORDER, signed=False)


def uint32_to_bytes(value: int) -> bytes:
    """Encode unsigned 32-bit int as big-endian bytes."""
    return value.to_bytes(UINT32_SIZE, BYTE_ORDER, signed=False)


def uint32_from_bytes(data: bytes) -> int:
    """Decode big-endian bytes to unsigned 32-bit int."""
    return int.from_bytes(data, BYTE_ORDER, signed=False)


def read_exact(reader: Reader, size: int) -> bytes:
    """Read exactly size bytes. Raises TransportError on a short read."""
    if size == 0:
        return b""
    data = reader.read(size)
    if len(data) < size:
        raise TransportError(f"Timeout or truncated message: got {len(data)} of {size} bytes")
    return data


def read_u8(reader: Reader) -> int:
    return read_exact(reader, UINT8_SIZE)[0]


def read_u16(reader: Reader) -> int:
    return uint16_from_bytes(read_exact(reader, UINT16_SIZE))


def read_u32(reader: Reader) -> int:
    return uint32_from_bytes(read_exact(reader, UINT32_SIZE))


def read_into(reader: Reader, buffer: bytearray) -> None:
    """Fill buffer completely from reader, without an intermediate copy when possible.

    Uses readinto() when the reader provides it (files, BytesIO, serial ports),
    otherwise falls back to read().
    """
    size = len(buffer)
    if size == 0:
        return
    readinto = getattr(reader, "readinto", None)
    if readinto is None:
        buffer[:] = read_exact(reader, size)
        return

    filled = 0
    with memoryview(buffer) as view:
        while filled < size:
            count = readinto(view[filled:])
            if not count:
                raise TransportError(
                    f"Timeout or truncated message: got {filled} of {size} bytes"
                )
            filled += count


def write_all(writer: Writer, data: bytes | bytearray | memoryview) -> None:
    """Write data in one call. Raises TransportError if the writer reports a short write."""
    if len(data) == 0:
        return
    written = writer.write(data)
    if written is not None and written < len(data):
        raise TransportError(f"Short write: wrote {written} of {len(data)} bytes")
