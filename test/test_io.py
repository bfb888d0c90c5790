"""Unit tests for message-level reads and writes."""

import io
import logging

import pytest

from doip import (
    PAYLOAD_CLASSES,
    AliveCheckRequest,
    AliveCheckResponse,
    DiagnosticMessage,
    DiagnosticMessageNegativeAck,
    DiagnosticMessagePositiveAck,
    DoIpError,
    EntityStatusResponse,
    GenericHeaderNack,
    Header,
    OwnedBuffer,
    PayloadLengthError,
    PayloadType,
    PowerModeResponse,
    ProtocolVersion,
    Reserved,
    RoutingActivationRequest,
    RoutingActivationResponse,
    RoutingActivationResponseCode,
    TransportError,
    UnexpectedPayloadTypeError,
    VehicleIdentificationResponse,
    VmSpecific,
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
from doip.protocol import TRACE

ALIVE_CHECK_RESPONSE = bytes.fromhex("02fd0008000000020454")
DIAGNOSTIC_MESSAGE = bytes.fromhex("02fd800100000007" "012300ed22f012")


class ReadOnlyStream:
    """A reader without readinto(), like a bare socket wrapper."""

    def __init__(self, data: bytes) -> None:
        self._data = io.BytesIO(data)

    def read(self, size: int = -1, /) -> bytes:
        return self._data.read(size)


class FailingStream:
    """A reader/writer whose transport is broken."""

    def read(self, size: int = -1, /) -> bytes:
        raise OSError(104, "Connection reset by peer")

    def write(self, data: bytes, /) -> int:
        raise OSError(32, "Broken pipe")


class ShortWriteStream:
    """A writer that accepts one byte less than given."""

    def __init__(self) -> None:
        self.written = bytearray()

    def write(self, data: bytes, /) -> int:
        self.written += data[:-1]
        return len(data) - 1


@pytest.mark.unit
class TestWrite:
    def test_write_message(self) -> None:
        buffer = io.BytesIO()
        write_message(AliveCheckResponse(source_address=0x0454), buffer)
        assert buffer.getvalue() == ALIVE_CHECK_RESPONSE

    def test_encode_message(self) -> None:
        assert encode_message(AliveCheckResponse(0x0454)) == ALIVE_CHECK_RESPONSE

    def test_protocol_version(self) -> None:
        data = encode_message(AliveCheckRequest(), ProtocolVersion.ISO_2019)
        assert data == bytes.fromhex("03fc000700000000")

    def test_length_message(self) -> None:
        assert length_message(AliveCheckRequest()) == 8
        assert length_message(RoutingActivationRequest(0x0E00, reserved_oem=bytes(4))) == 19
        assert length_message(DiagnosticMessage(1, 2, OwnedBuffer(bytes(100)))) == 112

    def test_short_write(self) -> None:
        with pytest.raises(TransportError):
            write_message(AliveCheckResponse(0x0454), ShortWriteStream())

    def test_transport_error_propagates(self) -> None:
        with pytest.raises(OSError) as excinfo:
            write_message(AliveCheckRequest(), FailingStream())
        assert excinfo.value.errno == 32
        assert not isinstance(excinfo.value, DoIpError)

    def test_field_changed_out_of_range(self) -> None:
        payload = AliveCheckResponse(0x0454)
        payload.source_address = 0x10000
        stream = io.BytesIO()
        with pytest.raises(OverflowError):
            write_message(payload, stream)
        assert stream.getvalue() == b""

    def test_length_disagrees_with_write(self) -> None:
        class Oversized(AliveCheckResponse):
            def length(self) -> int:
                return 3

        stream = io.BytesIO()
        with pytest.raises(ValueError, match="length"):
            write_message(Oversized(0x0454), stream)
        assert stream.getvalue() == b""

    def test_single_write_call(self) -> None:
        class CountingStream(io.BytesIO):
            calls = 0

            def write(self, data, /) -> int:
                self.calls += 1
                return super().write(data)

        stream = CountingStream()
        write_message(DiagnosticMessage(0x0E00, 0x1001, OwnedBuffer(b"\x10\x03")), stream)
        assert stream.calls == 1
        assert stream.getvalue() == bytes.fromhex("02fd800100000006" "0e0010011003")

    def test_trace_disabled_skips_header_formatting(
        self, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fail_repr(self: Header) -> str:
            raise AssertionError("header formatted with TRACE disabled")

        caplog.set_level(logging.INFO, logger="doip.io")
        monkeypatch.setattr(Header, "__repr__", fail_repr)
        data = encode_message(AliveCheckResponse(0x0454))
        assert read_message(AliveCheckResponse, io.BytesIO(data)) == AliveCheckResponse(0x0454)


@pytest.mark.unit
class TestFieldRanges:
    """Out-of-range fields are refused when the message is built."""

    @pytest.mark.parametrize(
        "build",
        [
            lambda: AliveCheckResponse(source_address=0x10000),
            lambda: AliveCheckResponse(source_address=-1),
            lambda: EntityStatusResponse(256, 0, 0, 0),
            lambda: EntityStatusResponse(0, 0, 0, 0x1_0000_0000),
            lambda: PowerModeResponse(power_mode=0x100),
            lambda: GenericHeaderNack(nack_code=Reserved(0x100)),
            lambda: RoutingActivationRequest(source_address=0x10000),
            lambda: RoutingActivationResponse(
                0x0E00, 0x10000, RoutingActivationResponseCode.SUCCESSFULLY_ACTIVATED
            ),
            lambda: VehicleIdentificationResponse(
                vin=bytes(17), logical_address=0x10000, eid=bytes(6), gid=None
            ),
            lambda: VehicleIdentificationResponse(
                vin=bytes(17),
                logical_address=0,
                eid=bytes(6),
                gid=None,
                further_action=VmSpecific(0x111),
            ),
            lambda: DiagnosticMessage(0x10000, 0x0001),
            lambda: DiagnosticMessage(0x0001, -2),
            lambda: DiagnosticMessagePositiveAck(0x0E00, 0x1001, ack_code=Reserved(0x1FF)),
            lambda: DiagnosticMessageNegativeAck(0x0E00, 0x1001, ack_code=Reserved(0x100)),
        ],
    )
    def test_rejected(self, build) -> None:
        with pytest.raises(ValueError):
            build()

    def test_limits_accepted(self) -> None:
        stream = io.BytesIO()
        write_message(EntityStatusResponse(0xFF, 0xFF, 0xFF, 0xFFFFFFFF), stream)
        write_message(DiagnosticMessage(0xFFFF, 0x0000), stream)
        assert stream.getvalue() == bytes.fromhex(
            "02fd400200000007" "ffffffffffffff" "02fd800100000004" "ffff0000"
        )


@pytest.mark.unit
class TestRead:
    def test_read_message(self) -> None:
        stream = io.BytesIO(ALIVE_CHECK_RESPONSE)
        assert read_message(AliveCheckResponse, stream) == AliveCheckResponse(0x0454)
        assert stream.read() == b""

    def test_unexpected_payload_type(self) -> None:
        stream = io.BytesIO(ALIVE_CHECK_RESPONSE)
        with pytest.raises(UnexpectedPayloadTypeError) as excinfo:
            read_message(PowerModeResponse, stream)
        assert excinfo.value.value == 0x0008
        # The payload is left in the stream
        assert stream.tell() == 8

    @pytest.mark.parametrize("code, payload_type", [(0x1234, Reserved), (0xF010, VmSpecific)])
    def test_unassigned_payload_type(self, code: int, payload_type: type) -> None:
        data = bytes.fromhex("02fd") + code.to_bytes(2, "big") + bytes.fromhex("000000020454")
        header = read_header(io.BytesIO(data))
        assert header.payload_type == payload_type(code)
        with pytest.raises(UnexpectedPayloadTypeError) as excinfo:
            read_message(AliveCheckResponse, io.BytesIO(data))
        assert excinfo.value.value == code
        with pytest.raises(UnexpectedPayloadTypeError):
            read_any_message(io.BytesIO(data))

    def test_invalid_length(self) -> None:
        data = bytes.fromhex("02fd000800000003045400")
        with pytest.raises(PayloadLengthError) as excinfo:
            read_message(AliveCheckResponse, io.BytesIO(data))
        assert excinfo.value.value == 3
        assert excinfo.value.expected == 2

    @pytest.mark.parametrize("size", [0, 4, 7, 9])
    def test_truncated(self, size: int) -> None:
        with pytest.raises(TransportError):
            read_message(AliveCheckResponse, io.BytesIO(ALIVE_CHECK_RESPONSE[:size]))

    def test_truncated_opaque_data(self) -> None:
        with pytest.raises(TransportError):
            read_message(DiagnosticMessage, io.BytesIO(DIAGNOSTIC_MESSAGE[:-1]))

    def test_transport_error_propagates(self) -> None:
        with pytest.raises(OSError) as excinfo:
            read_message(AliveCheckResponse, FailingStream())
        assert excinfo.value.errno == 104

    def test_reader_without_readinto(self) -> None:
        message = read_message(DiagnosticMessage, ReadOnlyStream(DIAGNOSTIC_MESSAGE))
        assert bytes(message.user_data) == bytes.fromhex("22f012")

    def test_header_then_payload(self) -> None:
        stream = io.BytesIO(DIAGNOSTIC_MESSAGE)
        header = read_header(stream)
        assert header.payload_type == PayloadType.DIAGNOSTIC_MESSAGE
        message = read_payload(DiagnosticMessage, stream, header.payload_length)
        assert message.target_address == 0x00ED

        stream = io.BytesIO(DIAGNOSTIC_MESSAGE)
        header = read_header(stream)
        read_replace_payload(message, stream, header.payload_length)
        assert bytes(message.user_data) == bytes.fromhex("22f012")

    def test_read_replace_message(self) -> None:
        message = DiagnosticMessage(0, 0, OwnedBuffer(bytes(64)))
        storage = message.user_data.get_ref()
        read_replace_message(message, io.BytesIO(DIAGNOSTIC_MESSAGE))
        assert message.source_address == 0x0123
        assert message.user_data.get_ref() is storage
        assert storage == bytearray.fromhex("22f012")

    def test_read_replace_message_unexpected(self) -> None:
        message = AliveCheckResponse(0x0001)
        with pytest.raises(UnexpectedPayloadTypeError):
            read_replace_message(message, io.BytesIO(DIAGNOSTIC_MESSAGE))
        assert message == AliveCheckResponse(0x0001)

    def test_read_any_message(self) -> None:
        stream = io.BytesIO(
            ALIVE_CHECK_RESPONSE + DIAGNOSTIC_MESSAGE + bytes.fromhex("02fd000700000000")
        )
        assert read_any_message(stream) == AliveCheckResponse(0x0454)
        assert isinstance(read_any_message(stream), DiagnosticMessage)
        assert read_any_message(stream) == AliveCheckRequest()
        with pytest.raises(TransportError):
            read_any_message(stream)

    def test_payload_classes_cover_all_types(self) -> None:
        assert set(PAYLOAD_CLASSES) == set(PayloadType)
        for payload_type, payload_class in PAYLOAD_CLASSES.items():
            assert payload_class.payload_type() is payload_type

    def test_back_to_back(self) -> None:
        stream = io.BytesIO()
        write_message(DiagnosticMessage(0x0E00, 0x1001, OwnedBuffer(b"\x10\x03")), stream)
        write_message(DiagnosticMessagePositiveAck(0x1001, 0x0E00), stream)
        stream.seek(0)
        first = read_message(DiagnosticMessage, stream)
        second = read_message(DiagnosticMessagePositiveAck, stream)
        assert bytes(first.user_data) == b"\x10\x03"
        assert second.target_address == 0x0E00
        assert stream.read() == b""

    def test_trace_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(TRACE, logger="doip.io")
        read_message(AliveCheckResponse, io.BytesIO(ALIVE_CHECK_RESPONSE))
        assert any(record.levelno == TRACE for record in caplog.records)

    def test_mismatch_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="doip.io")
        with pytest.raises(UnexpectedPayloadTypeError):
            read_message(PowerModeResponse, io.BytesIO(ALIVE_CHECK_RESPONSE))
        assert "0x0008" in caplog.text


@pytest.mark.unit
class TestReadBorrowed:
    def test_read_borrowed_message(self) -> None:
        message = read_borrowed_message(DiagnosticMessage, DIAGNOSTIC_MESSAGE)
        assert message.source_address == 0x0123
        assert bytes(message.user_data) == bytes.fromhex("22f012")

    def test_trailing_bytes_ignored(self) -> None:
        buffer = bytearray(DIAGNOSTIC_MESSAGE + bytes.fromhex("deadbeef"))
        message = read_borrowed_message(DiagnosticMessage, buffer)
        assert bytes(message.user_data) == bytes.fromhex("22f012")
        buffer[8 + 4] = 0x2E
        assert bytes(message.user_data) == bytes.fromhex("2ef012")

    def test_header_too_short(self) -> None:
        with pytest.raises(PayloadLengthError):
            read_borrowed_message(DiagnosticMessage, DIAGNOSTIC_MESSAGE[:7])

    def test_payload_too_short(self) -> None:
        with pytest.raises(PayloadLengthError) as excinfo:
            read_borrowed_message(DiagnosticMessage, DIAGNOSTIC_MESSAGE[:-1])
        assert excinfo.value.value == 6
        assert excinfo.value.expected == 7

    def test_unexpected_payload_type(self) -> None:
        with pytest.raises(UnexpectedPayloadTypeError) as excinfo:
            read_borrowed_message(DiagnosticMessagePositiveAck, DIAGNOSTIC_MESSAGE)
        assert excinfo.value.value == 0x8001
