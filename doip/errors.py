"""Exceptions raised by the DoIP codec.

Errors raised by the byte source or sink themselves (OSError,
serial.SerialException, ...) are not wrapped and reach the caller as-is.
"""


class DoIpError(Exception):
    """Base class for all codec errors."""

    pass


class PayloadLengthError(DoIpError):
    """Raised when the declared payload length is not valid for the payload type."""

    def __init__(self, value: int, expected: int) -> None:
        super().__init__(
            f"Payload length in header does not match expected payload type length: "
            f"{value}, expected: {expected}"
        )
        self.value = value
        self.expected = expected


class UnknownActivationTypeError(DoIpError):
    """Raised when a routing activation request carries an unknown activation type."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Unknown activation type value: {value:#04x}")
        self.value = value


class UnknownRoutingActivationResponseCodeError(DoIpError):
    """Raised when a routing activation response carries an unknown response code."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Unknown routing activation response code value: {value:#04x}")
        self.value = value


class UnexpectedPayloadTypeError(DoIpError):
    """Raised when the header announces a payload type other than the one expected."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Unexpected payload type found: {value:#06x}")
        self.value = value


class BufferTooSmallError(DoIpError):
    """Raised when decoding in place into a payload that borrows its data."""

    def __init__(self) -> None:
        super().__init__("Buffer too small: borrowed data cannot be resized in place")


class TransportError(DoIpError):
    """Raised when the source or sink transfers fewer bytes than required."""

    pass
