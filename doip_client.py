#!/usr/bin/env python3
"""Example DoIP tester.

Activates routing on a diagnostic entity, sends one UDS request and prints
the UDS response:
  1. RoutingActivationRequest  -> RoutingActivationResponse
  2. DiagnosticMessage         -> DiagnosticMessagePositiveAck
  3.                           <- DiagnosticMessage (UDS response)
  4. DiagnosticMessagePositiveAck (echoing the response) ->

The connection is opened with pyserial's URL handlers, so socket://host:port
reaches a DoIP entity over TCP, and any other pyserial URL or device path
works as well.
"""

import argparse
import logging
import sys

import serial

from doip import (
    TCP_DATA_PORT,
    ActivationType,
    DiagnosticMessage,
    DiagnosticMessageNegativeAck,
    DiagnosticMessagePositiveAck,
    DoIpError,
    LogicalAddress,
    OwnedBuffer,
    Port,
    RoutingActivationRequest,
    RoutingActivationResponse,
    read_any_message,
    read_message,
    write_message,
)

logger = logging.getLogger(__name__)

DEFAULT_URL = f"socket://127.0.0.1:{TCP_DATA_PORT}"
DEFAULT_SOURCE_ADDRESS = 0x0F02
DEFAULT_TARGET_ADDRESS = 0x0077
DEFAULT_TIMEOUT_S = 2.0
DEFAULT_REQUEST = "22f190"  # ReadDataByIdentifier(VIN)


class ClientError(Exception):
    """Raised when the diagnostic entity refuses the exchange."""

    pass


def activate_routing(
    port: Port,
    source_address: LogicalAddress,
    activation_type: ActivationType = ActivationType.DEFAULT,
) -> RoutingActivationResponse:
    """Send a routing activation request and wait for its response.

    Raises ClientError unless routing is activated.
    """
    request = RoutingActivationRequest(
        source_address=source_address,
        activation_type=activation_type,
        reserved_oem=bytes(4),
    )
    write_message(request, port)
    logger.debug(f"Sent routing activation (source={source_address:#06x})")

    response = read_message(RoutingActivationResponse, port)
    code = response.routing_activation_response_code
    if not code.activated:
        raise ClientError(f"Routing activation denied: {code.name}")
    logger.info(
        f"Routing activated by entity {response.logical_address_of_doip_entity:#06x} "
        f"({code.name})"
    )
    return response


def send_diagnostic(
    port: Port,
    source_address: LogicalAddress,
    target_address: LogicalAddress,
    request: bytes,
) -> DiagnosticMessage:
    """Send one UDS request, wait for the ack, then for the UDS response.

    The response is acknowledged before being returned.
    """
    write_message(
        DiagnosticMessage(source_address, target_address, OwnedBuffer(request)), port
    )
    logger.debug(f"Sent diagnostic message: {request.hex()}")

    ack = read_any_message(port)
    match ack:
        case DiagnosticMessagePositiveAck():
            logger.debug("Diagnostic message acknowledged")
        case DiagnosticMessageNegativeAck():
            raise ClientError(f"Diagnostic message refused: {ack.ack_code}")
        case _:
            raise ClientError(f"Expected diagnostic acknowledgement, got {type(ack).__name__}")

    response = read_message(DiagnosticMessage, port)
    acknowledge(port, source_address, response)
    return response


def acknowledge(
    port: Port, source_address: LogicalAddress, response: DiagnosticMessage
) -> DiagnosticMessagePositiveAck:
    """Send the positive acknowledgement of a diagnostic response, echoing its data.

    The echoed data is a copy: the ack and response never share a buffer.
    """
    ack = DiagnosticMessagePositiveAck(
        source_address=source_address,
        target_address=response.source_address,
        previous_diagnostic_message_data=OwnedBuffer(bytes(response.user_data)),
    )
    write_message(ack, port)
    return ack


def open_port(url: str, timeout_s: float) -> serial.SerialBase:
    """Open a connection from a pyserial URL (eg. socket://host:port) or device path."""
    port = serial.serial_for_url(url, timeout=timeout_s, write_timeout=timeout_s)
    logger.debug(f"Opened {url}")
    return port


def run(args: argparse.Namespace) -> int:
    try:
        request = bytes.fromhex(args.request)
    except ValueError as e:
        logger.error(f"Invalid UDS request {args.request!r}: {e}")
        return 2

    try:
        port = open_port(args.url, args.timeout)
    except serial.SerialException as e:
        logger.error(f"Cannot open {args.url}: {e}")
        return 1

    try:
        activate_routing(port, args.source_address, ActivationType[args.activation_type])
        response = send_diagnostic(port, args.source_address, args.target_address, request)
        print(f"response: {bytes(response.user_data).hex()}")
        return 0
    except (DoIpError, ClientError) as e:
        logger.error(f"DoIP error: {e}")
        return 1
    except serial.SerialException as e:
        logger.error(f"Connection error: {e}")
        return 1
    finally:
        port.close()


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Send one UDS request to a DoIP entity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                   ReadDID 0xF190 on 127.0.0.1:13400
  %(prog)s -u socket://192.168.0.10:13400 -t 0x1001 1003
""",
    )
    parser.add_argument(
        "request",
        nargs="?",
        default=DEFAULT_REQUEST,
        help=f"UDS request as hex (default: {DEFAULT_REQUEST})",
    )
    parser.add_argument(
        "-u", "--url", default=DEFAULT_URL, help=f"pyserial URL (default: {DEFAULT_URL})"
    )
    parser.add_argument(
        "-s",
        "--source-address",
        type=lambda value: int(value, 0),
        default=DEFAULT_SOURCE_ADDRESS,
        help=f"Tester logical address (default: {DEFAULT_SOURCE_ADDRESS:#06x})",
    )
    parser.add_argument(
        "-t",
        "--target-address",
        type=lambda value: int(value, 0),
        default=DEFAULT_TARGET_ADDRESS,
        help=f"Target logical address (default: {DEFAULT_TARGET_ADDRESS:#06x})",
    )
    parser.add_argument(
        "-a",
        "--activation-type",
        choices=[member.name for member in ActivationType],
        default=ActivationType.DEFAULT.name,
        help="Routing activation type (default: DEFAULT)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_S,
        help=f"Read/write timeout in seconds (default: {DEFAULT_TIMEOUT_S})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
