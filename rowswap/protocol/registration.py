"""
Registration sub-protocol.

Request: ``"<CMD>:<name>:<port>"`` or ``"<CMD>:<name>:<address>:<port>"``
with ``<CMD>`` one of REGISTER / DISMISS (case-insensitive). The response
is a single result code (see ``result_code``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rowswap.models import is_valid_port

from .errors import MalformedRequestError, UnknownCommandError
from .framing import MAX_FRAME_SIZE, frame_text, unframe_text


class RegistrationCommand(Enum):
    REGISTER = "REGISTER"
    DISMISS = "DISMISS"


@dataclass(slots=True, frozen=True)
class RegistrationRequest:
    command: RegistrationCommand
    name: str
    port: int
    address: str | None = None

    @property
    def is_address_qualified(self) -> bool:
        return self.address is not None

    def to_text(self) -> str:
        if self.address is None:
            return f"{self.command.value}:{self.name}:{self.port}"

        return f"{self.command.value}:{self.name}:{self.address}:{self.port}"


def encode_registration_request(
    request: RegistrationRequest,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> bytes:
    if not request.name or ":" in request.name:
        raise MalformedRequestError(
            f"Name must be non-empty and must not contain ':': {request.name!r}"
        )

    return frame_text(request.to_text(), max_frame_size=max_frame_size)


def decode_registration_request(
    data: bytes,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> RegistrationRequest:
    """
    Decode a registration request frame.

    All tokens are parsed before the command is checked, so an incomplete
    request is malformed even when its command is unknown.

    Raises:
        MalformedFrameError: If the frame itself is invalid.
        FrameTooLargeError: If the datagram is oversized.
        MalformedRequestError: Missing tokens, empty name or address,
            non-numeric or out-of-range port.
        UnknownCommandError: Well-formed request with an unknown command.
    """
    text = unframe_text(data, max_frame_size=max_frame_size)

    command_token, separator, remainder = text.partition(":")
    if not separator:
        raise MalformedRequestError(f"Missing name and port: {text!r}")

    name, separator, endpoint_text = remainder.partition(":")
    if not separator or not name:
        raise MalformedRequestError(f"Missing name or port: {text!r}")

    address: str | None = None
    address_text, separator, port_text = endpoint_text.rpartition(":")
    if separator:
        if not address_text:
            raise MalformedRequestError(f"Empty address: {text!r}")

        address = address_text

    try:
        port = int(port_text)

    except ValueError as port_error:
        raise MalformedRequestError(
            f"Port is not a number: {port_text!r}"
        ) from port_error

    if not is_valid_port(port):
        raise MalformedRequestError(f"Port out of range: {port}")

    try:
        command = RegistrationCommand(command_token.upper())

    except ValueError as command_error:
        raise UnknownCommandError(command_token) from command_error

    return RegistrationRequest(
        command=command,
        name=name,
        port=port,
        address=address,
    )
