from __future__ import annotations

from dataclasses import dataclass

from .errors import MalformedRequestError
from .framing import MAX_FRAME_SIZE, frame_text, unframe_text

SWAP_OK = "OK"
MALFORMED_SWAP_MESSAGE = "Malformed request: expected '<line1>,<line2>' with non-negative line numbers"


@dataclass(slots=True, frozen=True)
class SwapRequest:
    first: int
    second: int

    def to_text(self) -> str:
        return f"{self.first},{self.second}"


def encode_swap_request(
    request: SwapRequest,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> bytes:
    if request.first < 0 or request.second < 0:
        raise MalformedRequestError(
            f"Line numbers must be non-negative: {request.to_text()}"
        )

    return frame_text(request.to_text(), max_frame_size=max_frame_size)


def decode_swap_request(
    data: bytes,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> SwapRequest:
    text = unframe_text(data, max_frame_size=max_frame_size)

    tokens = text.split(",")
    if len(tokens) != 2:
        raise MalformedRequestError(f"Expected two line numbers: {text!r}")

    try:
        first, second = (int(token) for token in tokens)

    except ValueError as line_error:
        raise MalformedRequestError(
            f"Line numbers must be integers: {text!r}"
        ) from line_error

    if first < 0 or second < 0:
        raise MalformedRequestError(f"Line numbers must be non-negative: {text!r}")

    return SwapRequest(first, second)


def encode_swap_response(
    outcome: str,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> bytes:
    return frame_text(outcome, max_frame_size=max_frame_size)


def decode_swap_response(
    data: bytes,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> str:
    return unframe_text(data, max_frame_size=max_frame_size)
