"""
Lookup sub-protocol.

Request: the raw name. Response: ``"<address>:<port>"`` or the fixed
NOT_FOUND_MESSAGE sentinel. Clients decode the response into a tagged
``Found | NotFound`` result, so a garbled reply is an error rather than a
negative lookup.
"""

from __future__ import annotations

from dataclasses import dataclass

from rowswap.models import Endpoint

from .errors import MalformedRequestError, MalformedResponseError
from .framing import MAX_FRAME_SIZE, frame_text, unframe_text

NOT_FOUND_MESSAGE = "The requested file does not exist, so there is no corresponding endpoint"


@dataclass(slots=True, frozen=True)
class Found:
    name: str
    endpoint: Endpoint


@dataclass(slots=True, frozen=True)
class NotFound:
    name: str


LookupResult = Found | NotFound


def encode_lookup_request(
    name: str,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> bytes:
    if not name.strip():
        raise MalformedRequestError("Name must not be blank")

    return frame_text(name, max_frame_size=max_frame_size)


def decode_lookup_request(
    data: bytes,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> str:
    return unframe_text(data, max_frame_size=max_frame_size)


def encode_lookup_response(
    endpoint: Endpoint | None,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> bytes:
    if endpoint is None:
        return frame_text(NOT_FOUND_MESSAGE, max_frame_size=max_frame_size)

    return frame_text(str(endpoint), max_frame_size=max_frame_size)


def decode_lookup_response(
    name: str,
    data: bytes,
    max_frame_size: int = MAX_FRAME_SIZE,
) -> LookupResult:
    text = unframe_text(data, max_frame_size=max_frame_size)

    if text == NOT_FOUND_MESSAGE:
        return NotFound(name)

    try:
        return Found(name, Endpoint.parse(text))

    except ValueError as parse_error:
        raise MalformedResponseError(
            f"Lookup response is neither an endpoint nor the not-found sentinel: {text!r}"
        ) from parse_error
