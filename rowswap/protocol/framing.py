from __future__ import annotations

from .errors import FrameTooLargeError, MalformedFrameError

# Length prefix size (2 bytes = 16-bit unsigned big-endian payload length)
LENGTH_PREFIX_SIZE = 2

# Max frame size, length prefix included. One frame per datagram.
MAX_FRAME_SIZE = 256


def frame_message(data: bytes, max_frame_size: int = MAX_FRAME_SIZE) -> bytes:
    """
    Frame a payload with a length prefix.

    Returns: [2-byte length prefix (big-endian)] + [data]

    Raises:
        FrameTooLargeError: If the framed message would exceed max_frame_size.
    """
    frame_size = LENGTH_PREFIX_SIZE + len(data)
    if frame_size > max_frame_size:
        raise FrameTooLargeError(
            f"Frame length exceeds maximum: {frame_size} > {max_frame_size} bytes",
            actual_size=frame_size,
            max_size=max_frame_size,
        )

    length_prefix = len(data).to_bytes(LENGTH_PREFIX_SIZE, 'big')
    return length_prefix + data


def extract_framed(data: bytes, max_frame_size: int = MAX_FRAME_SIZE) -> bytes:
    """
    Extract the payload of a single length-prefixed frame.

    Raises:
        FrameTooLargeError: If the datagram exceeds max_frame_size.
        MalformedFrameError: If the prefix is missing or disagrees with
            the datagram length.
    """
    if len(data) > max_frame_size:
        raise FrameTooLargeError(
            f"Frame length exceeds maximum: {len(data)} > {max_frame_size} bytes",
            actual_size=len(data),
            max_size=max_frame_size,
        )

    if len(data) < LENGTH_PREFIX_SIZE:
        raise MalformedFrameError("Frame is shorter than its length prefix")

    message_length = int.from_bytes(data[:LENGTH_PREFIX_SIZE], 'big')
    payload = data[LENGTH_PREFIX_SIZE:]

    if len(payload) != message_length:
        raise MalformedFrameError(
            f"Frame length prefix {message_length} does not match payload length {len(payload)}"
        )

    return bytes(payload)


def frame_text(text: str, max_frame_size: int = MAX_FRAME_SIZE) -> bytes:
    return frame_message(text.encode("utf-8"), max_frame_size=max_frame_size)


def unframe_text(data: bytes, max_frame_size: int = MAX_FRAME_SIZE) -> str:
    payload = extract_framed(data, max_frame_size=max_frame_size)

    try:
        return payload.decode("utf-8")

    except UnicodeDecodeError as decode_error:
        raise MalformedFrameError(
            f"Frame payload is not valid UTF-8: {decode_error}"
        ) from decode_error
