"""
Wire codec exceptions.

Decoding errors on requests are protocol-level outcomes: handlers turn them
into a result code or an outcome string for the peer. Encoding errors mean
the message can never be sent as a single frame.
"""


class CodecError(Exception):
    pass


class FrameTooLargeError(CodecError):
    """Raised when a frame exceeds the maximum datagram size."""

    def __init__(
        self,
        message: str,
        actual_size: int = 0,
        max_size: int = 0,
    ) -> None:
        super().__init__(message)
        self.actual_size = actual_size
        self.max_size = max_size


class MalformedFrameError(CodecError):
    """Raised when a frame's length prefix or payload is invalid."""
    pass


class MalformedRequestError(CodecError):
    """Raised when a request payload is missing tokens or has bad values."""
    pass


class UnknownCommandError(CodecError):
    """Raised when a registration request carries an unrecognized command."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Unknown command: {command!r}")
        self.command = command


class MalformedResponseError(CodecError):
    """Raised when a response cannot be interpreted by a client."""
    pass
