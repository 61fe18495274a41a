from __future__ import annotations

import struct
from enum import IntEnum

from .errors import MalformedResponseError

# 4-byte big-endian signed integer
RESULT_CODE_FORMAT = ">i"
RESULT_CODE_SIZE = struct.calcsize(RESULT_CODE_FORMAT)


class ResultCode(IntEnum):
    """
    Registration result codes.

    PAIR_IN_USE and PAIR_NOT_CONSISTENT are the names used by the
    address-qualified request variant and share values with their
    port-only counterparts.
    """

    OK = 0
    MALFORMED_REQUEST = 1
    UNKNOWN_COMMAND = 2
    FILENAME_IN_USE = 3
    PORT_IN_USE = 4
    FILENAME_NOT_IN_USE = 5
    PORT_NOT_CONSISTENT = 6

    PAIR_IN_USE = 4
    PAIR_NOT_CONSISTENT = 6

    def describe(self) -> str:
        return _descriptions[self]


_descriptions: dict[ResultCode, str] = {
    ResultCode.OK: "OK",
    ResultCode.MALFORMED_REQUEST: "Malformed request",
    ResultCode.UNKNOWN_COMMAND: "Unknown command",
    ResultCode.FILENAME_IN_USE: "Filename already registered",
    ResultCode.PORT_IN_USE: "Endpoint already registered under another filename",
    ResultCode.FILENAME_NOT_IN_USE: "Filename not registered",
    ResultCode.PORT_NOT_CONSISTENT: "Endpoint does not match the filename's registration",
}


def encode_result_code(code: ResultCode) -> bytes:
    return struct.pack(RESULT_CODE_FORMAT, int(code))


def decode_result_code(data: bytes) -> ResultCode:
    if len(data) != RESULT_CODE_SIZE:
        raise MalformedResponseError(
            f"Result code must be {RESULT_CODE_SIZE} bytes, got {len(data)}"
        )

    (value,) = struct.unpack(RESULT_CODE_FORMAT, data)

    try:
        return ResultCode(value)

    except ValueError as value_error:
        raise MalformedResponseError(
            f"Unknown result code: {value}"
        ) from value_error
