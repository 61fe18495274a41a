from __future__ import annotations
from pydantic import BaseModel, StrictBool, StrictInt, StrictStr
from typing import Callable, Dict, Literal, Union

PrimaryType = Union[str, int, float, bytes, bool]


def parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Env(BaseModel):
    ROWSWAP_MAX_FRAME_SIZE: StrictInt = 256
    ROWSWAP_RECEIVE_BUFFER_SIZE: StrictInt = 65535
    ROWSWAP_REQUEST_QUEUE_SIZE: StrictInt = 1024
    ROWSWAP_REQUEST_TIMEOUT: StrictStr | None = None
    ROWSWAP_REUSE_ADDRESS: StrictBool = True
    ROWSWAP_LOG_LEVEL: StrictStr = "info"
    ROWSWAP_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    ROWSWAP_LOGS_DIRECTORY: StrictStr | None = None
    ROWSWAP_TEMP_FILE_PREFIX: StrictStr = ".rowswap-"
    ROWSWAP_FILE_ENCODING: StrictStr = "utf-8"

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "ROWSWAP_MAX_FRAME_SIZE": int,
            "ROWSWAP_RECEIVE_BUFFER_SIZE": int,
            "ROWSWAP_REQUEST_QUEUE_SIZE": int,
            "ROWSWAP_REQUEST_TIMEOUT": str,
            "ROWSWAP_REUSE_ADDRESS": parse_bool,
            "ROWSWAP_LOG_LEVEL": str,
            "ROWSWAP_LOG_OUTPUT": str,
            "ROWSWAP_LOGS_DIRECTORY": str,
            "ROWSWAP_TEMP_FILE_PREFIX": str,
            "ROWSWAP_FILE_ENCODING": str,
        }

    def get_logging_config(self) -> dict:
        """Get logging configuration from environment settings."""
        return {
            'log_level': self.ROWSWAP_LOG_LEVEL,
            'log_output': self.ROWSWAP_LOG_OUTPUT,
            'log_directory': self.ROWSWAP_LOGS_DIRECTORY,
        }
