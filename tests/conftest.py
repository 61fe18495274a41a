"""
Shared fixtures for the rowswap test suite.
"""

import os
from typing import Callable

import pytest

from rowswap.env import Env
from rowswap.logging.config.logging_config import (
    LoggingConfig,
    _global_disabled_loggers,
    _global_logging_directory,
    _global_logging_disabled,
)


@pytest.fixture
def env() -> Env:
    # A bounded request timeout keeps a broken test from hanging.
    return Env(
        ROWSWAP_LOG_LEVEL="error",
        ROWSWAP_REQUEST_TIMEOUT="5s",
    )


@pytest.fixture(autouse=True)
def quiet_logging():
    config = LoggingConfig()
    config.update(log_level="error")
    yield
    _global_logging_disabled.set(False)
    _global_disabled_loggers.set([])
    _global_logging_directory.set(None)
    config.update(log_level="info")


@pytest.fixture
def temp_directory(tmp_path) -> str:
    return str(tmp_path)


@pytest.fixture
def text_file_factory(tmp_path) -> Callable[..., str]:
    def create_text_file(
        lines: list[str],
        name: str = "report.txt",
        terminator: str = "\n",
        trailing_terminator: bool = True,
    ) -> str:
        content = terminator.join(lines)
        if trailing_terminator and lines:
            content += terminator

        path = os.path.join(str(tmp_path), name)
        with open(path, "w", encoding="utf-8", newline="") as text_file:
            text_file.write(content)

        return path

    return create_text_file
