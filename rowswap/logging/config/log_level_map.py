from typing import Dict

from rowswap.logging.models import LogLevel


class LogLevelMap:
    """Severity ranks, in LogLevel declaration order (TRACE lowest)."""

    def __init__(self) -> None:
        self._levels: Dict[LogLevel, int] = {
            level: severity for severity, level in enumerate(LogLevel)
        }

    def __getitem__(self, level: LogLevel) -> int:
        return self._levels[level]

    def at_least(self, level: LogLevel, threshold: LogLevel) -> bool:
        return self._levels[level] >= self._levels[threshold]
