from __future__ import annotations

import asyncio
import pathlib
from typing import (
    Dict,
    TypeVar,
    Any
)

from rowswap.logging.models import Entry

from .logger_context import LoggerContext

T = TypeVar('T', bound=Entry)


def _split_logfile_path(path: str | None) -> tuple[str | None, str | None]:
    if not path:
        return None, None

    logfile_path = pathlib.Path(path)
    is_logfile = len(logfile_path.suffix) > 0

    filename = logfile_path.name if is_logfile else None
    directory = str(logfile_path.parent.absolute()) if is_logfile else str(logfile_path.absolute())

    return filename, directory


class Logger:
    def __init__(self) -> None:
        self._contexts: Dict[str, LoggerContext] = {}

    def __getitem__(self, name: str):

        if self._contexts.get(name) is None:
            self._contexts[name] = LoggerContext(name=name)

        return self._contexts[name]

    def configure(
        self,
        name: str | None = None,
        path: str | None = None,
        models: dict[
            str,
            tuple[
                type[T],
                dict[str, Any],
            ]
        ] | None = None,
    ):
        if name is None:
            name = 'default'

        filename, directory = _split_logfile_path(path)

        self._contexts[name] = LoggerContext(
            name=name,
            filename=filename,
            directory=directory,
            models=models,
        )

    def context(
        self,
        name: str | None = None,
    ):
        if name is None:
            name = 'default'

        if self._contexts.get(name) is None:
            self._contexts[name] = LoggerContext(name=name)

        return self._contexts[name]

    async def close(self):
        if len(self._contexts) > 0:
            await asyncio.gather(*[
                context.stream.close() for context in self._contexts.values()
            ])

    def abort(self):

        for context in self._contexts.values():
            context.stream.abort()
