from typing import TypeVar, Any
from .logger_stream import LoggerStream


T = TypeVar('T')


class LoggerContext:
    def __init__(
        self,
        name: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
        models: dict[
            str,
            tuple[
                type[T],
                dict[str, Any],
            ]
        ] | None = None,
    ) -> None:
        self.name = name
        self.filename = filename
        self.directory = directory
        self.stream = LoggerStream(
            name=name,
            filename=filename,
            directory=directory,
            models=models,
        )

    async def __aenter__(self):
        await self.stream.initialize()

        if self.filename:
            await self.stream.open_file(
                self.filename,
                directory=self.directory,
                is_default=True,
            )

        return self.stream

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stream.close()
