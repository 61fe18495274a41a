import asyncio
import datetime
import io
import os
import pathlib
import sys
import threading
from collections import defaultdict
from typing import (
    Any,
    Dict,
    TypeVar,
)

from rowswap.logging.config.logging_config import LoggingConfig
from rowswap.logging.config.stream_type import StreamType
from rowswap.logging.models import Entry, Log, LogLevel

T = TypeVar('T', bound=Entry)

_streams_directory = os.path.dirname(os.path.abspath(__file__))

CONSOLE_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"


class LoggerStream:
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
        if name is None:
            name = "default"

        self._name = name
        self._default_logfile = filename
        self._default_log_directory = directory

        self._init_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

        self._files: Dict[str, io.BufferedRandom] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cwd: str | None = None
        self._default_logfile_path: str | None = None

        self._config = LoggingConfig()
        self._initialized: bool = False

        self._models: Dict[str, tuple[type[Entry], dict[str, Any]]] = {}

        if models is None:
            models = {}

        for model_name, config in models.items():
            model, defaults = config

            self._models[model_name] = (
                model,
                defaults
            )

        self._models.update({
            'default': (
                Entry,
                {
                    'level': LogLevel.INFO
                }
            )
        })

    async def initialize(self):

        async with self._init_lock:

            if self._initialized:
                return

            if self._loop is None:
                self._loop = asyncio.get_running_loop()

            if self._cwd is None:
                self._cwd = await self._loop.run_in_executor(
                    None,
                    os.getcwd,
                )

            self._initialized = True

    async def open_file(
        self,
        filename: str,
        directory: str | None = None,
        is_default: bool = False,
    ):
        if self._initialized is False:
            await self.initialize()

        logfile_path = self._to_logfile_path(filename, directory=directory)

        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._open_file,
                logfile_path,
            )

        if is_default:
            self._default_logfile_path = logfile_path

    def _open_file(
        self,
        logfile_path: str,
    ):
        if (
            logfile := self._files.get(logfile_path)
        ) and logfile.closed is False:
            return

        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        logfile_directory = str(resolved_path.parent)
        path = str(resolved_path)

        if not os.path.exists(logfile_directory):
            os.makedirs(logfile_directory)

        if not os.path.exists(path):
            resolved_path.touch()

        self._files[logfile_path] = open(path, "ab+")

    async def close(self):
        if self._loop is None:
            return

        for logfile_path in list(self._files):
            async with self._file_locks[logfile_path]:
                await self._loop.run_in_executor(
                    None,
                    self._close_file_at_path,
                    logfile_path,
                )

        self._initialized = False

    def abort(self):
        for logfile_path in self._files:
            if (
                logfile := self._files.get(logfile_path)
            ) and logfile.closed is False:
                logfile.close()

        self._initialized = False

    def _close_file_at_path(self, logfile_path: str):
        if (
            logfile := self._files.get(logfile_path)
        ) and logfile.closed is False:
            logfile.close()

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ):
        filename_path = pathlib.Path(filename)

        assert (
            filename_path.suffix == ".json"
        ), "Err. - file must be JSON file for logs."

        if directory is None and self._config.directory:
            directory = self._config.directory

        elif directory is None:
            directory: str = os.path.join(self._cwd)

        logfile_path: str = os.path.join(directory, filename_path)

        return logfile_path

    async def log_prepared(
        self,
        message: str,
        name: str = 'default',
    ):
        await self.log(self._to_entry(message, name))

    async def log(self, entry: T):
        if self._default_logfile or self._default_log_directory:
            await self._log_to_file(entry)

        else:
            await self._log(entry)

    def _to_entry(
        self,
        message: str,
        name: str,
    ):
        model, defaults = self._models.get(
            name,
            self._models.get('default')
        )

        return model(
            message=message,
            **defaults
        )

    async def _log(self, entry: T):
        if self._config.enabled(self._name, entry.level) is False:
            return

        if self._initialized is False:
            await self.initialize()

        log_file, line_number, function_name = self._find_caller()

        await self._loop.run_in_executor(
            None,
            self._write_to_stream,
            self._config.output,
            entry.to_template(
                CONSOLE_TEMPLATE,
                context={
                    "filename": log_file,
                    "function_name": function_name,
                    "line_number": line_number,
                    "thread_id": threading.get_native_id(),
                    "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
                },
            ),
        )

    def _write_to_stream(
        self,
        stream_type: StreamType,
        message: str,
    ):
        stream = sys.stdout if stream_type == StreamType.STDOUT else sys.stderr
        stream.write(message + "\n")
        stream.flush()

    async def _log_to_file(self, entry: T):
        if self._config.enabled(self._name, entry.level) is False:
            return

        if self._initialized is False:
            await self.initialize()

        if self._default_logfile_path:
            logfile_path = self._default_logfile_path

        elif self._default_logfile:
            logfile_path = self._to_logfile_path(
                self._default_logfile,
                directory=self._default_log_directory,
            )

        else:
            logfile_path = os.path.join(self._default_log_directory, "logs.json")

        if self._files.get(logfile_path) is None or self._files[logfile_path].closed:
            async with self._file_locks[logfile_path]:
                await self._loop.run_in_executor(
                    None,
                    self._open_file,
                    logfile_path,
                )

        log_file, line_number, function_name = self._find_caller()

        log = Log(
            entry=entry,
            filename=log_file,
            function_name=function_name,
            line_number=line_number
        )

        try:
            async with self._file_locks[logfile_path]:
                await self._loop.run_in_executor(
                    None,
                    self._write_to_file,
                    log,
                    logfile_path,
                )

        except OSError as err:
            error_template = "{timestamp} - {level} - {thread_id}.{filename}:{function_name}.{line_number} - {error}"

            await self._loop.run_in_executor(
                None,
                self._write_to_stream,
                StreamType.STDERR,
                entry.to_template(
                    error_template,
                    context={
                        "filename": log.filename,
                        "function_name": log.function_name,
                        "line_number": log.line_number,
                        "error": str(err),
                        "thread_id": log.thread_id,
                        "timestamp": log.timestamp,
                    },
                ),
            )

    def _write_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if (
            logfile := self._files.get(logfile_path)
        ) and (
            logfile.closed is False
        ):

            logfile.write(log.to_json_line())
            logfile.flush()

    def _find_caller(self):
        """
        Find the stack frame of the caller so that we can note the source
        file name, line number and function name.
        """
        frame = sys._getframe(1)

        while frame.f_back is not None and os.path.dirname(
            os.path.abspath(frame.f_code.co_filename)
        ) == _streams_directory:
            frame = frame.f_back

        code = frame.f_code

        return (
            code.co_filename,
            frame.f_lineno,
            code.co_name,
        )
