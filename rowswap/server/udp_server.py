import asyncio
import os
import socket
from typing import Any, Dict, Literal, Tuple

from rowswap.env import Env
from rowswap.logging import Entry, Logger
from rowswap.logging.rowswap_logging_models import (
    ServerDebug,
    ServerError,
    ServerFatal,
    ServerInfo,
    ServerTrace,
)
from rowswap.logging.config import LoggingConfig
from rowswap.protocol.errors import CodecError

from .errors import TransportError
from .udp_protocol import UDPSocketProtocol


ServerLogLevel = Literal[
    "trace",
    "debug",
    "info",
    "error",
    "fatal",
    "swap_debug",
    "swap_info",
    "swap_error",
]


class UDPServer:
    """
    Base class for a single-socket UDP request handler.

    Datagrams are queued as they arrive and handled strictly one at a
    time: receive, ``handle()``, reply, then the next datagram. Subclasses
    implement ``handle()`` and must turn every protocol-level problem into
    a reply. Only socket-level failures stop the loop, surfacing as a
    ``TransportError`` from ``run_forever()``.
    """

    def __init__(
        self,
        host: str,
        port: int,
        env: Env,
        name: str | None = None,
    ) -> None:
        if name is None:
            name = self.__class__.__name__.lower()

        self.host = host
        self.port = port
        self.env = env
        self.name = name

        self._max_frame_size = env.ROWSWAP_MAX_FRAME_SIZE
        self._receive_buffer_size = env.ROWSWAP_RECEIVE_BUFFER_SIZE
        self._reuse_address = env.ROWSWAP_REUSE_ADDRESS
        self._queue_size = env.ROWSWAP_REQUEST_QUEUE_SIZE

        self._loop: asyncio.AbstractEventLoop | None = None
        self._socket: socket.socket | None = None
        self._transport: asyncio.DatagramTransport | None = None
        self._requests: asyncio.Queue[Tuple[bytes, Tuple[str, int]] | None] | None = None
        self._serve_task: asyncio.Task | None = None
        self._failure: TransportError | None = None
        self._dropped = 0
        self._running = False

        self._logger = Logger()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        return (self.host, self.port)

    async def start_server(self) -> None:
        if self._running:
            return

        self._loop = asyncio.get_running_loop()

        LoggingConfig().update(**self.env.get_logging_config())

        udp_socket = socket.socket(
            socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP
        )

        try:
            if self._reuse_address:
                udp_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

            udp_socket.setsockopt(
                socket.SOL_SOCKET,
                socket.SO_RCVBUF,
                self._receive_buffer_size,
            )

            udp_socket.bind((self.host, self.port))
            udp_socket.setblocking(False)

        except OSError as bind_error:
            udp_socket.close()
            raise TransportError(
                f"Could not bind socket: {bind_error}",
                self.name,
                (self.host, self.port),
            ) from bind_error

        # Port 0 binds an ephemeral port.
        self.host, self.port = udp_socket.getsockname()
        self._socket = udp_socket
        self._configure_logger()

        self._requests = asyncio.Queue(maxsize=self._queue_size)
        self._failure = None
        self._dropped = 0

        transport, _ = await self._loop.create_datagram_endpoint(
            lambda: UDPSocketProtocol(self),
            sock=self._socket,
        )

        self._transport = transport
        self._running = True
        self._serve_task = self._loop.create_task(self._serve())

        await self._log(f"Listening on {self.host}:{self.port}")

    def _configure_logger(self):
        path: str | None = None
        if logs_directory := LoggingConfig().directory:
            path = os.path.join(logs_directory, f"{self.name}.json")

        self._logger.configure(
            name=self.name,
            path=path,
            models=self._logger_models(),
        )

    def _logger_models(self) -> Dict[str, Tuple[type[Entry], Dict[str, Any]]]:
        defaults = {
            "handler": self.name,
            "host": self.host,
            "port": self.port,
        }

        return {
            "trace": (ServerTrace, defaults),
            "debug": (ServerDebug, defaults),
            "info": (ServerInfo, defaults),
            "error": (ServerError, defaults),
            "fatal": (ServerFatal, defaults),
        }

    async def _log(self, message: str, level: ServerLogLevel = "info"):
        async with self._logger.context(name=self.name) as ctx:
            await ctx.log_prepared(message, name=level)

    def read(self, data: bytes, addr: Tuple[str, int]) -> None:
        if not self._running or self._requests is None:
            return

        try:
            self._requests.put_nowait((data, addr))

        except asyncio.QueueFull:
            self._dropped += 1

    def fail(self, error: Exception) -> None:
        if self._failure is None:
            self._failure = TransportError(
                str(error),
                self.name,
                (self.host, self.port),
            )

        self._stop_serving()

    def _stop_serving(self) -> None:
        if self._requests is None:
            return

        try:
            self._requests.put_nowait(None)

        except asyncio.QueueFull:
            # A full queue means the serve loop is busy and checks its
            # exit condition before the next get().
            pass

    async def handle(self, data: bytes, addr: Tuple[str, int]) -> bytes:
        raise NotImplementedError(
            "Err. - UDP servers must implement handle()"
        )

    async def _serve(self):
        while self._failure is None and self._running:
            request = await self._requests.get()
            if request is None:
                break

            if self._dropped:
                await self._log(
                    f"Dropped {self._dropped} datagrams while the queue was full",
                    level="debug",
                )
                self._dropped = 0

            data, addr = request
            sender_host, sender_port = addr

            await self._log(
                f"Received {len(data)} bytes from {sender_host}:{sender_port}",
                level="trace",
            )

            try:
                response = await self.handle(data, addr)
                self._transport.sendto(response, addr)

                await self._log(
                    f"Replied to {sender_host}:{sender_port}",
                    level="debug",
                )

            except CodecError as codec_error:
                self.fail(codec_error)

            except OSError as send_error:
                self.fail(send_error)

        self._running = False

        if self._failure is not None:
            await self._log(
                f"Transport failure: {self._failure.message}",
                level="fatal",
            )

            raise self._failure

    async def run_forever(self) -> None:
        """
        Serve until closed.

        Raises:
            TransportError: If the socket fails while serving.
        """
        if self._serve_task is None:
            await self.start_server()

        await self._serve_task

    async def close(self) -> None:
        if self._serve_task is None:
            return

        self._running = False

        if not self._serve_task.done():
            self._stop_serving()

        # A failure has already been logged and raised to run_forever().
        await asyncio.gather(self._serve_task, return_exceptions=True)

        if self._transport is not None:
            self._transport.close()

        await self._log(f"Closed {self.host}:{self.port}")
        await self._logger.close()

        self._serve_task = None
        self._transport = None
        self._socket = None

    def abort(self) -> None:
        self._running = False

        if self._serve_task and not self._serve_task.done():
            self._serve_task.cancel()

        if self._transport is not None:
            self._transport.abort()

        self._logger.abort()

        self._serve_task = None
        self._transport = None
        self._socket = None
