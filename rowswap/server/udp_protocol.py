import asyncio
from typing import Protocol, Tuple


class DatagramConnection(Protocol):
    def read(self, data: bytes, addr: Tuple[str, int]) -> None:
        ...

    def fail(self, error: Exception) -> None:
        ...


class UDPSocketProtocol(asyncio.DatagramProtocol):
    """
    Adapts asyncio datagram callbacks to the owning server or client.

    Received datagrams are handed to ``conn.read`` as-is. Socket errors and
    an abnormal connection loss are handed to ``conn.fail``.
    """

    def __init__(self, conn: DatagramConnection):
        super().__init__()
        self.transport: asyncio.DatagramTransport | None = None
        self.conn = conn
        self.read = conn.read

        loop = asyncio.get_running_loop()
        self.on_con_lost = loop.create_future()

    def connection_made(self, transport: asyncio.DatagramTransport):
        self.transport = transport

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        self.read(data, addr)

    def error_received(self, exc: Exception) -> None:
        self.conn.fail(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None:
            self.conn.fail(exc)

        if not self.on_con_lost.done():
            self.on_con_lost.set_result(True)
