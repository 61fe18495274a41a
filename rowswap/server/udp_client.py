import asyncio
from typing import Tuple

from rowswap.env import Env, TimeParser

from .address_resolver import resolve_ipv4
from .errors import TransportError
from .udp_protocol import UDPSocketProtocol


class UDPClient:
    """
    Sends one datagram and waits for exactly one reply.

    Requests on the same client are serialized. Without a configured
    ``ROWSWAP_REQUEST_TIMEOUT`` a request waits indefinitely.
    """

    def __init__(
        self,
        env: Env,
        name: str = "udp_client",
    ) -> None:
        self.env = env
        self.name = name

        self._timeout: float | None = None
        if env.ROWSWAP_REQUEST_TIMEOUT:
            self._timeout = TimeParser().parse(env.ROWSWAP_REQUEST_TIMEOUT)

        self._transport: asyncio.DatagramTransport | None = None
        self._request_lock = asyncio.Lock()
        self._pending: asyncio.Future | None = None
        self._pending_addr: Tuple[str, int] | None = None
        self._failure: Exception | None = None

    @property
    def connected(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    @property
    def local_address(self) -> Tuple[str, int] | None:
        if self._transport is None:
            return None

        return self._transport.get_extra_info("sockname")

    async def connect(self) -> None:
        if self.connected:
            return

        loop = asyncio.get_running_loop()

        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: UDPSocketProtocol(self),
                local_addr=("0.0.0.0", 0),
            )

        except OSError as connect_error:
            raise TransportError(
                f"Could not open client socket: {connect_error}",
                self.name,
            ) from connect_error

        self._transport = transport
        self._failure = None

    def read(self, data: bytes, addr: Tuple[str, int]) -> None:
        # Replies without an outstanding request, or from anywhere but the
        # request target, are stale and dropped.
        if self._pending is None or self._pending.done():
            return

        pending_host, pending_port = self._pending_addr
        reply_host, reply_port = addr[:2]

        # A wildcard target is answered from whichever local address the
        # kernel picks.
        if reply_port != pending_port or pending_host not in (reply_host, "0.0.0.0"):
            return

        self._pending.set_result(data)

    def fail(self, error: Exception) -> None:
        self._failure = error

        if self._pending is not None and not self._pending.done():
            self._pending.set_exception(error)

    async def request(
        self,
        addr: Tuple[str, int],
        payload: bytes,
        timeout: float | None = None,
    ) -> bytes:
        """
        Send ``payload`` to ``addr`` and return the reply datagram.

        Raises:
            TransportError: If sending or receiving fails or the reply
                does not arrive within the timeout.
        """
        if timeout is None:
            timeout = self._timeout

        if not self.connected:
            await self.connect()

        if self._failure is not None:
            raise TransportError(str(self._failure), self.name, addr)

        async with self._request_lock:
            loop = asyncio.get_running_loop()

            try:
                host, port = addr
                target = (await resolve_ipv4(host), port)

                self._pending = loop.create_future()
                self._pending_addr = target
                self._transport.sendto(payload, target)

                return await asyncio.wait_for(
                    self._pending,
                    timeout=timeout,
                )

            except asyncio.TimeoutError as timeout_error:
                raise TransportError(
                    f"No reply within {timeout} seconds",
                    self.name,
                    addr,
                ) from timeout_error

            except OSError as request_error:
                raise TransportError(
                    str(request_error),
                    self.name,
                    addr,
                ) from request_error

            finally:
                self._pending = None
                self._pending_addr = None

    async def close(self) -> None:
        if self._transport is not None:
            self._transport.close()

        self._transport = None

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
