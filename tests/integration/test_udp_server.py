import asyncio
from typing import Tuple

import pytest

from rowswap.env import Env
from rowswap.protocol import frame_text, unframe_text
from rowswap.server import TransportError, UDPClient, UDPServer


class RecordingServer(UDPServer):
    def __init__(self, env: Env) -> None:
        super().__init__("127.0.0.1", 0, env, name="recording")
        self.in_flight = 0
        self.max_in_flight = 0
        self.handled: list[str] = []

    async def handle(self, data: bytes, addr: Tuple[str, int]) -> bytes:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)

        await asyncio.sleep(0.01)

        text = unframe_text(data)
        self.handled.append(text)
        self.in_flight -= 1

        return frame_text(text.upper())


class GatedServer(UDPServer):
    def __init__(self, env: Env) -> None:
        super().__init__("127.0.0.1", 0, env, name="gated")
        self.received = asyncio.Event()
        self.release = asyncio.Event()
        self.handled: list[str] = []

    async def handle(self, data: bytes, addr: Tuple[str, int]) -> bytes:
        self.received.set()
        await self.release.wait()

        text = unframe_text(data)
        self.handled.append(text)

        return frame_text(text.upper())


class ReplySink(asyncio.DatagramProtocol):
    def __init__(self) -> None:
        self.replies: asyncio.Queue[bytes] = asyncio.Queue()

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        self.replies.put_nowait(data)


async def open_sink() -> Tuple[asyncio.DatagramTransport, ReplySink, Tuple[str, int]]:
    loop = asyncio.get_running_loop()
    transport, sink = await loop.create_datagram_endpoint(
        ReplySink,
        local_addr=("127.0.0.1", 0),
    )

    return transport, sink, transport.get_extra_info("sockname")


class TestUDPServer:
    @pytest.mark.asyncio
    async def test_binds_ephemeral_port(self, env):
        server = RecordingServer(env)
        await server.start_server()

        try:
            assert server.port != 0
            assert server.running is True

        finally:
            await server.close()

        assert server.running is False

    @pytest.mark.asyncio
    async def test_requests_are_handled_one_at_a_time(self, env):
        server = RecordingServer(env)
        await server.start_server()

        clients = [UDPClient(env) for _ in range(5)]

        try:
            responses = await asyncio.gather(*[
                client.request(server.address, frame_text(f"request-{index}"))
                for index, client in enumerate(clients)
            ])

        finally:
            for client in clients:
                await client.close()

            await server.close()

        assert sorted(unframe_text(response) for response in responses) == [
            f"REQUEST-{index}" for index in range(5)
        ]
        assert server.max_in_flight == 1
        assert len(server.handled) == 5

    @pytest.mark.asyncio
    async def test_transport_failure_surfaces_from_run_forever(self, env):
        server = RecordingServer(env)
        await server.start_server()

        server.fail(OSError("receive failed"))

        with pytest.raises(TransportError) as error:
            await server.run_forever()

        assert error.value.handler == "recording"
        assert error.value.address == server.address

        await server.close()

    @pytest.mark.asyncio
    async def test_bind_conflict_is_a_transport_error(self):
        env = Env(
            ROWSWAP_LOG_LEVEL="error",
            ROWSWAP_REUSE_ADDRESS=False,
        )

        first = RecordingServer(env)
        await first.start_server()

        second = UDPServer("127.0.0.1", first.port, env, name="second")

        try:
            with pytest.raises(TransportError):
                await second.start_server()

        finally:
            await first.close()

    @pytest.mark.asyncio
    async def test_client_timeout_is_a_transport_error(self, env):
        server = RecordingServer(env)
        await server.start_server()
        address = server.address
        await server.close()

        async with UDPClient(env) as client:
            with pytest.raises(TransportError):
                await client.request(address, frame_text("anyone"), timeout=0.05)

    @pytest.mark.asyncio
    async def test_abort_releases_the_socket(self, env):
        server = RecordingServer(env)
        await server.start_server()

        server.abort()
        await asyncio.sleep(0)

        assert server.running is False
        await server.close()

    @pytest.mark.asyncio
    async def test_datagrams_beyond_the_queue_are_dropped(self):
        env = Env(
            ROWSWAP_LOG_LEVEL="error",
            ROWSWAP_REQUEST_QUEUE_SIZE=1,
        )

        server = GatedServer(env)
        await server.start_server()
        transport, sink, sink_address = await open_sink()

        try:
            server.read(frame_text("first"), sink_address)
            await server.received.wait()

            server.read(frame_text("second"), sink_address)
            server.read(frame_text("third"), sink_address)
            server.read(frame_text("fourth"), sink_address)

            server.release.set()

            replies = [
                unframe_text(await asyncio.wait_for(sink.replies.get(), timeout=5))
                for _ in range(2)
            ]

        finally:
            await server.close()
            transport.close()

        assert replies == ["FIRST", "SECOND"]
        assert server.handled == ["first", "second"]


class TestUDPClient:
    @pytest.mark.asyncio
    async def test_replies_from_other_addresses_are_ignored(self, env):
        server = GatedServer(env)
        await server.start_server()
        transport, _, _ = await open_sink()

        try:
            async with UDPClient(env) as client:
                _, client_port = client.local_address

                request = asyncio.create_task(
                    client.request(server.address, frame_text("real"))
                )
                await server.received.wait()

                transport.sendto(frame_text("stray"), ("127.0.0.1", client_port))
                await asyncio.sleep(0.05)

                assert request.done() is False

                server.release.set()

                assert unframe_text(await request) == "REAL"

        finally:
            await server.close()
            transport.close()

    @pytest.mark.asyncio
    async def test_hostname_targets_are_resolved(self, env):
        server = RecordingServer(env)
        await server.start_server()

        try:
            async with UDPClient(env) as client:
                response = await client.request(
                    ("localhost", server.port),
                    frame_text("named"),
                )

        finally:
            await server.close()

        assert unframe_text(response) == "NAMED"
