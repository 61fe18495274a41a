"""
Discovery server over real UDP sockets on 127.0.0.1.

Covers:
- The register / lookup / dismiss scenario end to end
- Malformed and unknown registration requests
- Address-qualified registrations
- Fail-fast shutdown on a transport failure
"""

import asyncio
import os

import msgspec
import pytest
import pytest_asyncio

from rowswap.discovery import DiscoveryServer, RegistrationClient, registration_handler
from rowswap.env import Env
from rowswap.client import RowSwapClient
from rowswap.models import Endpoint
from rowswap.protocol import (
    Found,
    NOT_FOUND_MESSAGE,
    NotFound,
    ResultCode,
    decode_result_code,
    frame_message,
    frame_text,
    unframe_text,
)
from rowswap.server import TransportError, UDPClient


@pytest_asyncio.fixture
async def discovery(env):
    server = DiscoveryServer("127.0.0.1", 0, 0, env)
    await server.start()
    yield server
    await server.close()


class TestRegistryScenario:
    @pytest.mark.asyncio
    async def test_register_lookup_dismiss(self, discovery: DiscoveryServer, env):
        async with RegistrationClient(
            discovery.registration_address, env
        ) as registration, RowSwapClient(
            discovery.lookup_address, env
        ) as client:
            assert await registration.register("report.txt", 7000) == ResultCode.OK
            assert await registration.register("report.txt", 7001) == ResultCode.FILENAME_IN_USE

            assert await client.request_service("report.txt") == Found(
                "report.txt",
                Endpoint("127.0.0.1", 7000),
            )

            assert await registration.dismiss("report.txt", 7001) == ResultCode.PORT_NOT_CONSISTENT
            assert await registration.dismiss("report.txt", 7000) == ResultCode.OK

            assert await client.request_service("report.txt") == NotFound("report.txt")

    @pytest.mark.asyncio
    async def test_dismiss_unknown_name(self, discovery: DiscoveryServer, env):
        async with RegistrationClient(discovery.registration_address, env) as registration:
            assert await registration.dismiss("report.txt", 7000) == ResultCode.FILENAME_NOT_IN_USE
            assert await registration.dismiss("report.txt", 7000) == ResultCode.FILENAME_NOT_IN_USE

    @pytest.mark.asyncio
    async def test_second_name_on_same_port(self, discovery: DiscoveryServer, env):
        async with RegistrationClient(discovery.registration_address, env) as registration:
            assert await registration.register("report.txt", 7000) == ResultCode.OK
            assert await registration.register("notes.txt", 7000) == ResultCode.PORT_IN_USE

    @pytest.mark.asyncio
    async def test_address_qualified_registration_is_resolved(
        self,
        discovery: DiscoveryServer,
        env,
    ):
        async with RegistrationClient(discovery.registration_address, env) as registration:
            code = await registration.register("report.txt", 7000, address="localhost")

            assert code == ResultCode.OK
            assert await discovery.registry.lookup("report.txt") == Endpoint("127.0.0.1", 7000)

            code = await registration.register("notes.txt", 7000, address="127.0.0.1")

            assert code == ResultCode.PAIR_IN_USE

    @pytest.mark.asyncio
    async def test_identical_ports_are_rejected(self, env):
        with pytest.raises(ValueError):
            DiscoveryServer("127.0.0.1", 9000, 9000, env)


class TestMalformedRequests:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload,expected",
        [
            (frame_text("REGISTER:report.txt"), ResultCode.MALFORMED_REQUEST),
            (frame_text("REGISTER:report.txt:seven"), ResultCode.MALFORMED_REQUEST),
            (frame_text("REGISTER:report.txt:80"), ResultCode.MALFORMED_REQUEST),
            (frame_text("RENAME:report.txt:7000"), ResultCode.UNKNOWN_COMMAND),
            (b"\x00", ResultCode.MALFORMED_REQUEST),
            (frame_message(b"\xff\xfe"), ResultCode.MALFORMED_REQUEST),
        ],
    )
    async def test_every_request_gets_a_result(
        self,
        discovery: DiscoveryServer,
        env,
        payload: bytes,
        expected: ResultCode,
    ):
        async with UDPClient(env) as client:
            response = await client.request(discovery.registration_address, payload)

            assert decode_result_code(response) == expected

            # Still serving afterwards
            response = await client.request(
                discovery.registration_address,
                frame_text("REGISTER:report.txt:7000"),
            )

            assert decode_result_code(response) == ResultCode.OK
            assert len(discovery.registry) == 1

    @pytest.mark.asyncio
    async def test_malformed_lookup_gets_not_found(self, discovery: DiscoveryServer, env):
        async with UDPClient(env) as client:
            response = await client.request(discovery.lookup_address, b"\x00\x09abc")

            assert unframe_text(response) == NOT_FOUND_MESSAGE


    @pytest.mark.asyncio
    async def test_unresolvable_address_is_logged_as_an_error(
        self,
        monkeypatch,
        temp_directory: str,
    ):
        async def fail_to_resolve(address: str) -> str:
            raise OSError(f"no IPv4 address for {address!r}")

        monkeypatch.setattr(registration_handler, "resolve_ipv4", fail_to_resolve)

        env = Env(
            ROWSWAP_LOG_LEVEL="error",
            ROWSWAP_REQUEST_TIMEOUT="5s",
            ROWSWAP_LOGS_DIRECTORY=temp_directory,
        )

        server = DiscoveryServer("127.0.0.1", 0, 0, env)
        await server.start()

        try:
            async with RegistrationClient(server.registration_address, env) as registration:
                code = await registration.register(
                    "report.txt",
                    7000,
                    address="nowhere.example",
                )

        finally:
            await server.close()

        assert code == ResultCode.MALFORMED_REQUEST
        assert len(server.registry) == 0

        with open(os.path.join(temp_directory, "registration.json"), "rb") as logfile:
            logs = [msgspec.json.decode(line) for line in logfile.read().splitlines()]

        assert [log["entry"]["level"] for log in logs] == ["ERROR"]
        assert "nowhere.example" in logs[0]["entry"]["message"]


class TestTransportFailure:
    @pytest.mark.asyncio
    async def test_handler_failure_stops_both_handlers(self, env):
        server = DiscoveryServer("127.0.0.1", 0, 0, env)
        await server.start()

        serving = asyncio.create_task(server.run_forever())
        await asyncio.sleep(0)

        server.registration.fail(OSError("socket broke"))

        with pytest.raises(TransportError) as error:
            await serving

        assert error.value.handler == "registration"
        assert server.lookup.running is False
        assert server.registration.running is False

    @pytest.mark.asyncio
    async def test_close_ends_run_forever(self, env):
        server = DiscoveryServer("127.0.0.1", 0, 0, env)
        await server.start()

        serving = asyncio.create_task(server.run_forever())
        await asyncio.sleep(0)

        await server.close()

        assert await serving is None
