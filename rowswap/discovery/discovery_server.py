import asyncio

from rowswap.env import Env
from rowswap.registry import EndpointRegistry

from .lookup_handler import LookupHandler
from .registration_handler import RegistrationHandler


class DiscoveryServer:
    """
    The registry process: one registry shared by a lookup handler and a
    registration handler, each bound to its own UDP port.

    Usage:
        server = DiscoveryServer("0.0.0.0", 9000, 9001, env)
        await server.start()
        await server.run_forever()
    """

    def __init__(
        self,
        host: str,
        lookup_port: int,
        registration_port: int,
        env: Env,
        registry: EndpointRegistry | None = None,
    ) -> None:
        if lookup_port != 0 and lookup_port == registration_port:
            raise ValueError(
                f"Err. - lookup and registration ports must differ, got {lookup_port} for both"
            )

        if registry is None:
            registry = EndpointRegistry()

        self.env = env
        self.registry = registry
        self.lookup = LookupHandler(host, lookup_port, env, registry)
        self.registration = RegistrationHandler(host, registration_port, env, registry)

    @property
    def lookup_address(self) -> tuple[str, int]:
        return self.lookup.address

    @property
    def registration_address(self) -> tuple[str, int]:
        return self.registration.address

    async def start(self) -> None:
        await self.lookup.start_server()

        try:
            await self.registration.start_server()

        except Exception:
            await self.lookup.close()
            raise

    async def run_forever(self) -> None:
        """
        Serve both handlers until closed.

        Raises:
            TransportError: As soon as either handler fails. The other
                handler is closed first.
        """
        if not (self.lookup.running and self.registration.running):
            await self.start()

        serving = [
            asyncio.ensure_future(self.lookup.run_forever()),
            asyncio.ensure_future(self.registration.run_forever()),
        ]

        done, _ = await asyncio.wait(
            serving,
            return_when=asyncio.FIRST_EXCEPTION,
        )

        failed = [task for task in done if task.exception() is not None]
        if failed:
            await self.close()
            await asyncio.gather(*serving, return_exceptions=True)
            raise failed[0].exception()

        await asyncio.gather(*serving)

    async def close(self) -> None:
        await asyncio.gather(
            self.lookup.close(),
            self.registration.close(),
        )
