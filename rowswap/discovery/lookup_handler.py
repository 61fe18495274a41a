from typing import Tuple

from rowswap.env import Env
from rowswap.protocol import (
    CodecError,
    decode_lookup_request,
    encode_lookup_response,
)
from rowswap.registry import EndpointRegistry
from rowswap.server import UDPServer


class LookupHandler(UDPServer):
    """Answers name -> endpoint queries. A miss is a normal reply."""

    def __init__(
        self,
        host: str,
        port: int,
        env: Env,
        registry: EndpointRegistry,
    ) -> None:
        super().__init__(host, port, env, name="lookup")
        self.registry = registry

    async def handle(self, data: bytes, addr: Tuple[str, int]) -> bytes:
        sender_host, sender_port = addr

        try:
            name = decode_lookup_request(
                data,
                max_frame_size=self._max_frame_size,
            )

        except CodecError as request_error:
            await self._log(
                f"Malformed lookup from {sender_host}:{sender_port}: {request_error}"
            )

            return encode_lookup_response(
                None,
                max_frame_size=self._max_frame_size,
            )

        endpoint = await self.registry.lookup(name)

        if endpoint is None:
            await self._log(f"Lookup {name} from {sender_host}:{sender_port}: not found")

        else:
            await self._log(
                f"Lookup {name} from {sender_host}:{sender_port}: {endpoint}",
                level="debug",
            )

        return encode_lookup_response(
            endpoint,
            max_frame_size=self._max_frame_size,
        )
