from typing import Tuple

from rowswap.env import Env
from rowswap.models import Endpoint
from rowswap.protocol import (
    Found,
    LookupResult,
    SWAP_OK,
    SwapRequest,
    decode_lookup_response,
    decode_swap_response,
    encode_lookup_request,
    encode_swap_request,
)
from rowswap.server import UDPClient

from .errors import ServiceNotResolvedError


class RowSwapClient:
    """
    Resolves a file name through the discovery server, then sends swap
    requests straight to the resolved service.

    Usage:
        async with RowSwapClient(("127.0.0.1", 9000), env) as client:
            result = await client.request_service("report.txt")
            if isinstance(result, Found):
                outcome = await client.swap_lines(0, 2)
    """

    def __init__(
        self,
        lookup_address: Tuple[str, int],
        env: Env,
    ) -> None:
        self.lookup_address = lookup_address
        self.env = env
        self.service: Endpoint | None = None
        self._max_frame_size = env.ROWSWAP_MAX_FRAME_SIZE
        self._client = UDPClient(env, name="rowswap_client")

    async def request_service(self, name: str) -> LookupResult:
        """
        Look up the service registered under ``name``.

        A ``NotFound`` result forgets any previously resolved service.

        Raises:
            ValueError: If the name is blank.
            MalformedResponseError: If the reply is neither an endpoint
                nor the not-found sentinel.
        """
        if not name.strip():
            raise ValueError("Err. - file name must not be blank")

        response = await self._client.request(
            self.lookup_address,
            encode_lookup_request(name, max_frame_size=self._max_frame_size),
        )

        result = decode_lookup_response(
            name,
            response,
            max_frame_size=self._max_frame_size,
        )

        self.service = result.endpoint if isinstance(result, Found) else None

        return result

    async def swap_lines(self, first: int, second: int) -> str:
        """
        Ask the resolved service to exchange two zero-based lines.

        Returns the service's outcome text, ``"OK"`` on success.

        Raises:
            ValueError: If either line number is negative.
            ServiceNotResolvedError: If no service has been resolved.
        """
        if first < 0 or second < 0:
            raise ValueError(
                f"Err. - line numbers must be non-negative, got {first} and {second}"
            )

        if self.service is None:
            raise ServiceNotResolvedError()

        if first == second:
            return SWAP_OK

        response = await self._client.request(
            self.service.to_address(),
            encode_swap_request(
                SwapRequest(first, second),
                max_frame_size=self._max_frame_size,
            ),
        )

        return decode_swap_response(
            response,
            max_frame_size=self._max_frame_size,
        )

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self):
        await self._client.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
