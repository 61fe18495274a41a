from typing import Tuple

from rowswap.env import Env
from rowswap.protocol import (
    RegistrationCommand,
    RegistrationRequest,
    ResultCode,
    decode_result_code,
    encode_registration_request,
)
from rowswap.server import UDPClient


class RegistrationClient:
    """
    Client side of the registration protocol.

    Result codes are returned as values, negative ones included. Raises
    only for codec problems (``CodecError``) and for a broken channel
    (``TransportError``).
    """

    def __init__(
        self,
        registration_address: Tuple[str, int],
        env: Env,
    ) -> None:
        self.registration_address = registration_address
        self.env = env
        self._client = UDPClient(env, name="registration_client")

    async def register(
        self,
        name: str,
        port: int,
        address: str | None = None,
    ) -> ResultCode:
        return await self._send(
            RegistrationRequest(
                RegistrationCommand.REGISTER,
                name,
                port,
                address=address,
            )
        )

    async def dismiss(
        self,
        name: str,
        port: int,
        address: str | None = None,
    ) -> ResultCode:
        return await self._send(
            RegistrationRequest(
                RegistrationCommand.DISMISS,
                name,
                port,
                address=address,
            )
        )

    async def _send(self, request: RegistrationRequest) -> ResultCode:
        payload = encode_registration_request(
            request,
            max_frame_size=self.env.ROWSWAP_MAX_FRAME_SIZE,
        )

        response = await self._client.request(
            self.registration_address,
            payload,
        )

        return decode_result_code(response)

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self):
        await self._client.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
