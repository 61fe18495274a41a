from typing import Tuple

from rowswap.env import Env
from rowswap.models import Endpoint
from rowswap.protocol import (
    CodecError,
    RegistrationCommand,
    RegistrationRequest,
    ResultCode,
    UnknownCommandError,
    decode_registration_request,
    encode_result_code,
)
from rowswap.registry import EndpointRegistry
from rowswap.server import UDPServer, resolve_ipv4


class RegistrationHandler(UDPServer):
    """
    Serves REGISTER / DISMISS requests against a shared registry.

    Every request gets exactly one result code in reply. No state survives
    between requests apart from the registry itself.
    """

    def __init__(
        self,
        host: str,
        port: int,
        env: Env,
        registry: EndpointRegistry,
    ) -> None:
        super().__init__(host, port, env, name="registration")
        self.registry = registry

    async def handle(self, data: bytes, addr: Tuple[str, int]) -> bytes:
        code = await self.process(data, addr)
        return encode_result_code(code)

    async def process(self, data: bytes, addr: Tuple[str, int]) -> ResultCode:
        sender_host, sender_port = addr

        try:
            request = decode_registration_request(
                data,
                max_frame_size=self._max_frame_size,
            )

        except UnknownCommandError as command_error:
            await self._log(
                f"Unknown command {command_error.command!r} from {sender_host}:{sender_port}"
            )
            return ResultCode.UNKNOWN_COMMAND

        except CodecError as request_error:
            await self._log(
                f"Malformed request from {sender_host}:{sender_port}: {request_error}"
            )
            return ResultCode.MALFORMED_REQUEST

        # Without an explicit address the registrant is reachable at the
        # datagram's source address.
        address = request.address if request.is_address_qualified else sender_host

        try:
            resolved = await resolve_ipv4(address)

        except OSError as resolve_error:
            await self._log(
                f"Unresolvable address {address!r} from {sender_host}:{sender_port}: {resolve_error}",
                level="error",
            )
            return ResultCode.MALFORMED_REQUEST

        endpoint = Endpoint(resolved, request.port)
        code = await self._apply(request, endpoint)

        if code == ResultCode.OK:
            await self._log(
                f"{request.command.value} {request.name} at {endpoint}"
            )

        else:
            await self._log(
                f"{request.command.value} {request.name} at {endpoint} refused: {code.describe()}"
            )

        return code

    async def _apply(
        self,
        request: RegistrationRequest,
        endpoint: Endpoint,
    ) -> ResultCode:
        match request.command:
            case RegistrationCommand.REGISTER:
                return await self.registry.register_if_free(
                    request.name,
                    endpoint,
                    address_qualified=request.is_address_qualified,
                )

            case RegistrationCommand.DISMISS:
                return await self.registry.dismiss_if_owned(
                    request.name,
                    endpoint,
                    address_qualified=request.is_address_qualified,
                )

            case _:
                return ResultCode.UNKNOWN_COMMAND
