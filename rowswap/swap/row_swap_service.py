import asyncio
from typing import Tuple

from rowswap.discovery import RegistrationClient, RegistrationError
from rowswap.env import Env
from rowswap.protocol import ResultCode

from .row_swap_engine import RowSwapEngine
from .row_swap_file import RowSwapFile
from .swap_handler import RowSwapHandler

# After a dismissal with one of these results the entry is gone or was
# never ours.
_UNREGISTERED_RESULTS = (
    ResultCode.OK,
    ResultCode.FILENAME_NOT_IN_USE,
    ResultCode.PORT_NOT_CONSISTENT,
)

_WILDCARD_HOSTS = ("", "0.0.0.0")


class RowSwapService:
    """
    A row-swap service: validates its file, binds its swap port, registers
    with the discovery server under the file's name and serves swaps.

    Usage:
        service = RowSwapService("127.0.0.1", 0, "report.txt", ("127.0.0.1", 9001), env)
        await service.start()
        await service.run_forever()
    """

    def __init__(
        self,
        host: str,
        port: int,
        path: str,
        registration_address: Tuple[str, int],
        env: Env,
        name: str | None = None,
        advertise_address: str | None = None,
    ) -> None:
        self.env = env
        self.file = RowSwapFile(path, encoding=env.ROWSWAP_FILE_ENCODING)

        if name is None:
            name = self.file.name

        # A wildcard bind lets the registry take our source address.
        if advertise_address is None and host not in _WILDCARD_HOSTS:
            advertise_address = host

        self.name = name
        self.advertise_address = advertise_address

        self.engine = RowSwapEngine(
            self.file,
            temp_prefix=env.ROWSWAP_TEMP_FILE_PREFIX,
        )
        self.handler = RowSwapHandler(host, port, env, self.engine)
        self.registration = RegistrationClient(registration_address, env)

        self.is_registered = False
        self.last_result: ResultCode | None = None
        self._initialized = False

    @property
    def address(self) -> Tuple[str, int]:
        return self.handler.address

    async def initialize(self) -> int:
        """
        Validate the target file and count its lines.

        Raises:
            FileValidationError: If the file cannot be served.
        """
        loop = asyncio.get_running_loop()
        line_count = await loop.run_in_executor(None, self.file.validate)
        self._initialized = True

        return line_count

    async def start(self) -> None:
        """
        Bind the swap port and register with the discovery server.

        Raises:
            FileValidationError: If the file cannot be served.
            RegistrationError: If the registry refuses the registration.
                The swap port is closed again.
            TransportError: If binding or reaching the registry fails.
        """
        if not self._initialized:
            await self.initialize()

        await self.handler.start_server()

        try:
            await self.register()

        except Exception:
            await self.handler.close()
            await self.registration.close()
            raise

    async def register(self) -> ResultCode:
        if self.is_registered:
            return ResultCode.OK

        code = await self.registration.register(
            self.name,
            self.handler.port,
            address=self.advertise_address,
        )
        self.last_result = code

        if code != ResultCode.OK:
            raise RegistrationError(self.name, code)

        self.is_registered = True

        return code

    async def dismiss(self) -> ResultCode:
        code = await self.registration.dismiss(
            self.name,
            self.handler.port,
            address=self.advertise_address,
        )
        self.last_result = code

        if code in _UNREGISTERED_RESULTS:
            self.is_registered = False

        return code

    async def run_forever(self) -> None:
        await self.handler.run_forever()

    async def close(self) -> None:
        try:
            if self.is_registered:
                await self.dismiss()

        finally:
            await self.handler.close()
            await self.registration.close()
