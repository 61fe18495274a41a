from typing import Any, Dict, Tuple

from rowswap.env import Env
from rowswap.logging import Entry
from rowswap.logging.rowswap_logging_models import (
    SwapDebug,
    SwapError,
    SwapInfo,
)
from rowswap.protocol import (
    CodecError,
    FrameTooLargeError,
    MALFORMED_SWAP_MESSAGE,
    SWAP_OK,
    decode_swap_request,
    encode_swap_response,
)
from rowswap.server import UDPServer

from .row_swap_engine import RowSwapEngine

# Sent when a failure description does not fit in one frame.
SWAP_FAILED_MESSAGE = "Swap failed"


class RowSwapHandler(UDPServer):
    """
    Serves ``"<line1>,<line2>"`` swap requests for one file.

    The engine does blocking file I/O, so it runs in the default executor.
    Requests are still handled one at a time.
    """

    def __init__(
        self,
        host: str,
        port: int,
        env: Env,
        engine: RowSwapEngine,
    ) -> None:
        super().__init__(host, port, env, name="rowswap")
        self.engine = engine
        self.last_outcome: str | None = None

    def _logger_models(self) -> Dict[str, Tuple[type[Entry], Dict[str, Any]]]:
        models = super()._logger_models()

        target = self.engine.target
        swap_defaults = {
            "path": target.path,
            "line_count": target.line_count,
        }

        models.update({
            "swap_debug": (SwapDebug, swap_defaults),
            "swap_info": (SwapInfo, swap_defaults),
            "swap_error": (SwapError, swap_defaults),
        })

        return models

    async def handle(self, data: bytes, addr: Tuple[str, int]) -> bytes:
        outcome = await self.process(data, addr)
        self.last_outcome = outcome

        try:
            return encode_swap_response(
                outcome,
                max_frame_size=self._max_frame_size,
            )

        except FrameTooLargeError:
            await self._log(
                f"Outcome too long to send, replying {SWAP_FAILED_MESSAGE!r}: {outcome}",
                level="swap_error",
            )

            return encode_swap_response(
                SWAP_FAILED_MESSAGE,
                max_frame_size=self._max_frame_size,
            )

    async def process(self, data: bytes, addr: Tuple[str, int]) -> str:
        sender_host, sender_port = addr

        try:
            request = decode_swap_request(
                data,
                max_frame_size=self._max_frame_size,
            )

        except CodecError as request_error:
            await self._log(
                f"Malformed swap request from {sender_host}:{sender_port}: {request_error}"
            )
            return MALFORMED_SWAP_MESSAGE

        await self._log(
            f"Swap {request.to_text()} from {sender_host}:{sender_port}",
            level="swap_debug",
        )

        outcome = await self._loop.run_in_executor(
            None,
            self.engine.swap,
            request.first,
            request.second,
        )

        if outcome == SWAP_OK:
            await self._log(
                f"Swapped lines {request.first} and {request.second}",
                level="swap_info",
            )

        else:
            await self._log(
                f"Swap {request.to_text()} failed: {outcome}",
                level="swap_error",
            )

        return outcome
