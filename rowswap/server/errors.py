from __future__ import annotations


class TransportError(Exception):
    """
    The communication channel of a handler is broken.

    Raised out of ``run_forever()`` (server side) or ``request()`` (client
    side) and never retried. The supervising caller decides whether to
    exit.
    """

    def __init__(
        self,
        message: str,
        handler: str,
        address: tuple[str, int] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.handler = handler
        self.address = address

    def __str__(self) -> str:
        if self.address is None:
            return f"{self.handler}: {self.message}"

        host, port = self.address
        return f"{self.handler} ({host}:{port}): {self.message}"
