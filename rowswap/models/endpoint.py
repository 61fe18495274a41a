"""
Endpoint model shared by the registry, the wire codec and the clients.
"""

from __future__ import annotations

from dataclasses import dataclass

# Registered port range is 1024 < port <= 65536.
MIN_PORT = 1024
MAX_PORT = 65536


def is_valid_port(port: int) -> bool:
    return MIN_PORT < port <= MAX_PORT


@dataclass(slots=True, frozen=True)
class Endpoint:
    """
    A reachable (address, port) pair.

    Two endpoints are equal iff both the address and the port match,
    so addresses should be normalized (resolved) before comparison.
    """

    address: str
    port: int

    def __str__(self) -> str:
        return f"{self.address}:{self.port}"

    def to_address(self) -> tuple[str, int]:
        return (self.address, self.port)

    @classmethod
    def parse(cls, text: str) -> Endpoint:
        """
        Parse an ``"<address>:<port>"`` string.

        The port is taken from the last ``:`` so IPv6 literals survive.

        Raises:
            ValueError: If the text has no port, an empty address, or a
                port outside the registered range.
        """
        address, separator, port_text = text.rpartition(":")
        if not separator or not address:
            raise ValueError(f"Err. - not an address:port pair: {text!r}")

        port = int(port_text)
        if not is_valid_port(port):
            raise ValueError(f"Err. - port out of range: {port}")

        return cls(address, port)
