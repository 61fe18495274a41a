import asyncio
import socket


async def resolve_ipv4(address: str) -> str:
    """
    Resolve a hostname or literal to its IPv4 dotted form so that
    endpoints compare equal regardless of how the address was spelled.

    Raises:
        OSError: If the address cannot be resolved.
    """
    loop = asyncio.get_running_loop()

    address_info = await loop.getaddrinfo(
        address,
        None,
        family=socket.AF_INET,
        type=socket.SOCK_DGRAM,
    )

    if len(address_info) == 0:
        raise OSError(f"Err. - no IPv4 address for {address!r}")

    _, _, _, _, (resolved, _) = address_info[0]

    return resolved
