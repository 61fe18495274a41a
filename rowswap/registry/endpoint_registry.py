"""
Endpoint registry: the name -> endpoint directory shared by the
registration and lookup handlers.

Invariants:
- At most one live entry per name.
- At most one live entry per endpoint (address and port).

Every operation runs under one lock spanning the whole map, and the
composite operations (register_if_free, dismiss_if_owned) hold it across
their full check-then-act sequence so two concurrent registrations can
never both pass the uniqueness checks.

Usage:
    registry = EndpointRegistry()
    code = await registry.register_if_free("report.txt", Endpoint("127.0.0.1", 7000))
    endpoint = await registry.lookup("report.txt")
"""

from __future__ import annotations

import asyncio

from rowswap.models import Endpoint, RegistryEntry
from rowswap.protocol.result_code import ResultCode


class EndpointRegistry:
    __slots__ = (
        "_entries",
        "_endpoints",
        "_lock",
    )

    def __init__(self) -> None:
        self._entries: dict[str, Endpoint] = {}  # name -> endpoint
        self._endpoints: dict[Endpoint, str] = {}  # endpoint -> name
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def put(self, name: str, endpoint: Endpoint) -> None:
        """
        Insert unconditionally.

        Does not re-check uniqueness. Use register_if_free() unless the
        caller has already established that neither the name nor the
        endpoint is taken.
        """
        async with self._lock:
            self._put_unlocked(name, endpoint)

    async def remove(self, name: str) -> None:
        """Remove a name. Removing an absent name is a no-op."""
        async with self._lock:
            self._remove_unlocked(name)

    async def lookup(self, name: str) -> Endpoint | None:
        async with self._lock:
            return self._entries.get(name)

    async def contains_name(self, name: str) -> bool:
        async with self._lock:
            return name in self._entries

    async def contains_endpoint(self, endpoint: Endpoint) -> bool:
        async with self._lock:
            return endpoint in self._endpoints

    async def register_if_free(
        self,
        name: str,
        endpoint: Endpoint,
        address_qualified: bool = False,
    ) -> ResultCode:
        """
        Register a name at an endpoint if neither is taken.

        Returns:
            OK on insert, FILENAME_IN_USE if the name is registered,
            PORT_IN_USE (PAIR_IN_USE when address_qualified) if another
            name already holds the endpoint.
        """
        async with self._lock:
            if name in self._entries:
                return ResultCode.FILENAME_IN_USE

            if endpoint in self._endpoints:
                return (
                    ResultCode.PAIR_IN_USE
                    if address_qualified
                    else ResultCode.PORT_IN_USE
                )

            self._put_unlocked(name, endpoint)

            return ResultCode.OK

    async def dismiss_if_owned(
        self,
        name: str,
        endpoint: Endpoint,
        address_qualified: bool = False,
    ) -> ResultCode:
        """
        Remove a name only when the caller's endpoint matches the stored one.

        Returns:
            OK on removal, FILENAME_NOT_IN_USE if the name is absent,
            PORT_NOT_CONSISTENT (PAIR_NOT_CONSISTENT when address_qualified)
            if the endpoints differ.
        """
        async with self._lock:
            registered = self._entries.get(name)
            if registered is None:
                return ResultCode.FILENAME_NOT_IN_USE

            if registered != endpoint:
                return (
                    ResultCode.PAIR_NOT_CONSISTENT
                    if address_qualified
                    else ResultCode.PORT_NOT_CONSISTENT
                )

            self._remove_unlocked(name)

            return ResultCode.OK

    async def entries(self) -> list[RegistryEntry]:
        async with self._lock:
            return [
                RegistryEntry(name, endpoint)
                for name, endpoint in self._entries.items()
            ]

    def _put_unlocked(self, name: str, endpoint: Endpoint) -> None:
        # Keep the reverse index consistent if a name is overwritten.
        if (previous := self._entries.get(name)) is not None:
            self._endpoints.pop(previous, None)

        self._entries[name] = endpoint
        self._endpoints[endpoint] = name

    def _remove_unlocked(self, name: str) -> None:
        endpoint = self._entries.pop(name, None)
        if endpoint is not None:
            self._endpoints.pop(endpoint, None)
