from dataclasses import dataclass

from .endpoint import Endpoint


@dataclass(slots=True, frozen=True)
class RegistryEntry:
    """A live name -> endpoint registration."""

    name: str
    endpoint: Endpoint
