from .endpoint import (
    Endpoint as Endpoint,
    is_valid_port as is_valid_port,
    MIN_PORT as MIN_PORT,
    MAX_PORT as MAX_PORT,
)
from .registry_entry import RegistryEntry as RegistryEntry
