from .env import Env as Env, load_env as load_env
from .models import Endpoint as Endpoint, RegistryEntry as RegistryEntry
from .protocol import ResultCode as ResultCode
from .registry import EndpointRegistry as EndpointRegistry
from .discovery import (
    DiscoveryServer as DiscoveryServer,
    RegistrationClient as RegistrationClient,
    RegistrationError as RegistrationError,
)
from .swap import (
    FileValidationError as FileValidationError,
    RowSwapEngine as RowSwapEngine,
    RowSwapFile as RowSwapFile,
    RowSwapService as RowSwapService,
)
from .client import (
    RowSwapClient as RowSwapClient,
    ServiceNotResolvedError as ServiceNotResolvedError,
)
from .server import TransportError as TransportError
