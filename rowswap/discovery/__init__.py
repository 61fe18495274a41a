from .discovery_server import DiscoveryServer as DiscoveryServer
from .errors import RegistrationError as RegistrationError
from .lookup_handler import LookupHandler as LookupHandler
from .registration_client import RegistrationClient as RegistrationClient
from .registration_handler import RegistrationHandler as RegistrationHandler
