from .address_resolver import resolve_ipv4 as resolve_ipv4
from .errors import TransportError as TransportError
from .udp_client import UDPClient as UDPClient
from .udp_protocol import UDPSocketProtocol as UDPSocketProtocol
from .udp_server import UDPServer as UDPServer
