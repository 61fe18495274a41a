from .errors import ServiceNotResolvedError as ServiceNotResolvedError
from .row_swap_client import RowSwapClient as RowSwapClient
