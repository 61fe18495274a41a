from .errors import FileValidationError as FileValidationError
from .row_swap_engine import RowSwapEngine as RowSwapEngine
from .row_swap_file import RowSwapFile as RowSwapFile
from .row_swap_service import RowSwapService as RowSwapService
from .swap_handler import (
    RowSwapHandler as RowSwapHandler,
    SWAP_FAILED_MESSAGE,
)
