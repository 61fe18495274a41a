from .errors import (
    CodecError as CodecError,
    FrameTooLargeError as FrameTooLargeError,
    MalformedFrameError as MalformedFrameError,
    MalformedRequestError as MalformedRequestError,
    MalformedResponseError as MalformedResponseError,
    UnknownCommandError as UnknownCommandError,
)
from .framing import (
    frame_message as frame_message,
    extract_framed as extract_framed,
    frame_text as frame_text,
    unframe_text as unframe_text,
    LENGTH_PREFIX_SIZE,
    MAX_FRAME_SIZE,
)
from .lookup import (
    Found as Found,
    NotFound as NotFound,
    LookupResult as LookupResult,
    NOT_FOUND_MESSAGE,
    encode_lookup_request as encode_lookup_request,
    decode_lookup_request as decode_lookup_request,
    encode_lookup_response as encode_lookup_response,
    decode_lookup_response as decode_lookup_response,
)
from .registration import (
    RegistrationCommand as RegistrationCommand,
    RegistrationRequest as RegistrationRequest,
    encode_registration_request as encode_registration_request,
    decode_registration_request as decode_registration_request,
)
from .result_code import (
    ResultCode as ResultCode,
    encode_result_code as encode_result_code,
    decode_result_code as decode_result_code,
)
from .swap import (
    SwapRequest as SwapRequest,
    SWAP_OK,
    MALFORMED_SWAP_MESSAGE,
    encode_swap_request as encode_swap_request,
    decode_swap_request as decode_swap_request,
    encode_swap_response as encode_swap_response,
    decode_swap_response as decode_swap_response,
)
