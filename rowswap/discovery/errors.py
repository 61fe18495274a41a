from rowswap.protocol.result_code import ResultCode


class RegistrationError(Exception):
    """The registry refused a registration or dismissal."""

    def __init__(self, name: str, code: ResultCode) -> None:
        super().__init__(f"Registration of {name!r} failed: {code.describe()} ({code.value})")
        self.name = name
        self.code = code
