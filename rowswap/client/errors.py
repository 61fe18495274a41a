class ServiceNotResolvedError(Exception):
    """A swap was requested before a successful lookup."""

    def __init__(self) -> None:
        super().__init__("No row-swap service resolved, look one up first")
