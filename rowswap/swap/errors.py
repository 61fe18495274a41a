class FileValidationError(Exception):
    """The target file cannot be served: missing, not a regular file,
    not readable and writable, or unreadable while counting lines."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
