import os

from .errors import FileValidationError


class RowSwapFile:
    """
    The file a row-swap service owns.

    ``line_count`` is taken once by ``count_lines()`` and never refreshed.
    The service assumes it is the only writer of the file while it runs,
    and a swap never changes the number of lines.
    """

    def __init__(
        self,
        path: str,
        encoding: str = "utf-8",
    ) -> None:
        self.path = os.path.abspath(path)
        self.encoding = encoding
        self.line_count = 0
        self.valid = False

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def check_validity(self) -> None:
        if not os.path.exists(self.path):
            self.valid = False
            raise FileValidationError(self.path, "file does not exist")

        if not os.path.isfile(self.path):
            self.valid = False
            raise FileValidationError(self.path, "not a regular file")

        if not os.access(self.path, os.R_OK | os.W_OK):
            self.valid = False
            raise FileValidationError(self.path, "file is not readable and writable")

        self.valid = True

    def count_lines(self) -> int:
        try:
            # newline="" keeps "\r\n" as one terminator
            with open(self.path, encoding=self.encoding, newline="") as target:
                self.line_count = sum(1 for _ in target)

        except (OSError, UnicodeDecodeError) as read_error:
            self.valid = False
            raise FileValidationError(
                self.path,
                f"could not read file: {read_error}",
            ) from read_error

        return self.line_count

    def validate(self) -> int:
        """Check access and count lines. Returns the line count."""
        self.check_validity()
        return self.count_lines()
