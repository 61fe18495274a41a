"""
Atomic two-line exchange.

The file is rewritten into a uniquely named temporary sibling and moved
over the original with ``os.replace``, so readers see either the old or
the new content and never a partial write. The temporary file is removed
on every failure path.
"""

from __future__ import annotations

import os
import shutil
import tempfile

from rowswap.protocol.swap import SWAP_OK

from .row_swap_file import RowSwapFile

_LINE_TERMINATORS = ("\r\n", "\n", "\r")


def split_terminator(line: str) -> tuple[str, str]:
    for terminator in _LINE_TERMINATORS:
        if line.endswith(terminator):
            return line[: -len(terminator)], terminator

    return line, ""


class RowSwapEngine:
    def __init__(
        self,
        target: RowSwapFile,
        temp_prefix: str = ".rowswap-",
    ) -> None:
        self.target = target
        self.temp_prefix = temp_prefix

    def swap(self, first: int, second: int) -> str:
        """
        Exchange the contents of two zero-based lines.

        Returns SWAP_OK or a description of why nothing changed. Each
        line keeps its own terminator.
        """
        line_count = self.target.line_count

        if not self.target.valid:
            return f"File {self.target.path} is not available for swaps"

        if first < 0 or second < 0:
            return f"Line numbers must be non-negative, got {first} and {second}"

        if first >= line_count or second >= line_count:
            return f"Line {first} or line {second} is beyond the end of the file ({line_count} lines)"

        if first == second:
            return SWAP_OK

        try:
            first_line, second_line = self._capture(first, second)

        except (OSError, UnicodeDecodeError) as read_error:
            self.target.valid = False
            return f"Could not read {self.target.path}: {read_error}"

        first_content, first_terminator = split_terminator(first_line)
        second_content, second_terminator = split_terminator(second_line)

        replacements = {
            first: second_content + first_terminator,
            second: first_content + second_terminator,
        }

        directory = os.path.dirname(self.target.path)

        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=directory,
                prefix=self.temp_prefix,
                suffix=".tmp",
            )

        except OSError as create_error:
            return f"Could not create temporary file: {create_error}"

        try:
            with os.fdopen(
                temp_fd,
                "w",
                encoding=self.target.encoding,
                newline="",
            ) as temp_file, open(
                self.target.path,
                encoding=self.target.encoding,
                newline="",
            ) as original:
                for index, line in enumerate(original):
                    temp_file.write(replacements.get(index, line))

        except (OSError, UnicodeDecodeError) as write_error:
            self._discard(temp_path)
            return f"Could not write temporary file: {write_error}"

        try:
            shutil.copymode(self.target.path, temp_path)
            os.replace(temp_path, self.target.path)

        except OSError as replace_error:
            self._discard(temp_path)
            return f"Could not replace {self.target.path}: {replace_error}"

        return SWAP_OK

    def _capture(self, first: int, second: int) -> tuple[str, str]:
        last = max(first, second)
        captured: dict[int, str] = {}

        with open(
            self.target.path,
            encoding=self.target.encoding,
            newline="",
        ) as original:
            for index, line in enumerate(original):
                if index in (first, second):
                    captured[index] = line

                if index >= last:
                    break

        if first not in captured or second not in captured:
            # Shorter than the line count taken at startup.
            raise OSError(
                f"file has fewer than {last + 1} lines"
            )

        return captured[first], captured[second]

    def _discard(self, temp_path: str) -> None:
        try:
            os.unlink(temp_path)

        except OSError:
            pass
