import itertools
import os
import stat
import tempfile

import pytest

from rowswap.protocol import SWAP_OK
from rowswap.swap import FileValidationError, RowSwapEngine, RowSwapFile


def read_bytes(path: str) -> bytes:
    with open(path, "rb") as target:
        return target.read()


def create_engine(path: str) -> RowSwapEngine:
    target = RowSwapFile(path)
    target.validate()

    return RowSwapEngine(target)


class TestRowSwapFile:
    def test_counts_lines(self, text_file_factory):
        target = RowSwapFile(text_file_factory(["a", "b", "c"]))

        assert target.validate() == 3
        assert target.line_count == 3
        assert target.valid is True

    def test_last_line_without_terminator_counts(self, text_file_factory):
        target = RowSwapFile(
            text_file_factory(["a", "b", "c"], trailing_terminator=False)
        )

        assert target.validate() == 3

    def test_empty_file_has_no_lines(self, text_file_factory):
        target = RowSwapFile(text_file_factory([]))

        assert target.validate() == 0

    def test_missing_file(self, temp_directory: str):
        target = RowSwapFile(os.path.join(temp_directory, "missing.txt"))

        with pytest.raises(FileValidationError):
            target.validate()

        assert target.valid is False

    def test_directory_is_not_a_file(self, temp_directory: str):
        target = RowSwapFile(temp_directory)

        with pytest.raises(FileValidationError):
            target.validate()

    def test_name_is_the_basename(self, text_file_factory):
        assert RowSwapFile(text_file_factory(["a"], name="notes.txt")).name == "notes.txt"


class TestSwap:
    def test_swap_first_and_last(self, text_file_factory):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)

        assert engine.swap(0, 2) == SWAP_OK
        assert read_bytes(path) == b"c\nb\na\n"

    def test_swap_twice_restores_file(self, text_file_factory):
        path = text_file_factory(["alpha", "beta", "", "delta", "epsilon"])
        engine = create_engine(path)
        original = read_bytes(path)

        for first, second in itertools.product(range(5), repeat=2):
            assert engine.swap(first, second) == SWAP_OK
            assert engine.swap(first, second) == SWAP_OK
            assert read_bytes(path) == original

    def test_terminators_stay_in_place(self, text_file_factory):
        path = text_file_factory(["a", "b", "c"], trailing_terminator=False)
        engine = create_engine(path)

        assert engine.swap(0, 2) == SWAP_OK
        assert read_bytes(path) == b"c\nb\na"

        assert engine.swap(0, 2) == SWAP_OK
        assert read_bytes(path) == b"a\nb\nc"

    def test_crlf_lines(self, text_file_factory):
        path = text_file_factory(["a", "b"], terminator="\r\n")
        engine = create_engine(path)

        assert engine.swap(0, 1) == SWAP_OK
        assert read_bytes(path) == b"b\r\na\r\n"

    def test_same_line_is_a_no_op(self, text_file_factory):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)

        assert engine.swap(1, 1) == SWAP_OK
        assert read_bytes(path) == b"a\nb\nc\n"

    def test_out_of_range_leaves_file_unchanged(self, text_file_factory):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)

        outcome = engine.swap(3, 0)

        assert outcome != SWAP_OK
        assert "3 lines" in outcome
        assert read_bytes(path) == b"a\nb\nc\n"

    def test_invalid_file_reports_failure(self, temp_directory: str):
        target = RowSwapFile(os.path.join(temp_directory, "missing.txt"))
        engine = RowSwapEngine(target)

        assert engine.swap(0, 1) != SWAP_OK

    def test_same_line_beyond_the_end_is_a_failure(self, text_file_factory):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)

        outcome = engine.swap(7, 7)

        assert outcome != SWAP_OK
        assert "3 lines" in outcome

    def test_read_failure_makes_the_file_invalid(self, text_file_factory):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)

        os.remove(path)

        outcome = engine.swap(0, 2)

        assert outcome.startswith("Could not read")
        assert engine.target.valid is False
        assert engine.swap(0, 2) == f"File {path} is not available for swaps"

    def test_no_temporary_files_left_behind(self, text_file_factory, temp_directory: str):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)

        engine.swap(0, 1)

        assert os.listdir(temp_directory) == ["report.txt"]

    def test_file_mode_is_kept(self, text_file_factory):
        path = text_file_factory(["a", "b"])
        os.chmod(path, 0o640)
        engine = create_engine(path)

        engine.swap(0, 1)

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o640


class TestSwapAtomicity:
    def test_failed_replace_keeps_original_content(
        self,
        text_file_factory,
        temp_directory: str,
        monkeypatch,
    ):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)
        original = read_bytes(path)

        def failing_replace(source, destination):
            raise OSError("simulated crash during replace")

        monkeypatch.setattr(os, "replace", failing_replace)

        outcome = engine.swap(0, 2)

        assert outcome != SWAP_OK
        assert "simulated crash" in outcome
        assert read_bytes(path) == original
        assert os.listdir(temp_directory) == ["report.txt"]

    def test_failed_temp_creation_keeps_original_content(
        self,
        text_file_factory,
        monkeypatch,
    ):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)

        def failing_mkstemp(*args, **kwargs):
            raise OSError("no space left")

        monkeypatch.setattr(tempfile, "mkstemp", failing_mkstemp)

        assert engine.swap(0, 2) != SWAP_OK
        assert read_bytes(path) == b"a\nb\nc\n"

    def test_temp_names_are_unique(self, text_file_factory, monkeypatch):
        path = text_file_factory(["a", "b", "c"])
        engine = create_engine(path)

        seen: list[str] = []
        real_replace = os.replace

        def recording_replace(source, destination):
            seen.append(os.path.basename(source))
            real_replace(source, destination)

        monkeypatch.setattr(os, "replace", recording_replace)

        for _ in range(5):
            engine.swap(0, 1)

        assert len(set(seen)) == 5
        assert all(name.startswith(".rowswap-") for name in seen)
