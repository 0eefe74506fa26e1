# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for InputOutput selection, shared positioning and backings."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from tests.helpers import (
    ByteSinkValidationSuite,
    ByteSourceValidationSuite,
    SinkFactory,
    SourceFactory,
)
from wbuf import (
    Backing,
    ByteDuplex,
    InputOutput,
    IOFailureError,
    ResourceUnavailableError,
    UnsupportedOperationError,
)


class TestMemoryDuplex(ByteSourceValidationSuite, ByteSinkValidationSuite):
    """Memory-backed InputOutput."""

    @pytest.fixture
    def make_source(self) -> SourceFactory:
        return InputOutput.memory

    @pytest.fixture
    def make_sink(self) -> SinkFactory:
        def factory() -> tuple[InputOutput, Callable[[], bytes]]:
            stream = InputOutput.memory()
            return stream, stream.getvalue

        return factory

    def test_backing_and_label(self) -> None:
        stream = InputOutput.memory()
        assert stream.backing is Backing.MEMORY
        assert stream.label == "<memory>"
        assert isinstance(stream, ByteDuplex)

    def test_single_cursor(self) -> None:
        """Reads and writes advance the same position."""
        stream = InputOutput.memory()
        stream.write(b"hello world")
        assert stream.tell() == 11
        assert stream.read() == b""
        stream.seek(0)
        assert stream.read(5) == b"hello"
        stream.write(b"!")
        assert stream.getvalue() == b"hello!world"
        assert stream.read() == b"world"

    def test_seed_is_overwritten_in_place(self) -> None:
        stream = InputOutput.memory(b"abcdef")
        stream.write(b"XY")
        assert stream.getvalue() == b"XYcdef"
        assert stream.read() == b"cdef"

    def test_seek_whence(self) -> None:
        stream = InputOutput.memory(b"0123456789")
        assert stream.seek(-3, 2) == 7
        assert stream.seek(1, 1) == 8
        assert stream.read() == b"89"

    def test_seek_invalid_whence_raises(self) -> None:
        stream = InputOutput.memory(b"content")
        with pytest.raises(ValueError, match="whence"):
            stream.seek(0, 99)

    def test_seek_after_close_raises(self) -> None:
        stream = InputOutput.memory(b"content")
        stream.close()
        with pytest.raises(ValueError, match="closed"):
            stream.seek(0)
        with pytest.raises(ValueError, match="closed"):
            stream.tell()

    def test_getvalue_after_close(self) -> None:
        with InputOutput.memory() as stream:
            stream.write(b"scratch")
        assert stream.getvalue() == b"scratch"

    def test_counters(self) -> None:
        stream = InputOutput.memory()
        stream.write_all([b"abc", b"def"])
        stream.seek(0)
        assert list(stream.chunks(size=4)) == [b"abcd", b"ef"]
        assert stream.bytes_written == 6
        assert stream.bytes_read == 6


class TestFileDuplex(ByteSourceValidationSuite, ByteSinkValidationSuite):
    """File-backed InputOutput."""

    @pytest.fixture
    def make_source(self, tmp_path: Path) -> SourceFactory:
        def factory(data: bytes) -> InputOutput:
            path = tmp_path / "duplex.bin"
            path.write_bytes(data)
            return InputOutput.file(path)

        return factory

    @pytest.fixture
    def make_sink(self, tmp_path: Path) -> SinkFactory:
        path = tmp_path / "duplex.bin"

        def factory() -> tuple[InputOutput, Callable[[], bytes]]:
            return InputOutput.file(path, truncate=True), path.read_bytes

        return factory

    def test_backing_and_label(self, tmp_path: Path) -> None:
        path = tmp_path / "duplex.bin"
        path.write_bytes(b"")
        with InputOutput.file(path) as stream:
            assert stream.backing is Backing.FILE
            assert stream.label == str(path)

    def test_keeps_existing_content(self, tmp_path: Path) -> None:
        """The default open is for update and never truncates."""
        path = tmp_path / "duplex.bin"
        path.write_bytes(b"header:body")
        with InputOutput.file(path) as stream:
            assert stream.read(6) == b"header"
            stream.seek(0)
            stream.write(b"HEADER")
        assert path.read_bytes() == b"HEADER:body"

    def test_shared_position(self, tmp_path: Path) -> None:
        path = tmp_path / "duplex.bin"
        path.write_bytes(b"0123456789")
        with InputOutput.file(path) as stream:
            assert stream.read(4) == b"0123"
            stream.write(b"ab")
            assert stream.tell() == 6
            assert stream.read() == b"6789"
        assert path.read_bytes() == b"0123ab6789"

    def test_missing_file_raises_without_truncate(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.bin"
        with pytest.raises(ResourceUnavailableError) as excinfo:
            InputOutput.file(path)
        assert isinstance(excinfo.value.os_error, FileNotFoundError)
        assert not path.exists()

    def test_truncate_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / "created.bin"
        with InputOutput.file(path, truncate=True) as stream:
            stream.write(b"fresh")
            stream.seek(0)
            assert stream.read() == b"fresh"
        assert path.read_bytes() == b"fresh"

    def test_truncate_empties_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "existing.bin"
        path.write_bytes(b"stale")
        with InputOutput.file(path, truncate=True) as stream:
            assert stream.read() == b""
        assert path.read_bytes() == b""

    def test_getvalue_unsupported(self, tmp_path: Path) -> None:
        with InputOutput.file(tmp_path / "d.bin", truncate=True) as stream:
            with pytest.raises(UnsupportedOperationError):
                stream.getvalue()

    def test_close_flush_failure_closes_handle(self, tmp_path: Path) -> None:
        stream = InputOutput.file(tmp_path / "d.bin", truncate=True)
        real_handle = stream._handle
        with patch.object(stream, "_handle", wraps=real_handle) as handle:
            handle.flush.side_effect = OSError(28, "No space left on device")
            with pytest.raises(IOFailureError):
                stream.close()
        assert stream.closed
        assert real_handle.closed

    def test_close_failure_raises_io_failure(self, tmp_path: Path) -> None:
        stream = InputOutput.file(tmp_path / "d.bin", truncate=True)
        real_handle = stream._handle
        with patch.object(stream, "_handle", wraps=real_handle) as handle:
            handle.close.side_effect = OSError(5, "Input/output error")
            with pytest.raises(IOFailureError, match="Input/output error"):
                stream.close()
        assert stream.closed
        real_handle.close()

    def test_seek_failure_raises_io_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "d.bin"
        with InputOutput.file(path, truncate=True) as stream:
            with patch.object(stream, "_handle", wraps=stream._handle) as handle:
                handle.seek.side_effect = OSError(29, "Illegal seek")
                with pytest.raises(IOFailureError, match="Illegal seek"):
                    stream.seek(0)


class TestDuplexFromArg:
    """Selection rules of InputOutput.from_arg."""

    def test_none_gives_empty_memory(self) -> None:
        with InputOutput.from_arg(None) as stream:
            assert stream.backing is Backing.MEMORY
            assert stream.getvalue() == b""

    def test_dash_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedOperationError, match="Standard streams"):
            InputOutput.from_arg("-")

    def test_dash_touches_no_resource(self) -> None:
        with patch("wbuf._duplex.open_file") as open_file:
            with pytest.raises(UnsupportedOperationError):
                InputOutput.from_arg("-", truncate=True)
        open_file.assert_not_called()

    def test_unsupported_is_also_io_unsupported(self) -> None:
        with pytest.raises(io.UnsupportedOperation):
            InputOutput.from_arg("-")

    def test_path_opens_file(self, tmp_path: Path) -> None:
        path = tmp_path / "in-place.bin"
        path.write_bytes(b"data")
        with InputOutput.from_arg(str(path)) as stream:
            assert stream.backing is Backing.FILE
            assert stream.read() == b"data"

    def test_truncate_forwarded(self, tmp_path: Path) -> None:
        path = tmp_path / "new.bin"
        with InputOutput.from_arg(path, truncate=True) as stream:
            stream.write(b"x")
        assert path.read_bytes() == b"x"
