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

"""Read-write stream over a file or an in-memory buffer.

Standard input and standard output are two separate resources, so there is
no standard-stream variant: requesting one raises
:class:`~wbuf.errors.UnsupportedOperationError` at construction.
"""

from __future__ import annotations

import io
import os
from collections.abc import Buffer, Iterable, Iterator
from dataclasses import dataclass, field
from typing import BinaryIO, Self, assert_never, cast

from ._handles import (
    check_closed,
    close_handle,
    close_quietly,
    flush_handle,
    iter_chunks,
    log_close,
    log_open,
    open_file,
    read_handle,
    readinto_handle,
    write_handle,
)
from ._types import (
    DEFAULT_CHUNK_SIZE,
    MEMORY_LABEL,
    Backing,
    Selector,
    resolve_selector,
)
from .errors import IOFailureError, UnsupportedOperationError

__all__ = ["InputOutput"]


@dataclass(slots=True)
class InputOutput:
    """Byte stream that is read and written through one shared position.

    Suited to in-place read-modify-write of a file, or to a scratch buffer
    in tests.

    Example::

        with InputOutput.from_arg(args.file) as stream:
            header = stream.read(16)
            stream.seek(0)
            stream.write(patch_header(header))
    """

    _backing: Backing
    _handle: BinaryIO = field(repr=False)
    _label: str
    _bytes_read: int = field(default=0, init=False)
    _bytes_written: int = field(default=0, init=False)
    _closed: bool = field(default=False, init=False)
    _retained: bytes = field(default=b"", init=False, repr=False)

    @classmethod
    def from_arg(cls, arg: Selector, *, truncate: bool = False) -> InputOutput:
        """Select a duplex stream from an optional command-line value.

        - ``None`` gives an empty memory buffer.
        - ``"-"`` asks for the standard streams, which cannot act as one
          duplex resource.
        - Any other value is opened for update; see :meth:`file`.

        Raises:
            UnsupportedOperationError: If ``arg`` is ``"-"``. Nothing is
                opened.
            ResourceUnavailableError: If the file cannot be opened.
        """
        if arg is None:
            return cls.memory()
        path = resolve_selector(arg)
        if path is None:
            msg = "Standard streams cannot back a duplex stream"
            raise UnsupportedOperationError(msg)
        return cls.file(path, truncate=truncate)

    @classmethod
    def file(
        cls, path: str | os.PathLike[str], *, truncate: bool = False
    ) -> InputOutput:
        """Open a file for reading and writing.

        By default the file must exist and its content is kept, with the
        position at the start. With ``truncate=True`` the file is created if
        missing and emptied otherwise.

        Raises:
            ResourceUnavailableError: If the file cannot be opened.
        """
        resolved = os.fspath(path)
        handle = open_file(resolved, "w+b" if truncate else "r+b", role="duplex")
        return cls._opened(Backing.FILE, handle, resolved)

    @classmethod
    def memory(cls, data: Buffer = b"") -> InputOutput:
        """Read and write a private buffer seeded with a copy of ``data``.

        The position starts at 0, so writes overwrite the seed in place.
        """
        return cls._opened(Backing.MEMORY, io.BytesIO(bytes(data)), MEMORY_LABEL)

    @classmethod
    def _opened(cls, backing: Backing, handle: BinaryIO, label: str) -> InputOutput:
        log_open(backing, label=label, role="duplex")
        return cls(_backing=backing, _handle=handle, _label=label)

    @property
    def backing(self) -> Backing:
        """Concrete resource behind the stream."""
        return self._backing

    @property
    def label(self) -> str:
        """File path or ``<memory>``."""
        return self._label

    @property
    def bytes_read(self) -> int:
        """Total bytes returned by read calls so far."""
        return self._bytes_read

    @property
    def bytes_written(self) -> int:
        """Total bytes accepted by write calls so far."""
        return self._bytes_written

    @property
    def closed(self) -> bool:
        """True if the stream has been closed."""
        return self._closed

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes from the shared position."""
        check_closed(self._closed)
        data = read_handle(self._handle, size, label=self._label, role="duplex")
        self._bytes_read += len(data)
        return data

    def readinto(self, buffer: Buffer) -> int:
        """Read into ``buffer`` from the shared position."""
        check_closed(self._closed)
        count = readinto_handle(self._handle, buffer, label=self._label, role="duplex")
        self._bytes_read += count
        return count

    def __iter__(self) -> Iterator[bytes]:
        """Iterate over chunks of default size."""
        return self.chunks(DEFAULT_CHUNK_SIZE)

    def chunks(self, size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Iterate over chunks of ``size`` bytes until end of stream."""
        check_closed(self._closed)
        for chunk in iter_chunks(self._handle, size, label=self._label, role="duplex"):
            self._bytes_read += len(chunk)
            yield chunk
            check_closed(self._closed)

    def write(self, data: Buffer) -> int:
        """Write bytes at the shared position."""
        check_closed(self._closed)
        try:
            written = write_handle(self._handle, data, label=self._label, role="duplex")
        except IOFailureError as err:
            self._bytes_written += err.bytes_transferred or 0
            raise
        self._bytes_written += written
        return written

    def write_all(self, chunks: Iterable[Buffer]) -> int:
        """Write all chunks from an iterable."""
        check_closed(self._closed)
        total = 0
        for chunk in chunks:
            total += self.write(chunk)
        return total

    def flush(self) -> None:
        """Push buffered bytes to the underlying resource."""
        check_closed(self._closed)
        flush_handle(self._handle, label=self._label, role="duplex")

    def seek(self, offset: int, whence: int = 0) -> int:
        """Move the shared position.

        Raises:
            ValueError: If the stream is closed or ``whence`` is invalid.
            IOFailureError: If the file does not support seeking.
        """
        check_closed(self._closed)
        if whence not in {0, 1, 2}:
            msg = f"Invalid whence value: {whence}"
            raise ValueError(msg)
        try:
            return self._handle.seek(offset, whence)
        except OSError as err:
            raise IOFailureError(self._label, err) from err

    def tell(self) -> int:
        """Return the shared position."""
        check_closed(self._closed)
        try:
            return self._handle.tell()
        except OSError as err:
            raise IOFailureError(self._label, err) from err

    def getvalue(self) -> bytes:
        """Return the whole memory buffer, regardless of position.

        Remains available after the stream is closed.

        Raises:
            UnsupportedOperationError: If the stream is file-backed.
        """
        match self._backing:
            case Backing.MEMORY:
                if self._closed:
                    return self._retained
                return cast(io.BytesIO, self._handle).getvalue()
            case Backing.STANDARD | Backing.FILE:
                msg = f"getvalue() requires a memory stream, not {self._backing.value}"
                raise UnsupportedOperationError(msg)
            case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
                assert_never(unreachable)  # pyright: ignore[reportUnreachable]

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager, flushing and releasing the stream."""
        self.close()

    def close(self) -> None:
        """Flush and release the stream. The file is closed even if flush fails."""
        if self._closed:
            return
        self._closed = True
        match self._backing:
            case Backing.FILE:
                try:
                    flush_handle(self._handle, label=self._label, role="duplex")
                except IOFailureError:
                    close_quietly(self._handle)
                    raise
                close_handle(self._handle, label=self._label, role="duplex")
            case Backing.MEMORY:
                self._retained = cast(io.BytesIO, self._handle).getvalue()
                self._handle.close()
            case Backing.STANDARD:  # pragma: no cover - never constructed
                pass
            case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
                assert_never(unreachable)  # pyright: ignore[reportUnreachable]
        log_close(self._backing, label=self._label, role="duplex")
