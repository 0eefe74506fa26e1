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

"""Readable stream over standard input, a file, or an in-memory buffer."""

from __future__ import annotations

import io
import os
import sys
from collections.abc import Buffer, Iterator
from dataclasses import dataclass, field
from typing import BinaryIO, Self, assert_never

from ._handles import (
    check_closed,
    close_handle,
    iter_chunks,
    log_close,
    log_open,
    open_file,
    read_handle,
    readinto_handle,
    standard_buffer,
)
from ._types import (
    DEFAULT_CHUNK_SIZE,
    MEMORY_LABEL,
    STDIN_LABEL,
    Backing,
    Selector,
    resolve_selector,
)

__all__ = ["Input"]


@dataclass(slots=True)
class Input:
    """Byte source whose backing is chosen from an optional path argument.

    Example::

        parser.add_argument("input", nargs="?")
        args = parser.parse_args()

        with Input.from_arg(args.input) as source:
            for chunk in source:
                digest.update(chunk)
    """

    _backing: Backing
    _handle: BinaryIO = field(repr=False)
    _label: str
    _bytes_read: int = field(default=0, init=False)
    _closed: bool = field(default=False, init=False)

    @classmethod
    def from_arg(cls, arg: Selector) -> Input:
        """Select a source from an optional command-line value.

        - ``None`` or ``"-"`` reads standard input.
        - Any other value is opened as a file, which must exist and be
          readable.

        Raises:
            ResourceUnavailableError: If the file cannot be opened.
        """
        path = resolve_selector(arg)
        if path is None:
            return cls.stdin()
        return cls.file(path)

    @classmethod
    def stdin(cls, stream: BinaryIO | None = None) -> Input:
        """Read from standard input, or from ``stream`` when given.

        The stream is never closed by the returned handle.

        Raises:
            UnsupportedOperationError: If no stream is given and the process
                has no binary standard input.
        """
        if stream is None:
            stream = standard_buffer(sys.stdin, "stdin")
        return cls._opened(Backing.STANDARD, stream, STDIN_LABEL)

    @classmethod
    def file(cls, path: str | os.PathLike[str]) -> Input:
        """Open a file for reading. No bytes are read until requested.

        Raises:
            ResourceUnavailableError: If the file is missing, unreadable or a
                directory.
        """
        resolved = os.fspath(path)
        handle = open_file(resolved, "rb", role="input")
        return cls._opened(Backing.FILE, handle, resolved)

    @classmethod
    def memory(cls, data: Buffer = b"") -> Input:
        """Read from a private copy of ``data``."""
        return cls._opened(Backing.MEMORY, io.BytesIO(bytes(data)), MEMORY_LABEL)

    @classmethod
    def _opened(cls, backing: Backing, handle: BinaryIO, label: str) -> Input:
        log_open(backing, label=label, role="input")
        return cls(_backing=backing, _handle=handle, _label=label)

    @property
    def backing(self) -> Backing:
        """Concrete resource behind the stream."""
        return self._backing

    @property
    def label(self) -> str:
        """File path, ``<stdin>`` or ``<memory>``."""
        return self._label

    @property
    def bytes_read(self) -> int:
        """Total bytes returned by read calls so far."""
        return self._bytes_read

    @property
    def closed(self) -> bool:
        """True if the stream has been closed."""
        return self._closed

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes. Empty bytes at end of stream."""
        check_closed(self._closed)
        data = read_handle(self._handle, size, label=self._label, role="input")
        self._bytes_read += len(data)
        return data

    def readinto(self, buffer: Buffer) -> int:
        """Read into ``buffer`` and return the count. ``0`` at end of stream."""
        check_closed(self._closed)
        count = readinto_handle(self._handle, buffer, label=self._label, role="input")
        self._bytes_read += count
        return count

    def __iter__(self) -> Iterator[bytes]:
        """Iterate over chunks of default size."""
        return self.chunks(DEFAULT_CHUNK_SIZE)

    def chunks(self, size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Iterate over chunks of ``size`` bytes until end of stream."""
        check_closed(self._closed)
        for chunk in iter_chunks(self._handle, size, label=self._label, role="input"):
            self._bytes_read += len(chunk)
            yield chunk
            check_closed(self._closed)

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager."""
        self.close()

    def close(self) -> None:
        """Release the stream. Standard input itself stays open."""
        if self._closed:
            return
        self._closed = True
        match self._backing:
            case Backing.STANDARD:
                pass
            case Backing.FILE | Backing.MEMORY:
                close_handle(self._handle, label=self._label, role="input")
            case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
                assert_never(unreachable)  # pyright: ignore[reportUnreachable]
        log_close(self._backing, label=self._label, role="input")
