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

"""Writable stream over standard output, a file, or an in-memory buffer."""

from __future__ import annotations

import io
import os
import sys
from collections.abc import Buffer, Iterable
from dataclasses import dataclass, field
from typing import BinaryIO, Self, assert_never, cast

from ._handles import (
    check_closed,
    close_handle,
    close_quietly,
    flush_handle,
    log_close,
    log_open,
    open_file,
    standard_buffer,
    write_handle,
)
from ._types import MEMORY_LABEL, STDOUT_LABEL, Backing, Selector, resolve_selector
from .errors import IOFailureError, UnsupportedOperationError

__all__ = ["Output"]


@dataclass(slots=True)
class Output:
    """Byte sink whose backing is chosen from an optional path argument.

    Example::

        with Output.from_arg(args.output) as sink:
            sink.write(render(document))

    Tests substitute :meth:`memory` and inspect :meth:`getvalue`::

        sink = Output.memory()
        with sink:
            transpile(ast, sink)
        assert sink.getvalue() == expected
    """

    _backing: Backing
    _handle: BinaryIO = field(repr=False)
    _label: str
    _bytes_written: int = field(default=0, init=False)
    _closed: bool = field(default=False, init=False)
    _retained: bytes = field(default=b"", init=False, repr=False)

    @classmethod
    def from_arg(cls, arg: Selector) -> Output:
        """Select a sink from an optional command-line value.

        - ``None`` or ``"-"`` writes standard output.
        - Any other value is created, or truncated if it exists. The parent
          directory must already exist.

        Raises:
            ResourceUnavailableError: If the file cannot be opened or created.
        """
        path = resolve_selector(arg)
        if path is None:
            return cls.stdout()
        return cls.file(path)

    @classmethod
    def stdout(cls, stream: BinaryIO | None = None) -> Output:
        """Write to standard output, or to ``stream`` when given.

        Closing the returned handle flushes the stream but never closes it.

        Raises:
            UnsupportedOperationError: If no stream is given and the process
                has no binary standard output.
        """
        if stream is None:
            stream = standard_buffer(sys.stdout, "stdout")
        return cls._opened(Backing.STANDARD, stream, STDOUT_LABEL)

    @classmethod
    def file(cls, path: str | os.PathLike[str]) -> Output:
        """Create or truncate a file for writing.

        Raises:
            ResourceUnavailableError: If the parent directory is missing, the
                path is a directory, or permission is denied.
        """
        resolved = os.fspath(path)
        handle = open_file(resolved, "wb", role="output")
        return cls._opened(Backing.FILE, handle, resolved)

    @classmethod
    def memory(cls) -> Output:
        """Collect written bytes in a private growable buffer."""
        return cls._opened(Backing.MEMORY, io.BytesIO(), MEMORY_LABEL)

    @classmethod
    def _opened(cls, backing: Backing, handle: BinaryIO, label: str) -> Output:
        log_open(backing, label=label, role="output")
        return cls(_backing=backing, _handle=handle, _label=label)

    @property
    def backing(self) -> Backing:
        """Concrete resource behind the stream."""
        return self._backing

    @property
    def label(self) -> str:
        """File path, ``<stdout>`` or ``<memory>``."""
        return self._label

    @property
    def bytes_written(self) -> int:
        """Total bytes accepted by write calls so far."""
        return self._bytes_written

    @property
    def closed(self) -> bool:
        """True if the stream has been closed."""
        return self._closed

    def write(self, data: Buffer) -> int:
        """Write bytes and return the count accepted."""
        check_closed(self._closed)
        try:
            written = write_handle(self._handle, data, label=self._label, role="output")
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
        flush_handle(self._handle, label=self._label, role="output")

    def getvalue(self) -> bytes:
        """Return every byte written to a memory sink.

        Remains available after the sink is closed.

        Raises:
            UnsupportedOperationError: If the sink is not memory-backed.
        """
        match self._backing:
            case Backing.MEMORY:
                if self._closed:
                    return self._retained
                return cast(io.BytesIO, self._handle).getvalue()
            case Backing.STANDARD | Backing.FILE:
                msg = f"getvalue() requires a memory sink, not {self._backing.value}"
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
        """Exit context manager, flushing and releasing the sink."""
        self.close()

    def close(self) -> None:
        """Flush and release the sink.

        A file is closed even when the final flush fails; the failure is
        raised as :class:`~wbuf.errors.IOFailureError`. Standard output is
        flushed and left open.
        """
        if self._closed:
            return
        self._closed = True
        match self._backing:
            case Backing.STANDARD:
                flush_handle(self._handle, label=self._label, role="output")
            case Backing.FILE:
                try:
                    flush_handle(self._handle, label=self._label, role="output")
                except IOFailureError:
                    close_quietly(self._handle)
                    raise
                close_handle(self._handle, label=self._label, role="output")
            case Backing.MEMORY:
                self._retained = cast(io.BytesIO, self._handle).getvalue()
                self._handle.close()
            case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
                assert_never(unreachable)  # pyright: ignore[reportUnreachable]
        log_close(self._backing, label=self._label, role="output")
