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

"""Capability protocols satisfied by every stream handle.

Application code (a parser, a transpiler) should annotate against these
protocols rather than against :class:`~wbuf.Input` or :class:`~wbuf.Output`,
so that any object with the same surface can be substituted.
"""

from __future__ import annotations

from collections.abc import Buffer, Iterable, Iterator
from typing import Protocol, Self, runtime_checkable

from ._types import DEFAULT_CHUNK_SIZE, Backing

__all__ = [
    "ByteDuplex",
    "ByteSink",
    "ByteSource",
]


@runtime_checkable
class ByteSource(Protocol):
    """Sequential byte reader.

    Example::

        def parse(source: ByteSource) -> Document:
            with source:
                return Document.from_bytes(source.read())
    """

    @property
    def backing(self) -> Backing:
        """Concrete resource behind the stream."""
        ...

    @property
    def label(self) -> str:
        """Path of the file, or a placeholder such as ``<stdin>``."""
        ...

    @property
    def closed(self) -> bool:
        """True if the stream has been closed."""
        ...

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes; ``-1`` reads to end of stream.

        Returns:
            Bytes read. Empty bytes at end of stream, on every call.

        Raises:
            ValueError: If the stream is closed.
            IOFailureError: If the underlying resource fails.
        """
        ...

    def readinto(self, buffer: Buffer) -> int:
        """Read into a writable buffer.

        Returns:
            Number of bytes stored. ``0`` at end of stream.

        Raises:
            ValueError: If the stream is closed.
            IOFailureError: If the underlying resource fails.
        """
        ...

    def __iter__(self) -> Iterator[bytes]:
        """Iterate over chunks of default size."""
        ...

    def chunks(self, size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Iterate over chunks of at most ``size`` bytes until end of stream.

        Raises:
            ValueError: If the stream is closed, including when it is closed
                part way through iteration.
        """
        ...

    def __enter__(self) -> Self:
        """Enter context manager."""
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager, closing the stream."""
        ...

    def close(self) -> None:
        """Release the stream. Safe to call more than once."""
        ...


@runtime_checkable
class ByteSink(Protocol):
    """Sequential byte writer.

    Example::

        def emit(sink: ByteSink, chunks: Iterable[bytes]) -> None:
            with sink:
                sink.write_all(chunks)
    """

    @property
    def backing(self) -> Backing:
        """Concrete resource behind the stream."""
        ...

    @property
    def label(self) -> str:
        """Path of the file, or a placeholder such as ``<stdout>``."""
        ...

    @property
    def closed(self) -> bool:
        """True if the stream has been closed."""
        ...

    def write(self, data: Buffer) -> int:
        """Write bytes.

        Returns:
            Number of bytes written.

        Raises:
            ValueError: If the stream is closed.
            IOFailureError: If the underlying resource fails.
        """
        ...

    def write_all(self, chunks: Iterable[Buffer]) -> int:
        """Write every chunk of an iterable and return the total."""
        ...

    def flush(self) -> None:
        """Push buffered bytes to the underlying resource."""
        ...

    def __enter__(self) -> Self:
        """Enter context manager."""
        ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager, flushing and closing the stream."""
        ...

    def close(self) -> None:
        """Flush and release the stream. Safe to call more than once."""
        ...


@runtime_checkable
class ByteDuplex(ByteSource, ByteSink, Protocol):
    """Reader and writer sharing one resource and one position."""

    def seek(self, offset: int, whence: int = 0) -> int:
        """Move the shared position and return it."""
        ...

    def tell(self) -> int:
        """Return the shared position."""
        ...
