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

"""Handle-level helpers shared by the stream families.

Every function translates ``OSError`` raised by the underlying file object
into the :mod:`wbuf.errors` taxonomy and logs the failure.
"""

from __future__ import annotations

import contextlib
from collections.abc import Buffer, Iterator
from typing import BinaryIO, Literal, cast

from ._types import Backing
from .errors import (
    IOFailureError,
    ResourceUnavailableError,
    UnsupportedOperationError,
)
from .logging import StructuredLogger, get_logger

__all__ = [
    "Role",
    "check_closed",
    "close_handle",
    "close_quietly",
    "flush_handle",
    "iter_chunks",
    "log_close",
    "log_open",
    "logger",
    "open_file",
    "read_handle",
    "readinto_handle",
    "standard_buffer",
    "write_handle",
]

type Role = Literal["input", "output", "duplex"]

logger: StructuredLogger = get_logger(__name__, context={"component": "wbuf"})


def open_file(path: str, mode: str, *, role: Role) -> BinaryIO:
    """Open ``path`` in binary ``mode``.

    Raises:
        ResourceUnavailableError: If the operating system refuses the open.
    """

    try:
        handle = open(path, mode)  # noqa: PTH123, SIM115
    except OSError as err:
        _stream_logger(role, path).debug(
            "Cannot open stream file.",
            event="stream.open_failed",
            context={"mode": mode, "error": str(err)},
        )
        raise ResourceUnavailableError(path, err) from err
    return handle  # pyright: ignore[reportReturnType]


def standard_buffer(stream: object, name: str) -> BinaryIO:
    """Return the binary buffer under a process standard stream.

    Raises:
        UnsupportedOperationError: If the stream is missing, as in a detached
            process, or has been replaced by a text-only object.
    """

    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        msg = f"sys.{name} has no binary buffer; pass stream= explicitly"
        raise UnsupportedOperationError(msg)
    return cast(BinaryIO, buffer)


def check_closed(closed: bool) -> None:  # noqa: FBT001
    """Raise ValueError if closed."""
    if closed:
        msg = "I/O operation on closed file"
        raise ValueError(msg)


def read_handle(handle: BinaryIO, size: int, *, label: str, role: Role) -> bytes:
    try:
        return handle.read(size)
    except OSError as err:
        raise _failure(err, label=label, role=role, op="read") from err


def readinto_handle(
    handle: BinaryIO, buffer: Buffer, *, label: str, role: Role
) -> int:
    try:
        count = handle.readinto(buffer)  # pyright: ignore[reportAttributeAccessIssue]
    except OSError as err:
        raise _failure(err, label=label, role=role, op="readinto") from err
    return count or 0


def iter_chunks(
    handle: BinaryIO, size: int, *, label: str, role: Role
) -> Iterator[bytes]:
    if size <= 0:
        msg = f"Chunk size must be positive, got {size}"
        raise ValueError(msg)
    while True:
        chunk = read_handle(handle, size, label=label, role=role)
        if not chunk:
            break
        yield chunk


def write_handle(handle: BinaryIO, data: Buffer, *, label: str, role: Role) -> int:
    """Write ``data`` and return the number of bytes accepted.

    Raises:
        IOFailureError: With ``bytes_transferred`` set when the operating
            system reports how much of ``data`` was written before failing.
    """

    try:
        return handle.write(data)
    except OSError as err:
        partial = err.characters_written if isinstance(err, BlockingIOError) else None
        raise _failure(
            err, label=label, role=role, op="write", bytes_transferred=partial
        ) from err


def flush_handle(handle: BinaryIO, *, label: str, role: Role) -> None:
    try:
        handle.flush()
    except OSError as err:
        raise _failure(err, label=label, role=role, op="flush") from err


def close_handle(handle: BinaryIO, *, label: str, role: Role) -> None:
    try:
        handle.close()
    except OSError as err:
        raise _failure(err, label=label, role=role, op="close") from err


def close_quietly(handle: BinaryIO) -> None:
    """Close a handle whose flush already failed.

    The flush failure is the error reported to the caller; a second failure
    from the same buffered bytes during close adds nothing.
    """

    with contextlib.suppress(OSError):
        handle.close()


def log_open(backing: Backing, *, label: str, role: Role) -> None:
    _stream_logger(role, label).debug(
        "Opened stream.",
        event="stream.open",
        context={"backing": backing.value},
    )


def log_close(backing: Backing, *, label: str, role: Role) -> None:
    _stream_logger(role, label).debug(
        "Closed stream.",
        event="stream.close",
        context={"backing": backing.value},
    )


def _stream_logger(role: Role, label: str) -> StructuredLogger:
    return logger.bind(role=role, label=label)


def _failure(
    err: OSError,
    *,
    label: str,
    role: Role,
    op: str,
    bytes_transferred: int | None = None,
) -> IOFailureError:
    _stream_logger(role, label).debug(
        "Stream operation failed.",
        event="stream.io_failed",
        context={
            "operation": op,
            "bytes_transferred": bytes_transferred,
            "error": str(err),
        },
    )
    return IOFailureError(label, err, bytes_transferred=bytes_transferred)
