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

"""Base exception hierarchy for :mod:`wbuf`."""

from __future__ import annotations

import io


class WbufError(Exception):
    """Base class for all wbuf exceptions.

    Callers can catch every library-specific failure with a single handler
    while standard Python exceptions (``ValueError`` for closed handles,
    ``TypeError`` for bad arguments) propagate normally.

    Example:
        Reporting any stream failure from a command-line tool::

            try:
                with Input.from_arg(args.input) as source:
                    data = source.read()
            except WbufError as e:
                logger.error("Cannot read input: %s", e)
                raise SystemExit(1) from e

    Note:
        Subclasses also inherit from ``OSError`` or ``io.UnsupportedOperation``
        so handlers written against the standard ``io`` module keep working.
    """


class ResourceUnavailableError(WbufError, OSError):
    """Raised when a file cannot be opened or created.

    The error carries the attempted path and the ``OSError`` reported by the
    operating system. Its ``errno``, ``strerror`` and ``filename`` mirror the
    underlying error, so ``str(error)`` reads like the standard message.

    Common causes:
        - The path does not exist (input, non-truncating duplex)
        - The parent directory does not exist (output)
        - Permission denied
        - The path names a directory

    Example:
        Falling back when an optional input file is missing::

            try:
                source = Input.from_arg(path)
            except ResourceUnavailableError as e:
                logger.warning("Skipping %s: %s", e.path, e.os_error)

    Note:
        Nothing is retried. No partially constructed stream is ever returned.
    """

    path: str
    os_error: OSError

    def __init__(self, path: str, os_error: OSError) -> None:
        if os_error.errno is None:
            super().__init__(f"{os_error}: {path!r}")
        else:
            super().__init__(os_error.errno, os_error.strerror, path)
        self.path = path
        self.os_error = os_error


class UnsupportedOperationError(WbufError, io.UnsupportedOperation):
    """Raised when a stream variant structurally cannot serve a request.

    Detected when the stream is constructed, before any resource is touched.
    The canonical case is requesting a duplex stream over the standard
    streams: standard input and standard output are two resources, not one
    seekable read-write resource.

    Example::

        try:
            InputOutput.from_arg("-")
        except UnsupportedOperationError:
            ...  # standard streams are not duplex-capable

    Note:
        Also inherits from ``io.UnsupportedOperation`` (and therefore from
        ``OSError`` and ``ValueError``).
    """


class IOFailureError(WbufError, OSError):
    """Raised when reading, writing or flushing fails on an open stream.

    Typical causes are a full disk, a broken pipe or a device error. The
    number of bytes already transferred by the failing call is reported in
    ``bytes_transferred`` when the operating system makes it known, and is
    ``None`` otherwise.

    Example:
        Reporting partial progress::

            try:
                sink.write(payload)
            except IOFailureError as e:
                logger.error(
                    "Wrote %s of %d bytes to %s",
                    e.bytes_transferred,
                    len(payload),
                    e.path,
                )

    Warning:
        The stream stays open after this error; its position is whatever the
        underlying resource reports. Callers decide whether to retry or abort.
    """

    path: str
    bytes_transferred: int | None
    os_error: OSError

    def __init__(
        self,
        path: str,
        os_error: OSError,
        *,
        bytes_transferred: int | None = None,
    ) -> None:
        if os_error.errno is None:
            super().__init__(f"{os_error}: {path!r}")
        else:
            super().__init__(os_error.errno, os_error.strerror, path)
        self.path = path
        self.os_error = os_error
        self.bytes_transferred = bytes_transferred


__all__ = [
    "IOFailureError",
    "ResourceUnavailableError",
    "UnsupportedOperationError",
    "WbufError",
]
