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

"""Shared types and selector rules for stream construction."""

from __future__ import annotations

import os
from enum import Enum
from typing import Final

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "MEMORY_LABEL",
    "STANDARD_STREAM",
    "STDIN_LABEL",
    "STDOUT_LABEL",
    "Backing",
    "Selector",
    "resolve_selector",
]

#: Default chunk size for iteration (64KB).
DEFAULT_CHUNK_SIZE: Final[int] = 65_536

#: Selector value that explicitly requests the standard stream.
STANDARD_STREAM: Final[str] = "-"

STDIN_LABEL: Final[str] = "<stdin>"
STDOUT_LABEL: Final[str] = "<stdout>"
MEMORY_LABEL: Final[str] = "<memory>"

type Selector = str | os.PathLike[str] | None
"""Optional path-like value, usually taken straight from a parsed CLI argument."""


class Backing(Enum):
    """Concrete resource realizing a stream handle.

    STANDARD: The process-wide standard stream. Never closed by wbuf.
    FILE: A file opened by the stream, owned until the stream is closed.
    MEMORY: A private in-memory buffer.
    """

    STANDARD = "standard"
    FILE = "file"
    MEMORY = "memory"


def resolve_selector(arg: Selector) -> str | None:
    """Normalize a selector to a path string.

    Returns ``None`` when the standard stream is requested, either by omitting
    the value or by passing ``"-"``.

    Raises:
        TypeError: If ``arg`` is neither ``None``, a string nor path-like.
    """

    if arg is None:
        return None
    path = os.fspath(arg)
    if not isinstance(path, str):
        msg = f"Selector must be a text path, got {type(path).__name__}"
        raise TypeError(msg)
    if path == STANDARD_STREAM:
        return None
    return path
