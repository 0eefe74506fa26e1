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

"""Standard streams, files and memory buffers behind one byte-stream type.

Command-line tools usually take an optional input and output path: a path
means "use this file", no path means "use standard input/output". ``wbuf``
turns that optional value into a ready stream, and tests swap in a memory
buffer without touching the call site.

Example usage::

    import argparse

    from wbuf import Input, Output

    parser = argparse.ArgumentParser()
    parser.add_argument("input", nargs="?")
    parser.add_argument("output", nargs="?")
    args = parser.parse_args()

    with Input.from_arg(args.input) as source, Output.from_arg(args.output) as sink:
        sink.write_all(source.chunks())

Three stream families are provided:

- ``Input``: standard input, a readable file, or bytes in memory.
- ``Output``: standard output, a created/truncated file, or a memory buffer.
- ``InputOutput``: a file opened for update, or a memory buffer.
"""

from __future__ import annotations

from ._duplex import InputOutput
from ._input import Input
from ._output import Output
from ._protocols import ByteDuplex, ByteSink, ByteSource
from ._types import DEFAULT_CHUNK_SIZE, STANDARD_STREAM, Backing, Selector
from .errors import (
    IOFailureError,
    ResourceUnavailableError,
    UnsupportedOperationError,
    WbufError,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "STANDARD_STREAM",
    "Backing",
    "ByteDuplex",
    "ByteSink",
    "ByteSource",
    "IOFailureError",
    "Input",
    "InputOutput",
    "Output",
    "ResourceUnavailableError",
    "Selector",
    "UnsupportedOperationError",
    "WbufError",
]
