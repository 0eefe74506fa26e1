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

from __future__ import annotations

import io
import sys

import pytest

from tests.helpers import StdinFactory


@pytest.fixture
def fake_stdin(monkeypatch: pytest.MonkeyPatch) -> StdinFactory:
    """Return a factory that replaces ``sys.stdin`` with in-memory bytes."""

    def factory(data: bytes) -> io.BytesIO:
        buffer = io.BytesIO(data)
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(buffer))
        return buffer

    return factory


@pytest.fixture
def fake_stdout(monkeypatch: pytest.MonkeyPatch) -> io.BytesIO:
    """Replace ``sys.stdout`` with an in-memory buffer and return the buffer."""

    buffer = io.BytesIO()
    monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(buffer))
    return buffer
