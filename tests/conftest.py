# tests/conftest.py
# Ensure the project root (the folder that contains 'bfvm' and 'tests') is on sys.path
# so that `from bfvm...` imports work during pytest collection without an install.

import io
import sys
import pathlib

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


class EventLog:
    """Shared timeline for a recording input/output channel pair."""

    def __init__(self):
        self.events = []


class RecordingInput:
    def __init__(self, data: bytes, log: EventLog):
        self._buf = io.BytesIO(data)
        self._log = log

    def read(self, n: int = -1) -> bytes:
        chunk = self._buf.read(n)
        self._log.events.append(("read", chunk))
        return chunk


class RecordingOutput:
    def __init__(self, log: EventLog):
        self._log = log
        self.data = bytearray()

    def write(self, data: bytes) -> int:
        self._log.events.append(("write", bytes(data)))
        self.data.extend(data)
        return len(data)


@pytest.fixture
def recording_channels():
    """Factory: recording_channels(b"input") -> (input, output, log)."""
    def make(data: bytes = b""):
        log = EventLog()
        return RecordingInput(data, log), RecordingOutput(log), log
    return make
