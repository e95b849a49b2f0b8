# bfvm/sink.py
from __future__ import annotations
from typing import Any, BinaryIO

from .tape import VMRuntimeError


class OutputSink:
    """Append-only buffer of produced bytes.

    Nothing reaches the output channel until ``flush_to`` is called; the VM
    does that before every read and once at halt.
    """

    def __init__(self):
        self._buf = bytearray()
        self.total = 0    # bytes appended over the sink's lifetime
        self.flushes = 0  # flushes that actually wrote something

    def append(self, byte: int) -> None:
        try:
            self._buf.append(byte)
        except MemoryError as exc:
            raise VMRuntimeError(f"output buffer could not grow past {len(self._buf)} bytes") from exc
        self.total += 1

    def __len__(self) -> int:
        return len(self._buf)

    def drain(self) -> bytes:
        data = bytes(self._buf)
        self._buf.clear()
        return data

    def flush_to(self, channel: BinaryIO | Any) -> int:
        """Write buffered bytes to ``channel`` in order and clear the buffer."""
        data = self.drain()
        if data:
            channel.write(data)
            self.flushes += 1
        flush = getattr(channel, "flush", None)
        if callable(flush):
            flush()
        return len(data)
