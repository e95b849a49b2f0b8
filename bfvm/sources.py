# bfvm/sources.py
from __future__ import annotations
import os
from pathlib import Path
from typing import Union


def read_source_file(path: Union[str, Path]) -> bytes:
    """Read program bytes from disk, dropping a single trailing newline."""
    data = Path(path).read_bytes()
    if data.endswith(b"\r\n"):
        return data[:-2]
    if data.endswith(b"\n"):
        return data[:-1]
    return data


def inline_source(text: str) -> bytes:
    """Program given literally on the command line.

    ``os.fsencode`` recovers the original argv bytes, including ones that are
    not valid UTF-8 and arrive as surrogate escapes.
    """
    return os.fsencode(text)
