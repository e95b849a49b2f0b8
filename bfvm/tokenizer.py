# bfvm/tokenizer.py
# Instruction alphabet and the lenient (comment-stripping) lexing pass.

from __future__ import annotations
from typing import Union

# ------------------------------ Config ---------------------------------------

INC, DEC, RIGHT, LEFT, OUT, IN, OPEN, CLOSE = b"+-><.,[]"

INSTRUCTIONS = frozenset(b"+-<>.,[]")


def as_bytes(code: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """Coerce program text to bytes; str is encoded as UTF-8."""
    if isinstance(code, str):
        return code.encode("utf-8")
    return bytes(code)


def strip_comments(code: Union[bytes, bytearray, str]) -> bytes:
    """Drop every byte outside the instruction alphabet.

    Validation is strict and rejects comment characters, so callers that
    accept commented sources run them through here first.
    """
    return bytes(b for b in as_bytes(code) if b in INSTRUCTIONS)


def describe_byte(byte: int) -> str:
    """Printable form of a byte for messages: 'x' (0x78) or 0x0a."""
    if 0x20 <= byte < 0x7F:
        return f"{chr(byte)!r} (0x{byte:02x})"
    return f"0x{byte:02x}"
