# bfvm/program.py
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Union

from .tokenizer import CLOSE, OPEN, as_bytes
from .validator import validate


@dataclass(frozen=True)
class Program:
    """Validated instruction bytes plus their bracket jump table.

    Build one with ``Program.load``. A table passed directly must pair every
    bracket of ``code`` with its partner; it is stored read-only so it can
    never drift from ``code``.
    """
    code: bytes
    jumps: Mapping[int, int]

    def __post_init__(self):
        jumps = dict(self.jumps)
        _check_jumps(self.code, jumps)
        object.__setattr__(self, "jumps", MappingProxyType(jumps))

    @classmethod
    def load(cls, code: Union[bytes, bytearray, str]) -> "Program":
        raw = as_bytes(code)
        return cls(raw, validate(raw))

    def __len__(self) -> int:
        return len(self.code)


def _check_jumps(code: bytes, jumps: Dict[int, int]) -> None:
    """Raise ValueError unless ``jumps`` is exactly the bracket pairing of ``code``."""
    expected: Dict[int, int] = {}
    stack = []
    for i, b in enumerate(code):
        if b == OPEN:
            stack.append(i)
        elif b == CLOSE:
            if not stack:
                raise ValueError(f"jump table for unbalanced code: ']' at position {i} has no partner")
            j = stack.pop()
            expected[i] = j
            expected[j] = i
    if stack:
        raise ValueError(f"jump table for unbalanced code: '[' at position {stack[-1]} has no partner")
    if jumps != expected:
        missing = sorted(set(expected) - set(jumps))
        extra = sorted(set(jumps) - set(expected))
        wrong = sorted(k for k in set(expected) & set(jumps) if jumps[k] != expected[k])
        raise ValueError(
            f"jump table does not match code (missing {missing}, extra {extra}, wrong partner {wrong})"
        )
