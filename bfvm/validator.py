# bfvm/validator.py
# Single-pass program validation and jump-table construction.
# - validate(): strict, stops at the first problem, returns the jump table.
# - verify_program(): reports every problem plus lint warnings, never raises.

from __future__ import annotations
from typing import Any, Dict, List, Union

from .tokenizer import CLOSE, DEC, IN, INC, INSTRUCTIONS, OPEN, as_bytes, describe_byte

JumpTable = Dict[int, int]

# ----------------------------
# Errors
# ----------------------------

class ValidationError(Exception):
    """Program rejected before execution; no output is ever produced."""

class InvalidInstruction(ValidationError):
    def __init__(self, position: int, byte: int):
        super().__init__(f"Input not valid: {describe_byte(byte)} at position {position}")
        self.position = position
        self.byte = byte

class UnbalancedClose(ValidationError):
    def __init__(self, position: int):
        super().__init__(f"No open parenthesis for ']' at position {position}")
        self.position = position

class UnbalancedOpen(ValidationError):
    def __init__(self, positions: List[int]):
        listed = ", ".join(str(p) for p in positions)
        super().__init__(f"Loops not balanced: unmatched '[' at position(s) {listed}")
        self.positions = list(positions)
        self.position = self.positions[0]

# ----------------------------
# Strict pass
# ----------------------------

def validate(code: Union[bytes, bytearray, str]) -> JumpTable:
    """Return a bidirectional map between matching bracket positions.

    Raises InvalidInstruction, UnbalancedClose or UnbalancedOpen.
    """
    code = as_bytes(code)
    jumps: JumpTable = {}
    pending: List[int] = []

    for i, byte in enumerate(code):
        if byte == OPEN:
            pending.append(i)
        elif byte == CLOSE:
            if not pending:
                raise UnbalancedClose(i)
            opening = pending.pop()
            jumps[opening] = i
            jumps[i] = opening
        elif byte not in INSTRUCTIONS:
            raise InvalidInstruction(i, byte)

    if pending:
        raise UnbalancedOpen(pending)
    return jumps

# ----------------------------
# Reporting pass
# ----------------------------

def verify_program(code: Union[bytes, bytearray, str]) -> Dict[str, List[str]]:
    """
    Returns {'errors': [...], 'warnings': [...]} without raising.
    Rules:
      - every byte outside the alphabet is an error
      - every unmatched ']' and every unmatched '[' is an error
      - a loop reached before any cell is written is never entered (warn)
      - a '[' directly after ']' is never entered (warn)
      - an empty loop '[]' never terminates once entered (warn)
    """
    code = as_bytes(code)
    errs: List[str] = []
    warns: List[str] = []

    pending: List[int] = []
    written = False
    prev = None

    for i, byte in enumerate(code):
        where = f"position {i}"

        if byte == OPEN:
            if prev == CLOSE:
                warns.append(f"{where}: '[' directly after ']' is never entered")
            elif not written and not pending:
                warns.append(f"{where}: loop before any cell is written is never entered")
            pending.append(i)

        elif byte == CLOSE:
            if not pending:
                errs.append(f"{where}: no open parenthesis for ']'")
            else:
                opening = pending.pop()
                if opening == i - 1:
                    warns.append(f"position {opening}: empty loop never terminates on a nonzero cell")

        elif byte not in INSTRUCTIONS:
            errs.append(f"{where}: input not valid {describe_byte(byte)}")

        elif byte in (INC, DEC, IN) and not pending:
            written = True

        if byte in INSTRUCTIONS:
            prev = byte

    for opening in pending:
        errs.append(f"position {opening}: loops not balanced, '[' is never closed")

    return {"errors": errs, "warnings": warns}


def verify_or_raise(code: Union[bytes, bytearray, str]) -> None:
    res = verify_program(code)
    if res["errors"]:
        raise ValidationError("Static verification failed:\n- " + "\n- ".join(res["errors"]))


def summarize(report: Dict[str, Any]) -> str:
    return f"{len(report.get('errors') or [])} error(s), {len(report.get('warnings') or [])} warning(s)"
