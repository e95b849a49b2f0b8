# bfvm/vm.py
from __future__ import annotations

import io
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Union

from .program import Program
from .sink import OutputSink
from .tape import Direction, Tape, TapeExhausted, VMRuntimeError
from .tokenizer import CLOSE, DEC, IN, INC, LEFT, OPEN, OUT, RIGHT, as_bytes
from .validator import validate

__all__ = [
    "EOF_POLICIES", "RunOptions", "State", "TapeExhausted", "VM", "VMRuntimeError", "run",
]

# What ',' stores when the input channel is exhausted.
EOF_ZERO = "zero"            # cell becomes 0
EOF_UNCHANGED = "unchanged"  # cell keeps its value
EOF_MAX = "max"              # cell becomes 255 (C getc() EOF stored in a uint8)
EOF_POLICIES = (EOF_ZERO, EOF_UNCHANGED, EOF_MAX)


@dataclass
class RunOptions:
    eof_policy: str = EOF_ZERO
    max_tape_cells: Optional[int] = None  # None = grow until memory runs out

    def __post_init__(self):
        if self.eof_policy not in EOF_POLICIES:
            raise ValueError(f"eof_policy must be one of {', '.join(EOF_POLICIES)}; got {self.eof_policy!r}")


class State(Enum):
    RUNNING = "running"
    HALTED = "halted"


class VM:
    """Interprets a validated Program against its own Tape and OutputSink.

    Output produced by '.' is buffered and only written to ``output`` right
    before a ',' reads input and once when the program halts.
    """

    def __init__(
        self,
        program: Program,
        input_channel: Optional[BinaryIO] = None,
        output_channel: Optional[BinaryIO] = None,
        options: Optional[RunOptions] = None,
    ):
        self.program = program
        self.code = program.code
        self.jumps = program.jumps
        self.input = input_channel
        self.output = output_channel if output_channel is not None else io.BytesIO()
        self.options = options or RunOptions()

        self.tape = Tape(max_cells=self.options.max_tape_cells)
        self.sink = OutputSink()
        self.state = State.RUNNING
        self.pc = 0
        self.steps = 0
        self.bytes_in = 0
        self.eof_reads = 0
        self.logs: List[Dict[str, Any]] = []

    # ---------- helpers
    def _log(self, level: str, event: str, message: str) -> None:
        self.logs.append({"level": level, "event": event, "message": message})

    def _halt(self) -> None:
        self.state = State.HALTED
        self.sink.flush_to(self.output)
        self._log("info", "halted", f"halted after {self.steps} steps")

    def _read_input(self) -> None:
        # output written so far must be visible before we block on input
        self.sink.flush_to(self.output)
        data = self.input.read(1) if self.input is not None else b""
        if data:
            self.tape.write(data[0])
            self.bytes_in += 1
            return
        self.eof_reads += 1
        if self.eof_reads == 1:
            self._log("info", "eof", f"end of input at pc={self.pc} (policy: {self.options.eof_policy})")
        if self.options.eof_policy == EOF_ZERO:
            self.tape.write(0)
        elif self.options.eof_policy == EOF_MAX:
            self.tape.write(0xFF)

    # ---------- execution
    def step(self) -> bool:
        """Execute one instruction. Returns False once the VM has halted."""
        if self.state is State.HALTED:
            return False
        if self.pc >= len(self.code):
            self._halt()
            return False

        op = self.code[self.pc]
        tape = self.tape
        if op == INC:
            tape.write(tape.read() + 1)
        elif op == DEC:
            tape.write(tape.read() - 1)
        elif op == RIGHT:
            tape.advance(Direction.RIGHT)
        elif op == LEFT:
            tape.advance(Direction.LEFT)
        elif op == OUT:
            self.sink.append(tape.read())
        elif op == IN:
            self._read_input()
        elif op == OPEN:
            if tape.read() == 0:
                self.pc = self.jumps[self.pc]
        elif op == CLOSE:
            if tape.read() != 0:
                self.pc = self.jumps[self.pc]

        self.pc += 1
        self.steps += 1
        return True

    def run(self) -> "VM":
        # a VMRuntimeError aborts here; pending output is never flushed
        while self.step():
            pass
        return self

    def stats(self) -> Dict[str, int]:
        return {
            "steps": self.steps,
            "tapeSize": len(self.tape),
            "cursor": self.tape.cursor,
            "bytesIn": self.bytes_in,
            "bytesOut": self.sink.total,
            "flushes": self.sink.flushes,
        }


def run(
    program: Union[Program, bytes, bytearray, str],
    jump_table: Optional[Mapping[int, int]] = None,
    input_channel: Optional[BinaryIO] = None,
    output_channel: Optional[BinaryIO] = None,
    options: Optional[RunOptions] = None,
) -> VM:
    """Run ``program`` to completion and return the halted VM.

    ``program`` may be a Program, or raw bytes with the jump table from
    ``validate``. Raw bytes without a table are validated first; a table
    that does not pair the brackets of the code raises ValueError.
    """
    if not isinstance(program, Program):
        code = as_bytes(program)
        program = Program(code, jump_table if jump_table is not None else validate(code))
    return VM(program, input_channel, output_channel, options).run()
