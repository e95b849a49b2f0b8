"""bfvm: a byte-tape virtual machine for the eight-instruction tape language."""

from .program import Program
from .runner import run_bf_source
from .tape import Direction, Tape, TapeExhausted, VMRuntimeError
from .tokenizer import strip_comments
from .validator import (
    InvalidInstruction,
    UnbalancedClose,
    UnbalancedOpen,
    ValidationError,
    validate,
    verify_program,
)
from .vm import VM, RunOptions, State, run

__version__ = "0.1.0"
