# bfvm/runner.py
from __future__ import annotations

import io
import time
from typing import Any, BinaryIO, Dict, Optional, Tuple, Union

from .program import Program
from .receipts import make_base_receipt, mark_error
from .tape import VMRuntimeError
from .tokenizer import as_bytes, strip_comments
from .validator import ValidationError, verify_program
from .vm import VM, RunOptions

Source = Union[bytes, bytearray, str]


def run_bf_source(
    source: Source,
    stdin: Union[bytes, bytearray, BinaryIO, None] = None,
    stdout: Optional[BinaryIO] = None,
    options: Optional[RunOptions] = None,
    *,
    name: str = "<inline>",
    lenient: bool = False,
    verify: bool = False,
    receipt: Optional[Dict[str, Any]] = None,
) -> Tuple[Optional[bytes], Dict[str, Any]]:
    """Validate and run ``source``; return (output, receipt).

    With ``stdout=None`` the program output is captured and returned as bytes,
    otherwise it goes to ``stdout`` and ``output`` is None. ``receipt`` is
    filled in place when given; sections it lacks come from the code actually
    run, after lenient stripping. Validation and runtime errors propagate after
    the receipt has been marked as failed.
    """
    code = as_bytes(source)
    if lenient:
        code = strip_comments(code)
    base = make_base_receipt(name, code)
    if receipt is None:
        receipt = base
    else:
        for key, value in base.items():
            receipt.setdefault(key, value)
    if verify:
        receipt["verify"] = verify_program(code)

    try:
        program = Program.load(code)
    except ValidationError as exc:
        mark_error(receipt, exc, "validation")
        raise

    if isinstance(stdin, (bytes, bytearray)):
        stdin = io.BytesIO(bytes(stdin))
    capture = io.BytesIO() if stdout is None else None
    vm = VM(program, stdin, capture if capture is not None else stdout, options)

    start = time.perf_counter_ns()
    try:
        vm.run()
    except VMRuntimeError as exc:
        _finish(receipt, vm, start)
        mark_error(receipt, exc, "runtime")
        raise
    _finish(receipt, vm, start)

    return (capture.getvalue() if capture is not None else None), receipt


def _finish(receipt: Dict[str, Any], vm: VM, start_ns: int) -> None:
    receipt["run"]["elapsedMicros"] = (time.perf_counter_ns() - start_ns) // 1000
    receipt["stats"] = vm.stats()
    receipt.setdefault("logs", []).extend(vm.logs)
