#!/usr/bin/env python3
"""
bfvm CLI: run a tape program from a file or from the command line.

Usage:
  python -m bfvm.bf_cli -f ./Programs/hello.b
  python -m bfvm.bf_cli -i '++++++++[>++++++++<-]>+.' --print-receipt
  echo hi | bfvm -i ',[.,]' --eof zero --receipt-out ./receipt.json

Program input is read from stdin and program output written to stdout as raw
bytes. Receipts and diagnostics go to stderr so they never mix with program
output.

Exit codes: 0 ok, 1 validation or runtime error, 2 source file not found.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .receipts import write_receipt
from .runner import run_bf_source
from .sources import inline_source, read_source_file
from .tape import VMRuntimeError
from .validator import ValidationError, summarize
from .vm import EOF_POLICIES, EOF_ZERO, RunOptions


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bfvm",
        description="Run a tape program; print receipts and timing on request.",
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("-f", "--file", metavar="PATH", help="Read the program from PATH (one trailing newline is dropped).")
    src.add_argument("-i", "--inline", metavar="CODE", help="Program given literally.")
    p.add_argument("--lenient", action="store_true", help="Strip non-instruction bytes (comments) before validation.")
    p.add_argument("--eof", choices=EOF_POLICIES, default=EOF_ZERO, help="Cell value after ',' hits end of input (default: zero).")
    p.add_argument("--max-tape-cells", type=_positive_int, metavar="N", help="Abort once the tape would exceed N cells.")
    p.add_argument("--time", action="store_true", help="Print elapsed microseconds to stderr.")
    p.add_argument("--verify", action="store_true", help="Run the verifier (warnings-only) and attach it to the receipt.")
    p.add_argument("--print-receipt", action="store_true", help="Print receipt JSON to stderr.")
    p.add_argument("--receipt-out", metavar="PATH", help="Write receipt JSON to PATH.")
    return p


def main(argv: Optional[List[str]] = None, stdin=None, stdout=None) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout.buffer

    if args.file:
        path = Path(args.file)
        if not path.is_file():
            print(f"bfvm: source not found: {path}", file=sys.stderr)
            return 2
        name = path.name
        code = read_source_file(path)
    else:
        name = "<inline>"
        code = inline_source(args.inline)

    receipt: Dict[str, Any] = {}
    options = RunOptions(eof_policy=args.eof, max_tape_cells=args.max_tape_cells)

    try:
        run_bf_source(code, stdin, stdout, options, name=name, lenient=args.lenient, verify=args.verify, receipt=receipt)
    except (ValidationError, VMRuntimeError) as e:
        print(f"bfvm: {e}", file=sys.stderr)
        write_receipt(args.receipt_out, receipt, args.print_receipt)
        return 1

    if args.verify and receipt["verify"]["warnings"]:
        print(f"bfvm: verify: {summarize(receipt['verify'])}", file=sys.stderr)
        for w in receipt["verify"]["warnings"]:
            print(f"  - {w}", file=sys.stderr)
    if args.time:
        print(f"µs elapsed: {receipt['run']['elapsedMicros']}", file=sys.stderr)
    write_receipt(args.receipt_out, receipt, args.print_receipt)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
