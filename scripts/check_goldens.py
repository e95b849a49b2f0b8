from __future__ import annotations
import sys
from pathlib import Path
from typing import Optional

# Ensure project root (which contains `bfvm/`) is on sys.path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bfvm.runner import run_bf_source  # noqa: E402
from bfvm.sources import read_source_file  # noqa: E402
from bfvm.tape import VMRuntimeError  # noqa: E402
from bfvm.validator import ValidationError  # noqa: E402


def check_program(path: Path) -> int:
    golden_path = Path(str(path) + ".out")
    if not golden_path.exists():
        print(f"[ERROR] Missing golden: {golden_path}")
        return 1
    input_path = Path(str(path) + ".in")
    stdin = input_path.read_bytes() if input_path.exists() else b""

    try:
        out, _ = run_bf_source(read_source_file(path), stdin, name=path.name, lenient=True)
    except (ValidationError, VMRuntimeError) as e:
        print(f"[FAIL] {path.name}: {e}")
        return 2

    expected = golden_path.read_bytes()
    if out == expected:
        print(f"[OK] {path.name} matches golden.")
        return 0
    print(f"[FAIL] {path.name}: expected {expected!r}, got {out!r}")
    return 3


def main(base: Optional[Path] = None) -> int:
    base = base or (ROOT / "Programs")
    if not base.exists():
        print(f"[ERROR] {base} not found.")
        return 1
    rc = 0
    for p in sorted(base.glob("*.b")):
        rc |= check_program(p)
    return 1 if rc else 0


if __name__ == "__main__":
    sys.exit(main())
