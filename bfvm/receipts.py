# bfvm/receipts.py
# Run receipts: a JSON record of what ran, how long it took and how it ended.
# The shape is frozen in schemas/bf-receipt.schema.json.

from __future__ import annotations

import datetime as _dt
import hashlib
import json
import sys
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from jsonschema import Draft202012Validator

ENGINE = "bfvm"
RECEIPT_SCHEMA = Path(__file__).resolve().parent / "schemas" / "bf-receipt.schema.json"


def _now_utc_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0, tzinfo=None).isoformat() + "Z"


def source_hash(code: bytes) -> str:
    return "sha256:" + hashlib.sha256(code).hexdigest()


def make_base_receipt(name: str, code: bytes) -> Dict[str, Any]:
    return {
        "engine": ENGINE,
        "program": {
            "name": name,
            "hash": source_hash(code),
            "size": len(code),
        },
        "run": {
            "timestamp": _now_utc_iso(),
            "uuid": str(uuid.uuid4()),
            "elapsedMicros": 0,
        },
        "status": "ok",
        "logs": [],
        "stats": {
            "steps": 0,
            "tapeSize": 1,
            "cursor": 0,
            "bytesIn": 0,
            "bytesOut": 0,
            "flushes": 0,
        },
        # reason / verify added when present
    }


def mark_error(receipt: Dict[str, Any], exc: BaseException, event: str) -> Dict[str, Any]:
    receipt["status"] = "error"
    receipt["reason"] = str(exc)
    receipt.setdefault("logs", []).append({"level": "error", "event": event, "message": str(exc)})
    return receipt


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    schema = json.loads(RECEIPT_SCHEMA.read_text(encoding="utf-8"))
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate_receipt(receipt: Dict[str, Any]) -> None:
    """Raise jsonschema.ValidationError if ``receipt`` does not match the frozen shape."""
    _validator().validate(receipt)


def write_receipt(path: Optional[str], receipt: Dict[str, Any], print_receipt: bool) -> None:
    dump = json.dumps(receipt, indent=2, sort_keys=True, ensure_ascii=False)
    if print_receipt:
        # stdout belongs to the program
        print(dump, file=sys.stderr)
    if path:
        Path(path).write_text(dump + "\n", encoding="utf-8")
