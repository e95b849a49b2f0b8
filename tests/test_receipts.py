import io
from pathlib import Path
import json

import jsonschema
import pytest

from bfvm.receipts import RECEIPT_SCHEMA, make_base_receipt, source_hash, validate_receipt
from bfvm.runner import run_bf_source
from bfvm.tape import TapeExhausted
from bfvm.validator import UnbalancedOpen
from bfvm.vm import RunOptions

SCHEMA = json.loads(Path(RECEIPT_SCHEMA).read_text(encoding="utf-8"))


def test_schema_itself_is_valid():
    jsonschema.Draft202012Validator.check_schema(SCHEMA)


def test_base_receipt_matches_schema():
    r = make_base_receipt("demo.b", b"+.")
    validate_receipt(r)
    assert r["program"]["hash"] == source_hash(b"+.")
    assert r["program"]["size"] == 2


def test_successful_run_receipt():
    out, receipt = run_bf_source("++[>+++<-]>.", name="six.b")
    assert out == b"\x06"
    validate_receipt(receipt)
    assert receipt["status"] == "ok"
    assert receipt["engine"] == "bfvm"
    assert receipt["program"]["name"] == "six.b"
    assert receipt["stats"]["bytesOut"] == 1
    assert receipt["stats"]["tapeSize"] == 2
    assert receipt["logs"][-1]["event"] == "halted"
    assert receipt["run"]["elapsedMicros"] >= 0


def test_output_to_channel_returns_none():
    sink = io.BytesIO()
    out, _ = run_bf_source(b",.", b"Q", sink)
    assert out is None
    assert sink.getvalue() == b"Q"


def test_lenient_strips_comments_before_hashing():
    out, receipt = run_bf_source("three +++ and print .", lenient=True)
    assert out == b"\x03"
    assert receipt["program"]["hash"] == source_hash(b"+++.")


def test_verify_section_attached():
    # both loops are skipped at run time, so the empty one never spins
    out, receipt = run_bf_source(b"[-][]+.", verify=True)
    assert out == b"\x01"
    validate_receipt(receipt)
    assert receipt["verify"]["errors"] == []
    assert len(receipt["verify"]["warnings"]) == 3


def test_validation_failure_marks_receipt_and_produces_no_output():
    sink = io.BytesIO()
    receipt = make_base_receipt("bad.b", b"+.[")
    with pytest.raises(UnbalancedOpen):
        run_bf_source(b"+.[", None, sink, receipt=receipt)
    assert sink.getvalue() == b""
    validate_receipt(receipt)
    assert receipt["status"] == "error"
    assert "Loops not balanced" in receipt["reason"]
    assert receipt["logs"][-1]["event"] == "validation"


def test_runtime_failure_marks_receipt():
    receipt = make_base_receipt("grow.b", b"+[>+]")
    with pytest.raises(TapeExhausted):
        run_bf_source(b"+[>+]", options=RunOptions(max_tape_cells=16), receipt=receipt)
    validate_receipt(receipt)
    assert receipt["status"] == "error"
    assert receipt["stats"]["tapeSize"] == 16
    assert receipt["logs"][-1] == {"level": "error", "event": "runtime", "message": receipt["reason"]}


def test_error_receipt_requires_reason():
    r = make_base_receipt("x.b", b"")
    r["status"] = "error"
    with pytest.raises(jsonschema.ValidationError):
        validate_receipt(r)


def test_unknown_field_rejected():
    r = make_base_receipt("x.b", b"")
    r["extra"] = True
    with pytest.raises(jsonschema.ValidationError):
        validate_receipt(r)
