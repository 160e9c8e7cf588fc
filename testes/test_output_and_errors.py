import json
import logging
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("pydantic")

from pydantic import ValidationError

from docs2gutenberg.models import ConversionReport, ConversionResult
from docs2gutenberg.utils.errors import ERRORS, report_error, report_ok
from docs2gutenberg.utils.logging_config import setup_logging
from docs2gutenberg.utils.output import format_report, format_result, write_report_to_file, write_to_file


def make_result(success=True):
    report = ConversionReport(
        input_file="in.html",
        policies_triggered=["requireH2"],
        warnings=["w1"],
        errors=[] if success else ["Document needs at least 1 H2 heading(s), found 0"],
        actions=["auto-generated 1 H2 heading(s)"],
        success=success,
        execution_time_ms=12.3456,
    )
    return ConversionResult(html="<!-- wp:paragraph -->\n<p>x</p>\n<!-- /wp:paragraph -->", report=report)


def test_report_model():
    report = ConversionReport(inputFile="a.html", executionTimeMs=1.23456)
    assert report.input_file == "a.html"
    assert report.execution_time_ms == 1.235
    assert report.success is True
    with pytest.raises(ValidationError):
        ConversionReport(execution_time_ms=-1)


def test_format_result_html_and_json():
    result = make_result()
    assert format_result(result) == result.html
    assert json.loads(format_result(result, "json")) == {"html": result.html}
    payload = json.loads(format_result(result, "json", include_report=True, pretty=False))
    assert payload["report"]["policiesTriggered"] == ["requireH2"]
    assert payload["report"]["executionTimeMs"] == 12.346
    with pytest.raises(ValueError):
        format_result(result, "xml")


def test_write_to_file_creates_directories(tmp_path):
    target = tmp_path / "nested" / "dir" / "out.html"
    assert write_to_file(make_result(), str(target)) == str(target)
    assert target.read_text(encoding="utf-8").startswith("<!-- wp:paragraph -->")


def test_format_report_sections():
    text = format_report(make_result(success=False).report)
    assert "CONVERSION REPORT" in text
    assert "Input:    in.html" in text
    assert "Output:   (stdout)" in text
    assert "Status:   FAILED" in text
    assert "Policies triggered:\n   - requireH2" in text
    assert "Actions taken:" in text
    assert "Errors:\n   - Document needs at least 1 H2 heading(s), found 0" in text


def test_format_report_omits_empty_sections():
    text = format_report(ConversionReport())
    assert "Status:   SUCCESS" in text
    assert "Warnings:" not in text
    assert "Errors:" not in text


def test_write_report_to_file(tmp_path):
    path = tmp_path / "reports" / "report.json"
    write_report_to_file(make_result().report, str(path))
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["inputFile"] == "in.html"
    assert "executionTimeMs" in data


def read_jsonl(path):
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def test_report_ok_appends_entries(tmp_path):
    report = make_result().report
    path = report_ok("CONVERTED", report, {"executionTimeMs": 1.0}, report_dir=str(tmp_path))
    report_ok("CONVERTED_WITH_WARNINGS", report, report_dir=str(tmp_path))
    entries = read_jsonl(path)
    assert os.path.basename(path) == "success.jsonl"
    assert [e["code"] for e in entries] == ["CONVERTED", "CONVERTED_WITH_WARNINGS"]
    assert entries[0]["message"] == ERRORS["CONVERTED"]
    assert entries[0]["executionTimeMs"] == 1.0
    assert entries[0]["inputFile"] == "in.html"


def test_report_error_records_exception(tmp_path):
    report = {"inputFile": "broken.html", "errors": ["boom"]}
    path = report_error("PIPELINE_FAILED", report, RuntimeError("boom"), report_dir=str(tmp_path))
    entry = read_jsonl(path)[0]
    assert os.path.basename(path) == "errors.jsonl"
    assert entry["code"] == "PIPELINE_FAILED"
    assert entry["error"] == "boom"
    assert entry["errors"] == ["boom"]


def test_unknown_code_falls_back_to_code(tmp_path):
    path = report_error("SOMETHING_ELSE", ConversionReport(), report_dir=str(tmp_path))
    assert read_jsonl(path)[0]["message"] == "SOMETHING_ELSE"


def test_setup_logging_with_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_file = tmp_path / "logs" / "run.log"
    try:
        setup_logging("debug", str(log_file))
        logging.getLogger("docs2gutenberg.test").debug("hello log")
        for handler in root.handlers:
            handler.flush()
        assert root.level == logging.DEBUG
        assert "[DEBUG] docs2gutenberg.test - hello log" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
