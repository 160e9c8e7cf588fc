import importlib.util
import json
import logging
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")
pd = pytest.importorskip("pandas")
duckdb = pytest.importorskip("duckdb")

from docs2gutenberg.conversion_tool import GutenbergConversionTool


def load_script():
    path = os.path.join(PROJECT_ROOT, "scripts", "batch_convert.py")
    spec = importlib.util.spec_from_file_location("batch_convert", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


batch_convert = load_script()


@pytest.fixture
def exports(tmp_path):
    input_dir = tmp_path / "exports"
    input_dir.mkdir()
    (input_dir / "good.html").write_text("<h2>Section</h2><p>Body</p>", encoding="utf-8")
    (input_dir / "plain.htm").write_text("<p>no heading</p>", encoding="utf-8")
    (input_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    return input_dir


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_find_inputs_and_output_names(exports, tmp_path):
    names = [os.path.basename(p) for p in batch_convert.find_inputs(str(exports))]
    assert names == ["good.html", "plain.htm"]
    assert batch_convert.output_path_for("/a/b/good.html", "/out") == os.path.join("/out", "good.gutenberg.html")


def test_convert_directory_summary(exports, tmp_path):
    tool = GutenbergConversionTool({"mode": "strict"})
    output_dir = tmp_path / "output"
    report_dir = tmp_path / "runs"
    df = batch_convert.convert_directory(tool, str(exports), str(output_dir), report_dir=str(report_dir))

    assert list(df.columns) == batch_convert.SUMMARY_COLUMNS
    rows = df.set_index("file")
    assert bool(rows.loc["good.html", "success"]) is True
    assert bool(rows.loc["plain.htm", "success"]) is False
    assert rows.loc["plain.htm", "errors"] >= 1
    assert "requireH2" in rows.loc["plain.htm", "policies"]

    assert (output_dir / "good.gutenberg.html").exists()
    # strict failures still produce output
    assert (output_dir / "plain.gutenberg.html").exists()

    ok = [json.loads(line) for line in (report_dir / "success.jsonl").read_text(encoding="utf-8").splitlines()]
    failed = [json.loads(line) for line in (report_dir / "errors.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [e["code"] for e in ok] == ["CONVERTED"]
    assert [e["code"] for e in failed] == ["POLICY_FAILED"]


def test_summary_csv_and_database(exports, tmp_path):
    tool = GutenbergConversionTool()
    df = batch_convert.convert_directory(tool, str(exports), str(tmp_path / "out"), report_dir=str(tmp_path / "runs"))

    summary = tmp_path / "reports" / "summary.csv"
    batch_convert.write_summary(df, str(summary))
    assert list(pd.read_csv(summary)["file"]) == ["good.html", "plain.htm"]

    db_path = tmp_path / "data" / "conversions.duckdb"
    batch_convert.store_summary(df, str(db_path))
    batch_convert.store_summary(df, str(db_path))
    con = duckdb.connect(database=str(db_path), read_only=True)
    try:
        count = con.execute(f"SELECT COUNT(*) FROM {batch_convert.TABLE_NAME}").fetchone()[0]
        columns = [row[0] for row in con.execute(f"DESCRIBE {batch_convert.TABLE_NAME}").fetchall()]
    finally:
        con.close()
    assert count == 4
    assert columns[-1] == "converted_at"


def test_main_exit_codes(exports, tmp_path):
    args = [
        "--input-dir", str(exports),
        "--output-dir", str(tmp_path / "out"),
        "--summary", str(tmp_path / "summary.csv"),
        "--report-dir", str(tmp_path / "runs"),
        "--log-level", "WARNING",
    ]
    # relaxed default config: both files convert
    assert batch_convert.main(args) == 0
    assert (tmp_path / "summary.csv").exists()

    assert batch_convert.main(["--input-dir", str(tmp_path / "missing")]) == 1

    empty = tmp_path / "empty"
    empty.mkdir()
    assert batch_convert.main(["--input-dir", str(empty), "--summary", str(tmp_path / "none.csv")]) == 0
    assert not (tmp_path / "none.csv").exists()
