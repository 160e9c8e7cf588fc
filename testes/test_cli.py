import json
import logging
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")
yaml = pytest.importorskip("yaml")

from docs2gutenberg.cli import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    # main() installs its own console handler on the root logger
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def article(tmp_path):
    path = tmp_path / "article.html"
    path.write_text("<h2>Section</h2><p>Hello</p>", encoding="utf-8")
    return path


def test_convert_to_file(article, tmp_path, capsys):
    target = tmp_path / "out" / "article.gutenberg.html"
    assert main(["convert", str(article), "-o", str(target)]) == 0
    content = target.read_text(encoding="utf-8")
    assert "<!-- wp:heading" in content and "<!-- wp:paragraph -->" in content
    assert "Output saved to" in capsys.readouterr().out


def test_convert_to_stdout(article, capsys):
    assert main(["convert", str(article)]) == 0
    out = capsys.readouterr().out
    assert '<!-- wp:heading {"level":2} -->' in out


def test_convert_json_format(article, tmp_path):
    target = tmp_path / "article.json"
    assert main(["convert", str(article), "-f", "json", "-o", str(target)]) == 0
    data = json.loads(target.read_text(encoding="utf-8"))
    assert "<!-- wp:paragraph -->" in data["html"]
    assert data["report"]["success"] is True
    assert data["report"]["outputFile"] == str(target)


def test_strict_failure_exit_code(tmp_path, capsys):
    path = tmp_path / "plain.html"
    path.write_text("<p>no heading</p>", encoding="utf-8")
    assert main(["convert", str(path), "-m", "strict"]) == 1
    captured = capsys.readouterr()
    assert "CONVERSION REPORT" in captured.err
    assert "Status:   FAILED" in captured.err


def test_mode_from_config_file(tmp_path):
    path = tmp_path / "plain.html"
    path.write_text("<p>no heading</p>", encoding="utf-8")
    config = tmp_path / "config.yaml"
    config.write_text("mode: strict\n", encoding="utf-8")
    assert main(["convert", str(path), "-c", str(config)]) == 1
    assert main(["convert", str(path), "-c", str(config), "-m", "relaxed"]) == 0


def test_missing_input(tmp_path, capsys):
    assert main(["convert", str(tmp_path / "nope.html")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_invalid_config_file(article, tmp_path, capsys):
    config = tmp_path / "broken.json"
    config.write_text("{broken", encoding="utf-8")
    assert main(["convert", str(article), "-c", str(config)]) == 1
    assert "Error:" in capsys.readouterr().err


def test_dry_run_writes_nothing(article, tmp_path, capsys):
    target = tmp_path / "never.html"
    assert main(["convert", str(article), "-o", str(target), "--dry-run"]) == 0
    assert not target.exists()
    assert "Dry run" in capsys.readouterr().out


def test_report_file_and_run_log(article, tmp_path, capsys):
    report_path = tmp_path / "report.json"
    run_log = tmp_path / "runs"
    assert main([
        "convert", str(article),
        "--report", "--report-file", str(report_path),
        "--run-log", str(run_log),
    ]) == 0
    assert "CONVERSION REPORT" in capsys.readouterr().out
    assert json.loads(report_path.read_text(encoding="utf-8"))["success"] is True
    entry = json.loads((run_log / "success.jsonl").read_text(encoding="utf-8").splitlines()[0])
    assert entry["code"] == "CONVERTED"


def test_keep_classes_and_no_inline_styles(tmp_path, capsys):
    path = tmp_path / "styled.html"
    path.write_text(
        '<html><head><style>.c1{color:red}</style></head><body><h2>S</h2><p><span class="c1">x</span></p></body></html>',
        encoding="utf-8",
    )
    assert main(["convert", str(path), "--keep-classes", "--no-inline-styles"]) == 0
    out = capsys.readouterr().out
    assert 'class="c1"' in out
    assert "color: red" not in out


def test_list_policies(capsys):
    assert main(["list-policies"]) == 0
    out = capsys.readouterr().out
    order = ["removeBeforeH1", "forbiddenTags", "removeInternalNotes", "requireH2", "minImageCount", "addDisclaimer"]
    positions = [out.index(f"  {name}\n") for name in order]
    assert positions == sorted(positions)
    assert "Priority: 3" in out


def test_init_writes_template_once(tmp_path, capsys):
    target = tmp_path / "docs2gutenberg.config.yaml"
    assert main(["init", "-o", str(target)]) == 0
    assert yaml.safe_load(target.read_text(encoding="utf-8"))["mode"] == "relaxed"
    assert main(["init", "-o", str(target)]) == 1
    assert "already exists" in capsys.readouterr().err
