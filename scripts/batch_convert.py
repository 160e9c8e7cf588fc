#!/usr/bin/env python3
"""
Convert every exported HTML file of a directory to Gutenberg block markup.

For each ``*.html`` / ``*.htm`` in ``--input-dir`` a ``<stem>.gutenberg.html``
is written to ``--output-dir``.  Every run is appended to the JSON Lines
logs under ``reports/conversion`` and summarised in a CSV (one row per
file); with ``--database`` the summary is also appended to a DuckDB table.

Usage:
  python scripts/batch_convert.py \\
    --input-dir docs/exports \\
    --output-dir output \\
    --config config/converter_config.json \\
    --summary reports/batch_summary.csv
"""

from __future__ import annotations

import argparse
import glob
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import duckdb
import pandas as pd

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from docs2gutenberg.conversion_tool import GutenbergConversionTool  # noqa: E402
from docs2gutenberg.utils.errors import DEFAULT_REPORT_DIR, ConfigError, report_error, report_ok  # noqa: E402
from docs2gutenberg.utils.logging_config import setup_logging  # noqa: E402

logger = logging.getLogger("batch_convert")

SUMMARY_COLUMNS = ["file", "output", "success", "warnings", "errors", "policies", "execution_time_ms"]
TABLE_NAME = "conversions"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Batch convert HTML exports to Gutenberg blocks.")
    parser.add_argument("--input-dir", default="docs", help="Directory holding the exported HTML files")
    parser.add_argument("--output-dir", default="output", help="Directory for the converted files")
    parser.add_argument("--config", default=None, help="Converter config file (YAML or JSON)")
    parser.add_argument("--summary", default="reports/batch_summary.csv", help="CSV summary path")
    parser.add_argument("--report-dir", default=DEFAULT_REPORT_DIR, help="Directory for the JSON Lines run logs")
    parser.add_argument("--database", default=None, help="Optional DuckDB file receiving the summary rows")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def find_inputs(input_dir: str) -> List[str]:
    files: List[str] = []
    for pattern in ("*.html", "*.htm"):
        files.extend(glob.glob(os.path.join(input_dir, pattern)))
    return sorted(files)


def output_path_for(input_path: str, output_dir: str) -> str:
    stem = os.path.splitext(os.path.basename(input_path))[0]
    return os.path.join(output_dir, f"{stem}.gutenberg.html")


def convert_directory(
    tool: GutenbergConversionTool,
    input_dir: str,
    output_dir: str,
    *,
    report_dir: str = DEFAULT_REPORT_DIR,
) -> pd.DataFrame:
    """Convert every HTML file of ``input_dir`` and return one summary row per file."""
    rows: List[Dict[str, Any]] = []
    for input_path in find_inputs(input_dir):
        output_path = output_path_for(input_path, output_dir)
        result = tool.convert_file(input_path, output_path)
        report = result.report

        if report.success:
            code = "CONVERTED_WITH_WARNINGS" if report.warnings else "CONVERTED"
            report_ok(code, report, {"executionTimeMs": report.execution_time_ms}, report_dir=report_dir)
        else:
            code = "POLICY_FAILED" if result.html else "PIPELINE_FAILED"
            report_error(code, report, report_dir=report_dir)

        rows.append(
            {
                "file": os.path.basename(input_path),
                "output": output_path if result.html else "",
                "success": report.success,
                "warnings": len(report.warnings),
                "errors": len(report.errors),
                "policies": ";".join(report.policies_triggered),
                "execution_time_ms": report.execution_time_ms,
            }
        )
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_summary(df: pd.DataFrame, summary_path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(summary_path)), exist_ok=True)
    df.to_csv(summary_path, index=False, encoding="utf-8")


def store_summary(df: pd.DataFrame, db_path: str) -> None:
    """Append the summary rows to the ``conversions`` table, creating it on first use."""
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    con = duckdb.connect(database=db_path, read_only=False)
    try:
        con.register("summary_df", df)
        existing_tables = con.execute("SHOW TABLES;").fetchall()
        if (TABLE_NAME,) in existing_tables:
            con.execute(f"INSERT INTO {TABLE_NAME} SELECT *, current_timestamp FROM summary_df")
        else:
            con.execute(f"CREATE TABLE {TABLE_NAME} AS SELECT *, current_timestamp AS converted_at FROM summary_df")
        con.unregister("summary_df")
    finally:
        con.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    if not os.path.isdir(args.input_dir):
        logger.error("Input directory not found: %s", args.input_dir)
        return 1

    try:
        tool = GutenbergConversionTool(config_path=args.config)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    df = convert_directory(tool, args.input_dir, args.output_dir, report_dir=args.report_dir)
    if df.empty:
        logger.warning("No HTML files found in %s", args.input_dir)
        return 0

    write_summary(df, args.summary)
    logger.info("Summary written to %s", args.summary)
    if args.database:
        store_summary(df, args.database)
        logger.info("Summary appended to %s (table %s)", args.database, TABLE_NAME)

    failed = int((~df["success"]).sum())
    logger.info("Converted %d file(s), %d failed", len(df), failed)
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
