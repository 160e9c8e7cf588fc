"""
Output writers for conversion results and reports.

``format_result`` renders a :class:`~docs2gutenberg.models.ConversionResult`
either as the bare block markup or as JSON; ``format_report`` renders the
human readable summary printed by the CLI.
"""

from __future__ import annotations

import json
import os
from typing import Any, List

from ..models.conversion import ConversionReport, ConversionResult

RULE = "=" * 60
OUTPUT_FORMATS = ("html", "json")


def format_result(
    result: ConversionResult,
    fmt: str = "html",
    *,
    include_report: bool = False,
    pretty: bool = True,
) -> str:
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format {fmt!r}, expected one of {OUTPUT_FORMATS}")
    if fmt == "html":
        return result.html
    payload: Any = result.to_dict(include_report=include_report)
    if pretty:
        return json.dumps(payload, ensure_ascii=False, indent=2)
    return json.dumps(payload, ensure_ascii=False)


def _ensure_parent(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def write_to_file(
    result: ConversionResult,
    output_path: str,
    fmt: str = "html",
    *,
    include_report: bool = False,
    pretty: bool = True,
) -> str:
    """Write the formatted result to ``output_path``, creating parent directories."""
    _ensure_parent(output_path)
    content = format_result(result, fmt, include_report=include_report, pretty=pretty)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(content)
    return output_path


def _section(lines: List[str], title: str, items: List[str]) -> None:
    if not items:
        return
    lines.append(title)
    lines.extend(f"   - {item}" for item in items)
    lines.append("")


def format_report(report: ConversionReport) -> str:
    lines = [
        RULE,
        "CONVERSION REPORT".center(len(RULE)).rstrip(),
        RULE,
        "",
        f"Input:    {report.input_file or '(string)'}",
        f"Output:   {report.output_file or '(stdout)'}",
        f"Time:     {report.timestamp}",
        f"Duration: {report.execution_time_ms:.0f}ms",
        f"Status:   {'SUCCESS' if report.success else 'FAILED'}",
        "",
    ]
    _section(lines, "Policies triggered:", report.policies_triggered)
    _section(lines, "Actions taken:", report.actions)
    _section(lines, "Warnings:", report.warnings)
    _section(lines, "Errors:", report.errors)
    lines.append(RULE)
    return "\n".join(lines)


def write_report_to_file(report: ConversionReport, output_path: str) -> str:
    _ensure_parent(output_path)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
    return output_path


__all__ = ["format_report", "format_result", "write_report_to_file", "write_to_file"]
