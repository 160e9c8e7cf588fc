"""
Exceptions and structured run logging for conversions.

The pipeline itself never writes files; callers that want a persistent
trace of their runs (the CLI, ``scripts/batch_convert.py``) use the two
helpers below, which append one JSON object per line to files under
``reports/conversion``.

``report_error``
    Record a failed conversion.  An optional exception can be supplied
    and will be serialized to the log.

``report_ok``
    Record a successful conversion.  Additional key/value information can
    be attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps event codes to human readable messages.
Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ConverterError(Exception):
    """Base class for errors raised by docs2gutenberg."""


class HtmlLoadError(ConverterError):
    """The input HTML could not be read (missing file, bad encoding, network error)."""


class ConfigError(ConverterError):
    """The configuration file is unreadable or does not validate."""


class PolicyError(ConverterError):
    """A policy could not be registered or configured."""


# Event codes shared by report_error and report_ok.
ERRORS: Dict[str, str] = {
    "LOAD_FAILED": "Failed to load input HTML",
    "POLICY_FAILED": "One or more policies failed",
    "PIPELINE_FAILED": "Conversion pipeline raised an error",
    "WRITE_FAILED": "Failed to write converted output",
    "CONVERTED": "Document converted successfully",
    "CONVERTED_WITH_WARNINGS": "Document converted with warnings",
}

DEFAULT_REPORT_DIR = os.path.join("reports", "conversion")


def _write_jsonl(report_dir: str, filename: str, data: Dict[str, Any]) -> str:
    """Append ``data`` as a JSON object followed by a newline to ``report_dir/filename``."""
    os.makedirs(report_dir, exist_ok=True)
    path = os.path.join(report_dir, filename)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")
    return path


def _report_fields(report: Any) -> Dict[str, Any]:
    if hasattr(report, "model_dump"):
        data = report.model_dump(by_alias=True)
    else:
        data = dict(report or {})
    return {
        "inputFile": data.get("inputFile"),
        "outputFile": data.get("outputFile"),
        "timestamp": data.get("timestamp"),
        "policiesTriggered": data.get("policiesTriggered", []),
        "errors": data.get("errors", []),
        "warnings": data.get("warnings", []),
    }


def report_error(
    code: str,
    report: Any,
    exc: Optional[BaseException] = None,
    *,
    report_dir: str = DEFAULT_REPORT_DIR,
) -> str:
    """Log a failed conversion.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    report:
        The :class:`~docs2gutenberg.models.ConversionReport` (or a dict with
        the same camelCase keys) of the failed run.
    exc:
        Optional exception instance that triggered the error.
    report_dir:
        Directory holding the JSON Lines files.

    Returns
    -------
    str
        Path of the file the entry was appended to.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {"code": code, "message": message, **_report_fields(report)}
    if exc is not None:
        entry["error"] = str(exc)
    logger.error("%s - %s", message, entry.get("inputFile") or "")
    return _write_jsonl(report_dir, "errors.jsonl", entry)


def report_ok(
    code: str,
    report: Any,
    extra: Optional[Dict[str, Any]] = None,
    *,
    report_dir: str = DEFAULT_REPORT_DIR,
) -> str:
    """Log a successful conversion; ``extra`` is merged into the entry."""
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {"code": code, "message": message, **_report_fields(report)}
    if extra:
        entry.update(extra)
    logger.info("%s - %s", message, entry.get("inputFile") or "")
    return _write_jsonl(report_dir, "success.jsonl", entry)
