"""
Command line interface.

Usage::

  docs2gutenberg convert article.html -o article.gutenberg.html --report
  docs2gutenberg convert export.html -c config.yaml -m strict -f json -o out.json
  docs2gutenberg list-policies
  docs2gutenberg init -o docs2gutenberg.config.yaml

``convert`` exits with status 0 when the conversion succeeded and 1
otherwise (load errors, invalid configuration, policy failures in strict
mode).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config import DEFAULT_CONFIG_TEMPLATE, load_config
from .conversion_tool import convert
from .policies.registry import REGISTRY, load_policies
from .utils.errors import ConfigError, report_error, report_ok
from .utils.logging_config import setup_logging
from .utils.output import format_report, format_result, write_report_to_file, write_to_file

logger = logging.getLogger(__name__)

DEFAULT_INIT_PATH = "docs2gutenberg.config.yaml"
PREVIEW_LENGTH = 500


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs2gutenberg",
        description="Convert HTML exported from Google Docs / Word to WordPress Gutenberg blocks.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    conv = subparsers.add_parser("convert", help="Convert one HTML file (or URL)")
    conv.add_argument("input", help="Input HTML file path or URL")
    conv.add_argument("-o", "--output", help="Output file path (default: stdout)")
    conv.add_argument("-c", "--config", help="Config file (YAML or JSON)")
    conv.add_argument("-m", "--mode", choices=["strict", "relaxed"], help="Conversion mode (overrides the config file)")
    conv.add_argument("-f", "--format", choices=["html", "json"], help="Output format (overrides the config file)")
    conv.add_argument("--keep-classes", action="store_true", help="Keep CSS classes in the output")
    conv.add_argument("--no-inline-styles", action="store_true", help="Do not inline <style> rules")
    conv.add_argument("--report", action="store_true", help="Print the conversion report")
    conv.add_argument("--report-file", help="Save the report as JSON")
    conv.add_argument("--run-log", metavar="DIR", help="Append a JSON Lines entry for this run to DIR")
    conv.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    conv.add_argument("--dry-run", action="store_true", help="Convert without writing output")
    conv.set_defaults(func=cmd_convert)

    lst = subparsers.add_parser("list-policies", help="List the registered policies")
    lst.set_defaults(func=cmd_list_policies)

    init = subparsers.add_parser("init", help="Create a default configuration file")
    init.add_argument("-o", "--output", default=DEFAULT_INIT_PATH, help="Config file to create")
    init.set_defaults(func=cmd_init)

    return parser


def cmd_convert(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    updates = {}
    if args.mode:
        updates["mode"] = args.mode
    if args.format:
        updates["output_format"] = args.format
    if args.keep_classes:
        updates["keep_classes"] = True
    if args.no_inline_styles:
        updates["inline_styles"] = False
    if updates:
        config = config.model_copy(update=updates)

    source = args.input
    is_url = source.lower().startswith(("http://", "https://"))
    input_path = source if is_url else os.path.abspath(source)
    logger.info("Converting %s (mode=%s, format=%s)", input_path, config.mode, config.output_format)

    result = convert(input_path, config=config, input_path=input_path)
    report = result.report
    fmt = config.output_format

    if args.dry_run:
        print("Dry run - no output written")
        if args.verbose:
            print(result.html[:PREVIEW_LENGTH])
    elif args.output:
        output_path = os.path.abspath(args.output)
        report.output_file = output_path
        if result.html or report.success:
            try:
                write_to_file(result, output_path, fmt, include_report=fmt == "json")
                print(f"Output saved to: {output_path}")
            except OSError as e:
                report.success = False
                report.errors.append(f"Could not write {output_path}: {e}")
    else:
        print(format_result(result, fmt, include_report=fmt == "json"))

    if args.report or args.verbose or not report.success:
        print(format_report(report), file=sys.stderr if not report.success else sys.stdout)

    if args.report_file:
        write_report_to_file(report, os.path.abspath(args.report_file))

    if args.run_log:
        if report.success:
            code = "CONVERTED_WITH_WARNINGS" if report.warnings else "CONVERTED"
            report_ok(code, report, {"executionTimeMs": report.execution_time_ms}, report_dir=args.run_log)
        else:
            code = "POLICY_FAILED" if result.html else "PIPELINE_FAILED"
            report_error(code, report, report_dir=args.run_log)

    return 0 if report.success else 1


def cmd_list_policies(args: argparse.Namespace) -> int:
    load_policies()
    print("Available policies:\n")
    for policy in REGISTRY.by_priority():
        print(f"  {policy.name}")
        print(f"    {policy.description}")
        print(f"    Priority: {policy.priority}\n")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    output_path = os.path.abspath(args.output)
    if os.path.exists(output_path):
        print(f"Config file already exists: {output_path}", file=sys.stderr)
        print("Use a different path with --output", file=sys.stderr)
        return 1
    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(DEFAULT_CONFIG_TEMPLATE)
    print(f"Config file created: {output_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if getattr(args, "verbose", False) else "WARNING")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
