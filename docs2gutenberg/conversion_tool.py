"""
High-level orchestration of the HTML → Gutenberg conversion.

:func:`convert` ties the loader, the style extractor / inliner, the
cleaner, the policy engine and the block converter into one pipeline:

1. load the input (HTML string, file path or URL)
2. strip Google Docs and Word artifacts
3. inline ``<style>`` rules onto elements (``inlineStyles``), drop ``<style>``
4. clean the markup and keep the ``<body>`` content
5. run the enabled policies
6. emit Gutenberg blocks

It never raises: load errors and pipeline exceptions are recorded in the
report (``success`` False, empty ``html``).  Configuration is supplied as
a :class:`~docs2gutenberg.config.ConverterConfig`, a dict of overrides, or
a config file path.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional, Union

from .cleaners.html_cleaner import clean_html, remove_google_docs_artifacts, remove_word_artifacts
from .config import ConverterConfig, build_config, load_config
from .extractors.html_loader import load_html
from .models.conversion import ConversionReport, ConversionResult
from .parsers.gutenberg_converter import ConverterOptions, convert_to_gutenberg
from .policies.engine import PolicyEngine
from .styles.style_inliner import InlinerOptions, inline_all_styles, remove_style_tags
from .utils.errors import ConfigError, HtmlLoadError
from .utils.output import write_to_file

logger = logging.getLogger(__name__)

STRING_INPUT = "(string input)"

ConfigLike = Union[ConverterConfig, Mapping[str, Any], None]


def resolve_config(config: ConfigLike = None, config_path: Optional[str] = None) -> ConverterConfig:
    """Config file (or defaults) with ``config`` layered on top."""
    base = load_config(config_path) if config_path else ConverterConfig()
    if config is None:
        return base
    if isinstance(config, ConverterConfig):
        return config
    overrides = dict(base.model_dump(by_alias=True))
    overrides.update(config)
    return build_config(overrides)


def _run_pipeline(html: str, config: ConverterConfig, report: ConversionReport) -> str:
    html = remove_google_docs_artifacts(html)
    html = remove_word_artifacts(html)

    if config.inline_styles:
        html = inline_all_styles(
            html,
            InlinerOptions(
                keep_classes=config.keep_classes,
                apply_id_styles=True,
                apply_element_styles=True,
            ),
        )
    html = remove_style_tags(html)
    html = clean_html(html)

    engine = PolicyEngine(
        config.policy_config(),
        mode=config.mode,
        stop_on_error=config.stop_on_error,
    )
    policy_result = engine.run(html)
    report.policies_triggered = list(policy_result.policies_triggered)
    report.warnings.extend(policy_result.warnings)
    report.errors.extend(policy_result.errors)
    report.actions.extend(policy_result.actions)
    if config.mode == "strict" and not policy_result.all_passed:
        report.success = False

    return convert_to_gutenberg(
        policy_result.html,
        ConverterOptions(preserve_styles=config.inline_styles),
    )


def convert(
    source: str,
    *,
    config: ConfigLike = None,
    config_path: Optional[str] = None,
    input_path: Optional[str] = None,
) -> ConversionResult:
    """
    Convert ``source`` (HTML markup, a file path or a URL) to Gutenberg blocks.

    Args:
        source: The input; see :func:`~docs2gutenberg.extractors.html_loader.load_html`.
        config: A :class:`ConverterConfig` or a mapping of camelCase overrides.
        config_path: JSON or YAML config file read before ``config`` is applied.
        input_path: Name recorded as ``inputFile`` for string input.

    Returns:
        A :class:`ConversionResult`; check ``result.report.success``.
    """
    started = time.perf_counter()
    report = ConversionReport(input_file=input_path or STRING_INPUT)

    def finish(html: str) -> ConversionResult:
        report.execution_time_ms = round((time.perf_counter() - started) * 1000, 3)
        return ConversionResult(html=html, report=report)

    try:
        resolved = resolve_config(config, config_path)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        report.success = False
        report.errors.append(str(e))
        return finish("")

    try:
        loaded = load_html(source)
    except HtmlLoadError as e:
        logger.error("Could not load input: %s", e)
        report.success = False
        report.errors.append(str(e))
        return finish("")
    if loaded.source_path:
        report.input_file = loaded.source_path

    try:
        html = _run_pipeline(loaded.html, resolved, report)
    except Exception as e:
        logger.exception("Conversion pipeline failed for %s", report.input_file)
        report.success = False
        report.errors.append(str(e) or type(e).__name__)
        return finish("")

    logger.debug(
        "Converted %s: success=%s, %d warning(s), %d error(s)",
        report.input_file,
        report.success,
        len(report.warnings),
        len(report.errors),
    )
    return finish(html)


convert_sync = convert


class GutenbergConversionTool:
    """
    Reusable converter bound to one configuration.

    Used by the command line and the batch script to convert many inputs
    with the same settings and to write the results to disk.
    """

    def __init__(self, config: ConfigLike = None, *, config_path: Optional[str] = None) -> None:
        self.config = resolve_config(config, config_path)

    def convert(self, source: str, *, input_path: Optional[str] = None) -> ConversionResult:
        return convert(source, config=self.config, input_path=input_path)

    def convert_file(
        self,
        input_path: str,
        output_path: str,
        *,
        include_report: bool = False,
    ) -> ConversionResult:
        """Convert ``input_path`` and write the result in the configured output format."""
        result = self.convert(input_path)
        result.report.output_file = output_path
        if not result.success and not result.html:
            return result
        try:
            write_to_file(result, output_path, self.config.output_format, include_report=include_report)
        except OSError as e:
            logger.error("Could not write %s: %s", output_path, e)
            result.report.success = False
            result.report.errors.append(f"Could not write {output_path}: {e}")
        return result


__all__ = ["GutenbergConversionTool", "convert", "convert_sync", "resolve_config"]
