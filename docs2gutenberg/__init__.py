"""
Top-level package for the Google Docs / Word HTML → WordPress Gutenberg converter.

This package bundles everything required to turn an exported HTML
document into Gutenberg block markup: loading the input, inlining its
stylesheet, cleaning editor artifacts, applying content policies and
emitting blocks.  Modules are split into subpackages:

* :mod:`docs2gutenberg.extractors` – input loading and CSS extraction
* :mod:`docs2gutenberg.styles` – style inlining
* :mod:`docs2gutenberg.cleaners` – markup cleanup
* :mod:`docs2gutenberg.policies` – the policy engine and shipped policies
* :mod:`docs2gutenberg.parsers` – block helpers and the block converter
* :mod:`docs2gutenberg.utils` – DOM/CSS helpers, errors, logging and output

Orchestration lives in :mod:`docs2gutenberg.conversion_tool`; each
layer only exchanges HTML strings with the next one.
"""

from .conversion_tool import GutenbergConversionTool, convert, convert_sync

__version__ = "1.0.0"

__all__ = ["GutenbergConversionTool", "convert", "convert_sync", "__version__"]
