"""
Gutenberg block output.

Currently this subpackage exposes ``convert_to_gutenberg`` from
:mod:`docs2gutenberg.parsers.gutenberg_converter`; the per-block builders
live in :mod:`docs2gutenberg.parsers.gutenberg_blocks`.
"""

from .gutenberg_converter import ConverterOptions, convert_to_gutenberg

__all__ = ["ConverterOptions", "convert_to_gutenberg"]
