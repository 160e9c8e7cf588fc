"""
Input extractors.

This subpackage loads the HTML to convert (string, file or URL) and
extracts the authorial CSS of a document into lookup maps used by the
style inliner.
"""

from .html_loader import LoadResult, load_from_file, load_from_string, load_from_url, load_html
from .style_extractor import ExtractedStyles, extract_all_styles, parse_css

__all__ = [
    "ExtractedStyles",
    "LoadResult",
    "extract_all_styles",
    "load_from_file",
    "load_from_string",
    "load_from_url",
    "load_html",
    "parse_css",
]
