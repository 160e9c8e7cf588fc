"""
Loading of the HTML to convert.

Input can be an HTML string, a path to an exported ``.html`` file, or a
URL (for example a Google Docs "publish to web" or export link).  Every
failure is raised as :class:`~docs2gutenberg.utils.errors.HtmlLoadError`
so the pipeline can report it as a load error.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import requests

from ..utils.errors import HtmlLoadError

__all__ = ["LoadResult", "load_from_string", "load_from_file", "load_from_url", "load_html", "looks_like_html"]

DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class LoadResult:
    html: str
    source_path: Optional[str] = None


def looks_like_html(value: str) -> bool:
    trimmed = (value or "").strip()
    return trimmed.startswith("<") or "<!doctype" in trimmed.lower()


def _is_url(value: str) -> bool:
    lowered = (value or "").strip().lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def load_from_string(html: str) -> LoadResult:
    return LoadResult(html=html or "")


def load_from_file(file_path: str) -> LoadResult:
    """Read an HTML file as UTF-8 (a leading BOM is dropped)."""
    absolute_path = os.path.abspath(file_path)
    if not os.path.exists(absolute_path):
        raise HtmlLoadError(f"File not found: {absolute_path}")
    if not os.path.isfile(absolute_path):
        raise HtmlLoadError(f"Not a file: {absolute_path}")
    try:
        with open(absolute_path, "r", encoding="utf-8-sig") as f:
            html = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise HtmlLoadError(f"Could not read {absolute_path}: {e}") from e
    return LoadResult(html=html, source_path=absolute_path)


def load_from_url(url: str, *, timeout: float = DEFAULT_TIMEOUT) -> LoadResult:
    """Download an HTML document.

    :raises HtmlLoadError: on network errors and non-2xx responses.
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise HtmlLoadError(f"Could not download {url}: {e}") from e
    # Google Docs exports omit the charset; requests would fall back to latin-1
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = "utf-8"
    return LoadResult(html=response.text, source_path=url)


def load_html(source: str, *, timeout: float = DEFAULT_TIMEOUT) -> LoadResult:
    """Dispatch on the shape of ``source``: HTML markup, URL, or file path."""
    if looks_like_html(source):
        return load_from_string(source)
    if _is_url(source):
        return load_from_url(source.strip(), timeout=timeout)
    return load_from_file(source)
