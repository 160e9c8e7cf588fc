"""
HTML to Gutenberg block markup.

The converter walks the children of ``<body>`` (or of the fragment root)
depth-first and turns every node into at most one block string using a
tag -> handler table.  ``<div>`` containers recurse; anything the table
does not know becomes an opaque ``wp:html`` block unless
``convert_unknown_to_html`` is switched off.  Blocks are joined with a
blank line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from bs4 import NavigableString, Tag
from bs4.dammit import EntitySubstitution

from ..utils.dom import attr_text, class_list, parse_html
from .gutenberg_blocks import (
    code_block,
    escape_html,
    heading_block,
    html_block,
    image_block,
    list_block,
    paragraph_block,
    quote_block,
    separator_block,
    table_block,
)

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"

_TEXT_ALIGN_RE = re.compile(r"text-align:\s*(left|center|right|justify)", re.IGNORECASE)
_LANGUAGE_RE = re.compile(r"language-(\w+)")
_LEADING_INT_RE = re.compile(r"\s*(\d+)")


@dataclass
class ConverterOptions:
    preserve_styles: bool = True
    convert_unknown_to_html: bool = True
    wrap_loose_text: bool = True
    # divs carrying this class are passed through untouched
    disclaimer_class: str = "disclaimer-block"


Handler = Callable[[Tag, ConverterOptions], Optional[str]]


def convert_to_gutenberg(html: str, options: Optional[Union[ConverterOptions, dict]] = None) -> str:
    """
    Convert an HTML document or fragment to Gutenberg block markup.

    Args:
        html: Cleaned HTML.  A ``<body>`` is used as the root when present.
        options: :class:`ConverterOptions` or a dict of its fields.

    Returns:
        The blocks joined by a blank line; an empty string when nothing
        produced a block.
    """
    opts = _coerce_options(options)
    soup = parse_html(html)
    root = soup.body or soup.find("html") or soup
    blocks = _convert_children(root, opts)
    logger.debug("Converted %d top-level block(s)", len(blocks))
    return BLOCK_SEPARATOR.join(blocks)


def _convert_children(container: Tag, opts: ConverterOptions) -> List[str]:
    blocks = []
    for child in list(container.children):
        block = convert_node(child, opts)
        if block:
            blocks.append(block)
    return blocks


def convert_node(node: Union[Tag, NavigableString], opts: ConverterOptions) -> Optional[str]:
    """Emit the block for one node, or ``None`` when it produces nothing."""
    if isinstance(node, NavigableString):
        # comments, doctypes and processing instructions are subclasses
        if type(node) is not NavigableString:
            return None
        text = str(node).strip()
        if text and opts.wrap_loose_text:
            return paragraph_block(EntitySubstitution.substitute_xml(text))
        return None

    if not isinstance(node, Tag):
        return None

    handler = _HANDLERS.get((node.name or "").lower(), _convert_unknown)
    return handler(node, opts)


# --- helpers ---

def get_inner_html(element: Tag, opts: ConverterOptions) -> str:
    if not opts.preserve_styles:
        for styled in element.find_all(style=True):
            del styled["style"]
    return element.decode_contents()


def extract_alignment(element: Tag) -> Optional[str]:
    match = _TEXT_ALIGN_RE.search(attr_text(element, "style"))
    if match:
        return match.group(1).lower()
    class_name = " ".join(class_list(element))
    for align in ("center", "right", "left"):
        if f"text-{align}" in class_name or f"align-{align}" in class_name:
            return align
    return None


def _parse_dimension(value: str) -> Optional[int]:
    match = _LEADING_INT_RE.match(value or "")
    if not match:
        return None
    number = int(match.group(1))
    return number or None


def _image_from_img(img: Tag, caption: Optional[str] = None) -> str:
    return image_block(
        escape_html(attr_text(img, "src")),
        escape_html(attr_text(img, "alt")),
        caption=caption,
        width=_parse_dimension(attr_text(img, "width")),
        height=_parse_dimension(attr_text(img, "height")),
    )


def _cells(row: Tag) -> List[str]:
    return [cell.decode_contents() for cell in row.find_all(["th", "td"], recursive=False)]


# --- handlers ---

def _convert_heading(element: Tag, opts: ConverterOptions) -> Optional[str]:
    # Google Docs exports put inline image boxes inside headings
    img = element.find("img")
    if img is not None:
        return _image_from_img(img)
    level = int(element.name[1])
    return heading_block(get_inner_html(element, opts), level, extract_alignment(element))


def _convert_paragraph(element: Tag, opts: ConverterOptions) -> Optional[str]:
    content = get_inner_html(element, opts)
    if not content.strip():
        return None
    return paragraph_block(content, extract_alignment(element))


def _convert_list(element: Tag, opts: ConverterOptions) -> Optional[str]:
    items = [get_inner_html(li, opts) for li in element.find_all("li", recursive=False)]
    if not items:
        return None
    return list_block(items, ordered=element.name == "ol")


def _convert_img(element: Tag, opts: ConverterOptions) -> Optional[str]:
    return _image_from_img(element)


def _convert_figure(element: Tag, opts: ConverterOptions) -> Optional[str]:
    img = element.find("img")
    if img is not None:
        figcaption = element.find("figcaption")
        caption = figcaption.decode_contents() if figcaption is not None else None
        return _image_from_img(img, caption=caption)
    if opts.convert_unknown_to_html:
        return html_block(str(element))
    return None


def _convert_blockquote(element: Tag, opts: ConverterOptions) -> Optional[str]:
    citation = None
    cite = element.find("cite")
    if cite is not None:
        citation = EntitySubstitution.substitute_xml(cite.get_text().strip())
        cite.decompose()
    return quote_block(get_inner_html(element, opts).strip(), citation)


def _convert_pre(element: Tag, opts: ConverterOptions) -> Optional[str]:
    code = element.find("code")
    text = code.get_text() if code is not None else element.get_text()
    language = None
    if code is not None:
        match = _LANGUAGE_RE.search(" ".join(class_list(code)))
        if match:
            language = match.group(1)
    return code_block(text, language)


def _convert_code(element: Tag, opts: ConverterOptions) -> Optional[str]:
    return paragraph_block(f"<code>{element.decode_contents()}</code>")


def _convert_hr(element: Tag, opts: ConverterOptions) -> Optional[str]:
    return separator_block()


def _own_rows(table: Tag, scope: Tag) -> List[Tag]:
    # rows of nested tables belong to their own table
    return [tr for tr in scope.find_all("tr") if tr.find_parent("table") is table]


def _convert_table(element: Tag, opts: ConverterOptions) -> Optional[str]:
    all_rows = _own_rows(element, element)
    thead = element.find("thead", recursive=False)
    if thead is not None:
        header_rows = _own_rows(element, thead)
    else:
        header_rows = all_rows[:1]
    headers: List[str] = []
    for row in header_rows:
        headers.extend(_cells(row))

    tbody = element.find("tbody", recursive=False)
    candidates = _own_rows(element, tbody) if tbody is not None else all_rows
    rows = []
    for row in candidates:
        if any(row is header for header in header_rows):
            continue
        cells = _cells(row)
        if cells:
            rows.append(cells)
    return table_block(headers, rows)


def _convert_div(element: Tag, opts: ConverterOptions) -> Optional[str]:
    if opts.disclaimer_class and opts.disclaimer_class in class_list(element):
        return html_block(str(element))
    blocks = _convert_children(element, opts)
    if not blocks:
        return None
    return BLOCK_SEPARATOR.join(blocks)


def _convert_span(element: Tag, opts: ConverterOptions) -> Optional[str]:
    content = get_inner_html(element, opts)
    if not content.strip():
        return None
    return paragraph_block(content)


def _convert_br(element: Tag, opts: ConverterOptions) -> Optional[str]:
    return None


def _convert_anchor(element: Tag, opts: ConverterOptions) -> Optional[str]:
    href = escape_html(attr_text(element, "href", "#"))
    return paragraph_block(f'<a href="{href}">{element.decode_contents()}</a>')


def _convert_strong(element: Tag, opts: ConverterOptions) -> Optional[str]:
    return paragraph_block(f"<strong>{element.decode_contents()}</strong>")


def _convert_emphasis(element: Tag, opts: ConverterOptions) -> Optional[str]:
    return paragraph_block(f"<em>{element.decode_contents()}</em>")


def _convert_unknown(element: Tag, opts: ConverterOptions) -> Optional[str]:
    if not opts.convert_unknown_to_html:
        return None
    outer = str(element)
    return html_block(outer) if outer.strip() else None


_HANDLERS: Dict[str, Handler] = {
    "h1": _convert_heading,
    "h2": _convert_heading,
    "h3": _convert_heading,
    "h4": _convert_heading,
    "h5": _convert_heading,
    "h6": _convert_heading,
    "p": _convert_paragraph,
    "ul": _convert_list,
    "ol": _convert_list,
    "img": _convert_img,
    "figure": _convert_figure,
    "blockquote": _convert_blockquote,
    "pre": _convert_pre,
    "code": _convert_code,
    "hr": _convert_hr,
    "table": _convert_table,
    "div": _convert_div,
    "span": _convert_span,
    "br": _convert_br,
    "a": _convert_anchor,
    "strong": _convert_strong,
    "b": _convert_strong,
    "em": _convert_emphasis,
    "i": _convert_emphasis,
}


def _coerce_options(options: Optional[Union[ConverterOptions, dict]]) -> ConverterOptions:
    if options is None:
        return ConverterOptions()
    if isinstance(options, ConverterOptions):
        return options
    return ConverterOptions(**options)


html_to_gutenberg = convert_to_gutenberg
