from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}


def escape_html(text: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in text or "")


def wrap_block(block_type: str, content: str, attrs: Optional[Dict[str, Any]] = None) -> str:
    """
    Render one block in the comment-delimited block grammar::

        <!-- wp:TYPE {"compact":"json"} -->
        CONTENT
        <!-- /wp:TYPE -->

    The JSON segment (and the space before it) is left out when ``attrs``
    is empty.
    """
    attr_string = ""
    if attrs:
        attr_string = " " + json.dumps(attrs, separators=(",", ":"), ensure_ascii=False)
    return f"<!-- wp:{block_type}{attr_string} -->\n{content}\n<!-- /wp:{block_type} -->"


# --- Builders for core blocks ---

def paragraph_block(content: str, align: Optional[str] = None) -> str:
    if align:
        return wrap_block("paragraph", f'<p class="has-text-align-{align}">{content}</p>', {"align": align})
    return wrap_block("paragraph", f"<p>{content}</p>")


def heading_block(content: str, level: int = 2, align: Optional[str] = None) -> str:
    level = max(1, min(6, int(level or 2)))
    attrs: Dict[str, Any] = {"level": level}
    css_class = ""
    if align:
        attrs["textAlign"] = align
        css_class = f' class="has-text-align-{align}"'
    return wrap_block("heading", f"<h{level}{css_class}>{content}</h{level}>", attrs)


def list_block(items: Sequence[str], ordered: bool = False) -> str:
    tag = "ol" if ordered else "ul"
    list_items = "\n".join(f"<li>{item}</li>" for item in items)
    return wrap_block("list", f"<{tag}>\n{list_items}\n</{tag}>", {"ordered": True} if ordered else None)


def image_block(
    src: str,
    alt: str = "",
    *,
    caption: Optional[str] = None,
    align: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> str:
    """
    Build an image block.

    Args:
        src: Image URL, already escaped for use inside an attribute.
        alt: Alternative text, already escaped.
        caption: Inner HTML of the ``<figcaption>``, if any.
        align: ``left``, ``center``, ``right``, ``wide`` or ``full``.
        width: Pixel width, stored in the block attributes and on the ``<img>``.
        height: Pixel height, same as ``width``.
    """
    attrs: Dict[str, Any] = {}
    if align:
        attrs["align"] = align
    if width:
        attrs["width"] = width
    if height:
        attrs["height"] = height

    img_attrs = [f'src="{src}"', f'alt="{alt}"']
    if width:
        img_attrs.append(f'width="{width}"')
    if height:
        img_attrs.append(f'height="{height}"')

    figure_class = f' class="align{align}"' if align else ""
    content = f"<figure{figure_class}><img {' '.join(img_attrs)}/>"
    if caption:
        content += f'<figcaption class="wp-element-caption">{caption}</figcaption>'
    content += "</figure>"
    return wrap_block("image", content, attrs)


def quote_block(content: str, citation: Optional[str] = None) -> str:
    # block content (paragraphs, lists) is kept as is
    body = content if content.lstrip().startswith("<p") else f"<p>{content}</p>"
    markup = f'<blockquote class="wp-block-quote">{body}'
    if citation:
        markup += f"<cite>{citation}</cite>"
    markup += "</blockquote>"
    return wrap_block("quote", markup)


def code_block(code: str, language: Optional[str] = None) -> str:
    return wrap_block(
        "code",
        f'<pre class="wp-block-code"><code>{escape_html(code)}</code></pre>',
        {"language": language} if language else None,
    )


def separator_block() -> str:
    return wrap_block("separator", '<hr class="wp-block-separator has-alpha-channel-opacity"/>')


def html_block(raw_html: str) -> str:
    return wrap_block("html", raw_html)


def group_block(inner_blocks: Sequence[str]) -> str:
    inner = "\n".join(inner_blocks)
    return wrap_block(
        "group",
        f'<div class="wp-block-group">{inner}</div>',
        {"layout": {"type": "constrained"}},
    )


def table_block(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    thead = ""
    if headers:
        thead = "<thead><tr>" + "".join(f"<th>{h}</th>" for h in headers) + "</tr></thead>"
    body_rows: List[str] = [
        "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows
    ]
    tbody = "<tbody>" + "\n".join(body_rows) + "</tbody>"
    return wrap_block("table", f'<figure class="wp-block-table"><table>{thead}{tbody}</table></figure>')


__all__ = [
    "code_block",
    "escape_html",
    "group_block",
    "heading_block",
    "html_block",
    "image_block",
    "list_block",
    "paragraph_block",
    "quote_block",
    "separator_block",
    "table_block",
    "wrap_block",
]
