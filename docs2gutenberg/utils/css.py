from __future__ import annotations

import re
from typing import Dict, Iterable, List

StyleMap = Dict[str, str]

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)


def strip_css_comments(css: str) -> str:
    return _COMMENT_RE.sub("", css or "")


def split_css_declarations(block: str) -> List[str]:
    """
    Split a declaration block on ``;``.

    Semicolons inside parentheses (``url(...)``, ``calc(...)``) or inside
    quoted strings do not split.
    """
    declarations: List[str] = []
    current: List[str] = []
    depth = 0
    quote = ""
    prev = ""
    for ch in block or "":
        if ch in ("'", '"') and prev != "\\":
            if not quote:
                quote = ch
            elif ch == quote:
                quote = ""
        if not quote:
            if ch == "(":
                depth += 1
            elif ch == ")" and depth > 0:
                depth -= 1
        if ch == ";" and depth == 0 and not quote:
            text = "".join(current).strip()
            if text:
                declarations.append(text)
            current = []
        else:
            current.append(ch)
        prev = ch
    text = "".join(current).strip()
    if text:
        declarations.append(text)
    return declarations


def parse_properties(block: str) -> StyleMap:
    """
    Parse ``"color: red; font-size: 12px"`` into ``{"color": "red", ...}``.

    Property names are lower-cased and trimmed; values are kept verbatim
    (``!important`` included).  Later declarations win.
    """
    result: StyleMap = {}
    for declaration in split_css_declarations(block):
        prop, sep, value = declaration.partition(":")
        if not sep:
            continue
        prop = prop.strip().lower()
        value = value.strip()
        if prop and value:
            result[prop] = value
    return result


def properties_to_inline_style(properties: StyleMap) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in properties.items())


def merge_style_maps(maps: Iterable[StyleMap]) -> StyleMap:
    merged: StyleMap = {}
    for style_map in maps:
        if style_map:
            merged.update(style_map)
    return merged
