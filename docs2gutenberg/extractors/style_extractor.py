"""
Extraction of authorial CSS from exported documents.

Google Docs exports carry one ``<style>`` element full of generated
class rules (``.c1``, ``.c2`` ...) and element rules (``p``, ``h1``);
Word exports add ``Mso*`` classes and ``@media`` / ``@page`` blocks.
:func:`extract_all_styles` turns all of it into lookup maps keyed by
class name, id and tag name that the style inliner consumes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from bs4 import BeautifulSoup, Tag

from ..utils.css import StyleMap, merge_style_maps, parse_properties, strip_css_comments
from ..utils.dom import class_list, parse_html

SelectorMap = Dict[str, StyleMap]

_AT_STATEMENT_RE = re.compile(r"@(?:import|charset|namespace)\b[^;]*;", re.IGNORECASE)
_ATTRIBUTE_SELECTOR_RE = re.compile(r"\[[^\]]*\]")
_CLASS_RE = re.compile(r"\.([a-zA-Z_][\w-]*)")
_ID_RE = re.compile(r"#([a-zA-Z_][\w-]*)")
_ELEMENT_RE = re.compile(r"(?:^|[\s>+~])([a-zA-Z][a-zA-Z0-9]*)")


@dataclass(frozen=True)
class MediaQuery:
    query: str
    rules: SelectorMap


@dataclass(frozen=True)
class ExtractedStyles:
    class_map: SelectorMap = field(default_factory=dict)
    id_map: SelectorMap = field(default_factory=dict)
    element_map: SelectorMap = field(default_factory=dict)
    selector_map: SelectorMap = field(default_factory=dict)
    media_queries: List[MediaQuery] = field(default_factory=list)
    inline_styles: SelectorMap = field(default_factory=dict)
    raw_css: str = ""


def _iter_blocks(css: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(prelude, body)`` for each top-level ``prelude { body }`` block.

    Braces are matched by depth so nested blocks (``@media``) come back whole.
    """
    pos = 0
    length = len(css)
    while pos < length:
        open_idx = css.find("{", pos)
        if open_idx == -1:
            return
        prelude = css[pos:open_idx]
        # leftovers of unterminated statements or stray braces before the selector
        prelude = re.split(r"[;}]", prelude)[-1].strip()
        depth = 0
        idx = open_idx
        while idx < length:
            ch = css[idx]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    break
            idx += 1
        yield prelude, css[open_idx + 1:idx]
        pos = idx + 1


def _merge_into(target: SelectorMap, key: str, declarations: StyleMap) -> None:
    target[key] = merge_style_maps([target.get(key, {}), dict(declarations)])


def _parse_rule_set(css: str) -> SelectorMap:
    rules: SelectorMap = {}
    for selector, body in _iter_blocks(css):
        if not selector or selector.startswith("@"):
            continue
        declarations = parse_properties(body)
        if declarations:
            _merge_into(rules, selector, declarations)
    return rules


def parse_css(css: str) -> ExtractedStyles:
    """Parse a stylesheet into class / id / element / selector maps and media queries."""
    class_map: SelectorMap = {}
    id_map: SelectorMap = {}
    element_map: SelectorMap = {}
    selector_map: SelectorMap = {}
    media_queries: List[MediaQuery] = []

    clean_css = _AT_STATEMENT_RE.sub("", strip_css_comments(css))

    for prelude, body in _iter_blocks(clean_css):
        if not prelude:
            continue
        if prelude.startswith("@"):
            if prelude.lower().startswith("@media"):
                query = prelude[len("@media"):].strip()
                media_queries.append(MediaQuery(query=query, rules=_parse_rule_set(body)))
            # @font-face, @page, @keyframes ... carry nothing to inline
            continue

        declarations = parse_properties(body)
        if not declarations:
            continue
        _merge_into(selector_map, prelude, declarations)

        for selector in (s.strip() for s in prelude.split(",")):
            # pseudo-class rules (a:hover, li:before) never apply unconditionally
            if not selector or ":" in selector:
                continue
            bare = _ATTRIBUTE_SELECTOR_RE.sub("", selector)
            for class_name in _CLASS_RE.findall(bare):
                _merge_into(class_map, class_name, declarations)
            id_match = _ID_RE.search(bare)
            if id_match:
                _merge_into(id_map, id_match.group(1), declarations)
            for element_name in _ELEMENT_RE.findall(bare):
                _merge_into(element_map, element_name.lower(), declarations)

    return ExtractedStyles(
        class_map=class_map,
        id_map=id_map,
        element_map=element_map,
        selector_map=selector_map,
        media_queries=media_queries,
        raw_css=css,
    )


def _collect_style_text(soup: BeautifulSoup) -> str:
    contents = []
    for style in soup.find_all("style"):
        text = style.string if style.string is not None else style.get_text()
        if text and text.strip():
            contents.append(str(text))
    return "\n".join(contents)


def _inline_identifier(element: Tag, index: int) -> str:
    element_id = element.get("id")
    if element_id:
        return f"#{element_id}"
    classes = class_list(element)
    if classes:
        return f"{element.name}.{'.'.join(classes)}"
    return f"{element.name}[{index}]"


def extract_inline_styles(soup: BeautifulSoup) -> SelectorMap:
    """Collect every ``style="..."`` attribute keyed by a readable element identifier."""
    inline: SelectorMap = {}
    for index, element in enumerate(soup.find_all(style=True)):
        styles = parse_properties(str(element.get("style") or ""))
        if styles:
            inline[_inline_identifier(element, index)] = styles
    return inline


def extract_all_styles(html: str) -> ExtractedStyles:
    """Extract every ``<style>`` rule and inline style attribute from ``html``."""
    soup = parse_html(html)
    parsed = parse_css(_collect_style_text(soup))
    return ExtractedStyles(
        class_map=parsed.class_map,
        id_map=parsed.id_map,
        element_map=parsed.element_map,
        selector_map=parsed.selector_map,
        media_queries=parsed.media_queries,
        inline_styles=extract_inline_styles(soup),
        raw_css=parsed.raw_css,
    )


def get_combined_styles(classes: List[str], class_map: SelectorMap) -> StyleMap:
    """Merge the styles of ``classes`` in order; later classes win."""
    return merge_style_maps(class_map.get(name, {}) for name in classes)
