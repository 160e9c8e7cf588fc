"""
HTML cleanup for Google Docs / Microsoft Word exports.

:func:`clean_html` applies an ordered rule set (later rules depend on
the byproducts of earlier ones) and returns the ``<body>`` content as
the working fragment.  :func:`remove_google_docs_artifacts` and
:func:`remove_word_artifacts` are narrower, editor specific passes run
before it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..utils.css import merge_style_maps, parse_properties, properties_to_inline_style
from ..utils.dom import class_list, is_detached, is_semantically_empty, parse_html, serialize, set_class_list

logger = logging.getLogger(__name__)

DEFAULT_REMOVE_TAGS = [
    "script", "style", "meta", "link", "title", "head",
    "o:p", "xml", "w:sdt", "w:sdtpr", "w:sdtcontent",
]
DEFAULT_UNWRAP_TAGS = ["font"]

# whitespace is normalized inside these elements
_WHITESPACE_SCOPE = {"p", "span", "div", "li", "td", "th"}
# leading/trailing whitespace is trimmed inside these
_TRIMMED = {"p", "div", "li", "td", "th"}
_PRESERVE_WHITESPACE = {"pre", "code", "textarea", "script", "style"}
# whitespace between two of these separates words and is kept
_INLINE_TAGS = {
    "a", "abbr", "b", "cite", "code", "em", "i", "img", "kbd", "mark",
    "q", "s", "small", "span", "strike", "strong", "sub", "sup", "u",
}

_GOOGLE_DOCS_ATTRIBUTES = ("data-docs-delta", "data-docs-has-only-inline-content")
_CONDITIONAL_COMMENT_RE = re.compile(r"<!--\[if[\s\S]*?endif\]-->", re.IGNORECASE)
_BARE_CONDITIONAL_RE = re.compile(r"<!\[if[\s\S]*?<!\[endif\]>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class CleanerOptions:
    remove_tags: List[str] = field(default_factory=lambda: list(DEFAULT_REMOVE_TAGS))
    unwrap_tags: List[str] = field(default_factory=lambda: list(DEFAULT_UNWRAP_TAGS))
    remove_empty_paragraphs: bool = True
    remove_empty_spans: bool = True
    merge_nested_spans: bool = True
    remove_comments: bool = True
    remove_data_attributes: bool = True
    # ids are kept by default, they anchor in-document links
    remove_ids: bool = False


def clean_html(html: str, options: Optional[Union[CleanerOptions, dict]] = None) -> str:
    """Clean ``html`` and return the inner HTML of ``<body>`` (or the whole fragment)."""
    opts = _coerce_options(options)
    soup = parse_html(html)

    for name in opts.remove_tags:
        _remove_elements(soup, name)

    for name in opts.unwrap_tags:
        for element in soup.find_all(name):
            element.unwrap()

    if opts.remove_comments:
        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()

    if opts.remove_data_attributes:
        for element in soup.find_all(True):
            for attr in [a for a in element.attrs if a.startswith("data-")]:
                del element[attr]

    if opts.remove_ids:
        for element in soup.find_all(id=True):
            del element["id"]

    if opts.remove_empty_spans:
        removed = remove_empty_elements(soup, "span")
        if removed:
            logger.debug("Removed %d empty span(s)", removed)

    if opts.merge_nested_spans:
        merge_nested_spans(soup)

    if opts.remove_empty_paragraphs:
        removed = remove_empty_elements(soup, "p")
        if removed:
            logger.debug("Removed %d empty paragraph(s)", removed)

    normalize_whitespace(soup)

    if soup.body is not None:
        return soup.body.decode_contents()
    return serialize(soup)


def _remove_elements(soup: BeautifulSoup, name: str) -> None:
    for element in soup.find_all(name):
        if not is_detached(element):
            element.decompose()


def remove_empty_elements(soup: BeautifulSoup, name: str) -> int:
    """
    Remove every ``name`` element that is semantically empty, repeating
    until a full pass removes nothing (removing an inner element can
    leave its parent empty).
    """
    total = 0
    changed = True
    while changed:
        changed = False
        for element in soup.find_all(name):
            if is_detached(element):
                continue
            if is_semantically_empty(element):
                element.decompose()
                total += 1
                changed = True
    return total


def _only_child_span(span: Tag) -> Optional[Tag]:
    meaningful = [
        child for child in span.contents
        if not (type(child) is NavigableString and not child.strip())
    ]
    if len(meaningful) == 1 and isinstance(meaningful[0], Tag) and meaningful[0].name == "span":
        return meaningful[0]
    return None


def merge_nested_spans(soup: BeautifulSoup) -> None:
    """Flatten ``<span><span>..</span></span>``; the inner style wins on conflicts."""
    for span in soup.find_all("span"):
        if is_detached(span):
            continue
        inner = _only_child_span(span)
        while inner is not None:
            merged = merge_style_maps([
                parse_properties(str(span.get("style") or "")),
                parse_properties(str(inner.get("style") or "")),
            ])
            inner.unwrap()
            if merged:
                span["style"] = properties_to_inline_style(merged)
            inner = _only_child_span(span)


def _under(string: NavigableString, names: set) -> bool:
    return any(parent.name in names for parent in string.parents)


def normalize_whitespace(soup: BeautifulSoup) -> None:
    """Collapse whitespace runs inside text blocks and drop whitespace between tags."""
    soup.smooth()
    for string in list(soup.find_all(string=True)):
        if type(string) is not NavigableString or string.parent is None:
            continue
        if not _under(string, _WHITESPACE_SCOPE) or _under(string, _PRESERVE_WHITESPACE):
            continue

        parent = string.parent
        original = str(string)
        text = _WHITESPACE_RE.sub(" ", original)

        if not text.strip():
            prev_sibling, next_sibling = string.previous_sibling, string.next_sibling
            if isinstance(prev_sibling, Tag) and isinstance(next_sibling, Tag):
                if not (prev_sibling.name in _INLINE_TAGS and next_sibling.name in _INLINE_TAGS):
                    string.extract()
                    continue

        if parent.name in _TRIMMED:
            if parent.contents and parent.contents[0] is string:
                text = text.lstrip()
            if parent.contents and parent.contents[-1] is string:
                text = text.rstrip()

        if not text:
            string.extract()
        elif text != original:
            string.replace_with(text)


def remove_google_docs_artifacts(html: str) -> str:
    """Strip ``docs-*`` classes, Google Docs data attributes and empty bookmark anchors."""
    soup = parse_html(html)

    for element in soup.find_all(class_=True):
        set_class_list(element, [c for c in class_list(element) if "docs-" not in c])

    for attr in _GOOGLE_DOCS_ATTRIBUTES:
        for element in soup.find_all(attrs={attr: True}):
            del element[attr]

    for anchor in soup.find_all("a", id=True):
        if not anchor.has_attr("href") and is_semantically_empty(anchor):
            anchor.decompose()

    return serialize(soup)


def remove_word_artifacts(html: str) -> str:
    """Strip Office conditional comments and ``Mso*`` classes."""
    html = _CONDITIONAL_COMMENT_RE.sub("", html or "")
    html = _BARE_CONDITIONAL_RE.sub("", html)

    soup = parse_html(html)
    for element in soup.find_all(class_=True):
        classes = class_list(element)
        kept = [c for c in classes if not c.startswith("Mso")]
        if len(kept) != len(classes):
            set_class_list(element, kept)
    return serialize(soup)


def _coerce_options(options: Optional[Union[CleanerOptions, dict]]) -> CleanerOptions:
    if options is None:
        return CleanerOptions()
    if isinstance(options, CleanerOptions):
        return options
    return CleanerOptions(**options)
