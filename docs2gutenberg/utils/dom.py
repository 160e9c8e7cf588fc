"""
DOM helpers shared by every pipeline stage.

Each stage receives an HTML string, parses it into its own tree with
:func:`parse_html`, mutates that tree and hands a serialized string to
the next stage.  No stage keeps a reference into another stage's tree.
"""

from __future__ import annotations

from typing import List, Optional, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

PARSER = "html.parser"


def parse_html(html: str) -> BeautifulSoup:
    """Parse ``html`` (document or fragment) into a fresh tree."""
    return BeautifulSoup(html or "", PARSER)


def serialize(soup: Union[BeautifulSoup, Tag]) -> str:
    return str(soup)


def content_root(soup: BeautifulSoup) -> Union[BeautifulSoup, Tag]:
    """Return ``<body>`` when the document has one, else the document root."""
    body = soup.body
    return body if body is not None else soup


def is_detached(node: Union[Tag, NavigableString]) -> bool:
    """True once ``node`` was decomposed or pulled out of its tree."""
    return bool(getattr(node, "decomposed", False)) or node.parent is None


def fragment_nodes(markup: str) -> List[Union[Tag, NavigableString]]:
    """Parse ``markup`` and return its top-level nodes, detached and ready to insert."""
    fragment = parse_html(markup)
    return [node.extract() for node in list(fragment.contents)]


def insert_fragment_before(anchor: Tag, markup: str) -> None:
    for node in fragment_nodes(markup):
        anchor.insert_before(node)


def insert_fragment_after(anchor: Tag, markup: str) -> None:
    # insert_after on the previously inserted node keeps document order
    current: Union[Tag, NavigableString] = anchor
    for node in fragment_nodes(markup):
        current.insert_after(node)
        current = node


def prepend_fragment(container: Union[BeautifulSoup, Tag], markup: str) -> None:
    for offset, node in enumerate(fragment_nodes(markup)):
        container.insert(offset, node)


def append_fragment(container: Union[BeautifulSoup, Tag], markup: str) -> None:
    for node in fragment_nodes(markup):
        container.append(node)


def is_semantically_empty(node: Optional[Union[Tag, NavigableString]], *, ignore_breaks: bool = False) -> bool:
    """
    Decide whether ``node`` carries no publishable content.

    A node is empty when its text is empty after stripping whitespace
    (``&nbsp;`` included) and it has no element descendants.  With
    ``ignore_breaks`` set, ``<br>`` elements do not count as content.
    Comments count as content, they are removed by the cleaner anyway.
    """
    if node is None:
        return True
    if isinstance(node, NavigableString):
        return not str(node).strip()
    for child in node.descendants:
        if isinstance(child, Tag):
            if ignore_breaks and child.name == "br":
                continue
            return False
        if isinstance(child, Comment):
            return False
        if str(child).strip():
            return False
    return True


def class_list(element: Tag) -> List[str]:
    """Return the element's classes as a list regardless of how bs4 stored them."""
    value = element.get("class")
    if not value:
        return []
    if isinstance(value, str):
        return [c for c in value.split() if c]
    return [c for c in value if c]


def set_class_list(element: Tag, classes: List[str]) -> None:
    if classes:
        element["class"] = classes
    elif element.has_attr("class"):
        del element["class"]


def attr_text(element: Tag, name: str, default: str = "") -> str:
    """Fetch an attribute as a plain string (multi-valued attributes are joined)."""
    value = element.get(name)
    if value is None:
        return default
    if isinstance(value, list):
        return " ".join(value)
    return str(value)
