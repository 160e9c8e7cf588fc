"""
Inlining of extracted CSS onto the elements it targets.

After this stage every visual property the author set through a
stylesheet is carried by the element's own ``style`` attribute, so the
``<style>`` elements (and, unless asked otherwise, the classes) can go.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from ..extractors.style_extractor import ExtractedStyles, extract_all_styles, get_combined_styles
from ..utils.css import StyleMap, merge_style_maps, parse_properties, properties_to_inline_style
from ..utils.dom import class_list, parse_html, serialize

logger = logging.getLogger(__name__)

_SKIPPED_TAGS = {"html", "head", "style", "script"}


@dataclass
class InlinerOptions:
    keep_classes: bool = False
    # existing style attributes always win; with merge_existing off they are left untouched
    merge_existing: bool = True
    ignore_classes: List[str] = field(default_factory=list)
    apply_id_styles: bool = True
    apply_element_styles: bool = True


def _scope_elements(soup: BeautifulSoup) -> List[Tag]:
    if soup.body is not None:
        return list(soup.body.find_all(True))
    # fragment without <body>: everything outside <head>
    return [el for el in soup.find_all(True) if el.find_parent("head") is None]


def _computed_styles(element: Tag, styles: ExtractedStyles, opts: InlinerOptions) -> StyleMap:
    layers: List[StyleMap] = []
    if opts.apply_element_styles:
        layers.append(styles.element_map.get(element.name, {}))
    classes = [c for c in class_list(element) if c not in opts.ignore_classes]
    layers.append(get_combined_styles(classes, styles.class_map))
    element_id = element.get("id")
    if opts.apply_id_styles and element_id:
        layers.append(styles.id_map.get(str(element_id), {}))
    return merge_style_maps(layers)


def apply_styles(
    html: str,
    styles: ExtractedStyles,
    options: Optional[Union[InlinerOptions, dict]] = None,
) -> str:
    """Apply an already extracted style index to ``html``."""
    opts = _coerce_options(options)
    soup = parse_html(html)

    for element in _scope_elements(soup):
        if element.name in _SKIPPED_TAGS:
            continue
        existing_attr = element.get("style")
        existing = parse_properties(str(existing_attr)) if existing_attr is not None else {}

        if existing and not opts.merge_existing:
            merged = existing
        else:
            merged = merge_style_maps([_computed_styles(element, styles, opts), existing])

        if merged:
            element["style"] = properties_to_inline_style(merged)
        elif element.has_attr("style"):
            del element["style"]

        if not opts.keep_classes and element.has_attr("class"):
            del element["class"]

    return serialize(soup)


def inline_all_styles(html: str, options: Optional[Union[InlinerOptions, dict]] = None) -> str:
    """
    Inline every class, id and element rule of the document's ``<style>``
    elements into ``style`` attributes.

    Specificity, lowest first: element rules, class rules, id rules, then the
    element's own ``style`` attribute.
    """
    styles = extract_all_styles(html)
    logger.debug(
        "Inlining %d class, %d id and %d element rule(s)",
        len(styles.class_map),
        len(styles.id_map),
        len(styles.element_map),
    )
    return apply_styles(html, styles, options)


def remove_style_tags(html: str) -> str:
    soup = parse_html(html)
    for style in soup.find_all("style"):
        style.decompose()
    return serialize(soup)


def _coerce_options(options: Optional[Union[InlinerOptions, dict]]) -> InlinerOptions:
    if options is None:
        return InlinerOptions()
    if isinstance(options, InlinerOptions):
        return options
    return InlinerOptions(**options)
