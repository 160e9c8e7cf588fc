"""Policy that drops everything before the first ``<h1>``, and the ``<h1>`` itself.

WordPress renders the post title as the page heading, so the document's
own title (and any cover material above it) would be duplicated.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from bs4 import BeautifulSoup, Tag

from ...utils.dom import serialize
from ..base import Policy, PolicyResult, success_result, warning_result
from ..registry import REGISTRY


class RemoveBeforeH1Policy(Policy):
    name = "removeBeforeH1"
    description = "Remove all content before the first H1, including the H1"
    priority = 3
    default_options: Dict[str, Any] = {"autoRemove": True}

    def apply(self, html: str, soup: BeautifulSoup, options: Mapping[str, Any]) -> PolicyResult:
        opts = self.resolve_options(options)
        first_h1 = soup.find("h1")
        if first_h1 is None or not opts.get("autoRemove"):
            return success_result(html)

        removed: List[str] = []
        node: Tag = first_h1
        while node is not None and isinstance(node, Tag) and node.name not in ("body", "[document]"):
            for sibling in list(node.previous_siblings):
                if isinstance(sibling, Tag):
                    removed.append(sibling.name)
                    sibling.decompose()
                else:
                    # text and comments go too, without counting as elements
                    sibling.extract()
            node = node.parent

        first_h1.decompose()
        removed.append("h1")

        tag_names = ", ".join(dict.fromkeys(removed))
        count = len(removed)
        return warning_result(
            serialize(soup),
            [f"Removed {count} element(s) before and including the first H1 (tags: {tag_names})"],
            [f"removed {count} element(s) before and including first H1"],
        )


REGISTRY.register(RemoveBeforeH1Policy())
