"""Policy requiring a minimum number of images, optionally filling the gap with placeholders."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from bs4 import BeautifulSoup

from ...parsers.gutenberg_blocks import escape_html
from ...utils.dom import content_root, insert_fragment_after, prepend_fragment, serialize
from ..base import Policy, PolicyResult, failed_result, success_result, warning_result
from ..registry import REGISTRY

PLACEHOLDER_CAPTION = "กรุณาเพิ่มรูปภาพ"


class MinImageCountPolicy(Policy):
    name = "minImageCount"
    description = "Require at least a minimum number of images"
    priority = 20
    default_options: Dict[str, Any] = {
        "minCount": 1,
        "autoInsertPlaceholder": False,
        "placeholderUrl": "https://via.placeholder.com/800x400?text=Image+Placeholder",
        "placeholderAlt": "รูปภาพประกอบบทความ",
    }

    def apply(self, html: str, soup: BeautifulSoup, options: Mapping[str, Any]) -> PolicyResult:
        opts = self.resolve_options(options)
        min_count = int(opts.get("minCount") or 0)
        if min_count == 0:
            return success_result(html)

        current = len(soup.find_all("img"))
        if current >= min_count:
            return success_result(html)

        missing = min_count - current
        if not opts.get("autoInsertPlaceholder"):
            return failed_result(
                html,
                [f"Document needs at least {min_count} image(s), found {current}"],
            )

        placeholder = (
            f'<figure><img src="{escape_html(str(opts.get("placeholderUrl") or ""))}" '
            f'alt="{escape_html(str(opts.get("placeholderAlt") or ""))}"/>'
            f"<figcaption>{PLACEHOLDER_CAPTION}</figcaption></figure>"
        )
        markup = placeholder * missing
        anchor = soup.find("h2") or soup.find("p")
        if anchor is not None:
            insert_fragment_after(anchor, markup)
        else:
            prepend_fragment(content_root(soup), markup)

        return warning_result(
            serialize(soup),
            [
                f"Inserted {missing} placeholder image(s) (required {min_count}, found {current}); "
                "replace them with real images"
            ],
            [f"auto-inserted {missing} placeholder image(s)"],
        )


REGISTRY.register(MinImageCountPolicy())
