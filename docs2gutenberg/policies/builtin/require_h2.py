"""Policy requiring a minimum number of ``<h2>`` section headings."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from bs4 import BeautifulSoup

from ...parsers.gutenberg_blocks import escape_html
from ...utils.dom import content_root, insert_fragment_before, prepend_fragment, serialize
from ..base import Policy, PolicyResult, failed_result, success_result, warning_result
from ..registry import REGISTRY


class RequireH2Policy(Policy):
    name = "requireH2"
    description = "Require at least a minimum number of H2 headings"
    priority = 10
    default_options: Dict[str, Any] = {
        "minCount": 1,
        "autoGenerate": False,
        "defaultHeadingText": "หัวข้อ",
    }

    def apply(self, html: str, soup: BeautifulSoup, options: Mapping[str, Any]) -> PolicyResult:
        opts = self.resolve_options(options)
        min_count = int(opts.get("minCount", 1) or 0)
        if min_count <= 0:
            return success_result(html)
        current = len(soup.find_all("h2"))
        if current >= min_count:
            return success_result(html)

        missing = min_count - current
        if not opts.get("autoGenerate"):
            return failed_result(
                html,
                [f"Document needs at least {min_count} H2 heading(s), found {current}"],
            )

        text = escape_html(str(opts.get("defaultHeadingText") or ""))
        markup = "".join(f"<h2>{text} {current + i + 1}</h2>" for i in range(missing))
        first_paragraph = soup.find("p")
        if first_paragraph is not None:
            insert_fragment_before(first_paragraph, markup)
        else:
            prepend_fragment(content_root(soup), markup)

        return warning_result(
            serialize(soup),
            [f"Auto-generated {missing} H2 heading(s) (required {min_count}, found {current})"],
            [f"auto-generated {missing} H2 heading(s)"],
        )


REGISTRY.register(RequireH2Policy())
