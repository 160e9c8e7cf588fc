"""Policy that strips tags which must never reach the editor (scripts, embeds, forms)."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

from bs4 import BeautifulSoup

from ...utils.dom import is_detached, serialize
from ..base import Policy, PolicyResult, failed_result, success_result, warning_result
from ..registry import REGISTRY


class ForbiddenTagsPolicy(Policy):
    name = "forbiddenTags"
    description = "Detect and remove disallowed HTML tags (script, iframe, ...)"
    priority = 5
    default_options: Dict[str, Any] = {
        "tags": ["script", "iframe", "object", "embed", "form", "input", "button"],
        "autoRemove": True,
        "keepContent": False,
    }

    def apply(self, html: str, soup: BeautifulSoup, options: Mapping[str, Any]) -> PolicyResult:
        opts = self.resolve_options(options)

        found: List[Tuple[str, int]] = []
        for tag in opts.get("tags") or []:
            count = len(soup.find_all(tag))
            if count:
                found.append((tag, count))

        if not found:
            return success_result(html)

        summary = ", ".join(f"{tag} ({count})" for tag, count in found)

        if not opts.get("autoRemove"):
            return failed_result(html, [f"Forbidden tags found: {summary}"])

        for tag, _ in found:
            for element in soup.find_all(tag):
                if is_detached(element):
                    continue
                if opts.get("keepContent"):
                    element.unwrap()
                else:
                    element.decompose()

        return warning_result(
            serialize(soup),
            [f"Removed forbidden tags: {summary}"],
            [f"removed forbidden tags: {summary}"],
        )


REGISTRY.register(ForbiddenTagsPolicy())
