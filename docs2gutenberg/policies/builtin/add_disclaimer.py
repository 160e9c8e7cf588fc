"""Policy inserting a disclaimer banner into promotional content."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from bs4 import BeautifulSoup

from ...utils.dom import append_fragment, content_root, insert_fragment_after, prepend_fragment, serialize
from ..base import Policy, PolicyResult, success_result, warning_result
from ..registry import REGISTRY

DISCLAIMER_CLASS = "disclaimer-block"

DEFAULT_DISCLAIMER_HTML = (
    f'<div class="{DISCLAIMER_CLASS}" style="background-color: #fff3cd; border: 1px solid #ffc107; '
    'padding: 15px; margin: 20px 0; border-radius: 5px;">'
    "<strong>⚠️ หมายเหตุ:</strong> "
    "โปรโมชั่นและราคาพิเศษที่กล่าวถึงในบทความนี้อาจมีการเปลี่ยนแปลง กรุณาตรวจสอบข้อมูลล่าสุดก่อนตัดสินใจ"
    "</div>"
)

POSITIONS = ("start", "end", "after-keyword")


class AddDisclaimerPolicy(Policy):
    name = "addDisclaimer"
    description = "Add a disclaimer when promotional keywords are found"
    priority = 50
    default_options: Dict[str, Any] = {
        "keywords": ["โปรโมชั่น", "ส่วนลด", "ราคาพิเศษ", "ข้อเสนอพิเศษ", "promotion", "discount"],
        "disclaimerHtml": DEFAULT_DISCLAIMER_HTML,
        "position": "end",
        "disclaimerClass": DISCLAIMER_CLASS,
    }

    def apply(self, html: str, soup: BeautifulSoup, options: Mapping[str, Any]) -> PolicyResult:
        opts = self.resolve_options(options)

        disclaimer_class = opts.get("disclaimerClass") or DISCLAIMER_CLASS
        if soup.find(class_=disclaimer_class) is not None:
            return success_result(html)

        text = content_root(soup).get_text().lower()
        found: List[str] = [kw for kw in opts.get("keywords") or [] if kw and kw.lower() in text]
        if not found:
            return success_result(html)

        disclaimer = opts.get("disclaimerHtml") or ""
        position = opts.get("position") or "end"
        root = content_root(soup)

        if position == "start":
            prepend_fragment(root, disclaimer)
        elif position == "after-keyword":
            target = None
            for paragraph in soup.find_all("p"):
                paragraph_text = paragraph.get_text().lower()
                if any(kw.lower() in paragraph_text for kw in found):
                    target = paragraph
                    break
            if target is not None:
                insert_fragment_after(target, disclaimer)
            else:
                append_fragment(root, disclaimer)
        else:
            append_fragment(root, disclaimer)

        keywords = ", ".join(found)
        return warning_result(
            serialize(soup),
            [f"Added disclaimer because of keywords: {keywords}"],
            [f"auto-inserted disclaimer for keywords: {keywords}"],
        )


REGISTRY.register(AddDisclaimerPolicy())
