"""
Policy removing authoring artifacts that must not be published.

Google Docs drafts carry comment anchors (``[a]``, ``[b]`` ...), team
instructions ("To Team Web: ..."), ``@mentions``, SEO writer notes and
internal links.  The notes are recognised with a list of named regular
expressions (:data:`DEFAULT_NOTE_PATTERNS`); callers can replace the list
through the ``patterns`` option, either with plain pattern strings or
``{"name": ..., "pattern": ...}`` mappings.

Removal strategies, in order:

1. paragraphs / divs / list items / cells holding a Google Docs comment
   reference link (``href`` containing ``cmnt_ref``)
2. comment anchors (``<a id="cmnt1">[a]</a>``)
3. elements whose whole text is a note
4. note lines inside the text of the remaining blocks
5. containers left empty by the steps above (only with ``removeEmptyContainers``)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Pattern, Union

from bs4 import BeautifulSoup, NavigableString

from ...utils.dom import is_detached, is_semantically_empty, parse_html, serialize
from ..base import Policy, PolicyResult, failed_result, success_result, warning_result
from ..registry import REGISTRY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotePattern:
    name: str
    pattern: str


DEFAULT_NOTE_PATTERNS: List[NotePattern] = [
    NotePattern("comment-letter", r"^\[([a-z0-9])\]\s*"),
    NotePattern("team-instruction", r"^(To\s+Team\s+\w+\s*:)"),
    NotePattern("mention", r"^\s*@\w+"),
    NotePattern("graphic-note", r"^(กราฟิก|Graphic|Image|GRAPHIC|IMAGE)"),
    NotePattern("parenthetical-note", r"^\(\s*(ฝาก|Note:|Internal:|TODO:|FIXME:)"),
    NotePattern("alt-text", r"^(Alt|alt|ALT)\s*:"),
    NotePattern("seo-writer-note", r"^(NOTE\s+SEO\s+Writer|NOTE\s+SEO|note\s+seo)"),
    NotePattern("graphic-credit", r"^(กราฟิก Zip|ราคากราฟิก|Credit|เครดิต)"),
    NotePattern("internal-link", r"^(Landing\s*:|Link\s*:|URL\s*:)"),
    NotePattern("bracket-note", r"^\[.*?(ฝาก|Note|Internal|TODO|ทีม|Team)"),
]

_COMMENT_MARKER_RE = re.compile(r"^\[([a-z0-9])\]$", re.IGNORECASE)
_WHOLE_TEXT_SELECTORS = ["p", "div", "td", "li", "span"]
_BLOCK_SELECTORS = ["p", "div", "li", "td"]
_SAMPLE_LENGTH = 60


def compile_patterns(patterns: Iterable[Union[str, NotePattern, Mapping[str, str]]]) -> List[Pattern[str]]:
    """Compile note patterns case-insensitively; invalid ones are logged and skipped."""
    compiled = []
    for entry in patterns:
        if isinstance(entry, NotePattern):
            name, source = entry.name, entry.pattern
        elif isinstance(entry, Mapping):
            name, source = entry.get("name", ""), entry.get("pattern", "")
        else:
            name, source = "", str(entry)
        try:
            compiled.append(re.compile(source, re.IGNORECASE))
        except re.error as e:
            logger.warning("Invalid internal note pattern %s%r: %s", f"{name} " if name else "", source, e)
    return compiled


def is_internal_note(text: str, patterns: List[Pattern[str]]) -> bool:
    trimmed = (text or "").strip()
    return any(p.search(trimmed) for p in patterns)


def _sample(text: str) -> str:
    return text[:_SAMPLE_LENGTH] + ("..." if len(text) > _SAMPLE_LENGTH else "")


class RemoveInternalNotesPolicy(Policy):
    name = "removeInternalNotes"
    description = "Remove internal notes, comment markers and team instructions"
    priority = 8
    default_options: Dict[str, Any] = {
        "autoRemove": True,
        "removeEmptyContainers": True,
        "patterns": DEFAULT_NOTE_PATTERNS,
    }

    def apply(self, html: str, soup: BeautifulSoup, options: Mapping[str, Any]) -> PolicyResult:
        opts = self.resolve_options(options)
        patterns = compile_patterns(opts.get("patterns") or [])
        if not opts.get("autoRemove"):
            # report only: the shared tree must stay untouched
            soup = parse_html(html)

        counts: Dict[str, int] = {}
        removed: List[str] = []

        def record(selector: str, text: str) -> None:
            counts[selector] = counts.get(selector, 0) + 1
            removed.append(text)

        for link in soup.select('a[href*="cmnt_ref"]'):
            if is_detached(link):
                continue
            container = link.find_parent(_BLOCK_SELECTORS)
            if container is None:
                continue
            text = container.get_text().strip()
            if text:
                record("cmnt_ref", _sample(text))
                container.decompose()

        for anchor in soup.select('a[id^="cmnt"]'):
            if is_detached(anchor):
                continue
            text = anchor.get_text().strip()
            if _COMMENT_MARKER_RE.match(text):
                record("a.cmnt", text)
                anchor.decompose()

        for selector in _WHOLE_TEXT_SELECTORS:
            for element in soup.find_all(selector):
                if is_detached(element):
                    continue
                text = element.get_text().strip()
                if text and is_internal_note(text, patterns):
                    record(selector, _sample(text))
                    element.decompose()

        for element in soup.find_all(_BLOCK_SELECTORS):
            if is_detached(element):
                continue
            for node in list(element.children):
                if type(node) is not NavigableString:
                    continue
                lines = str(node).split("\n")
                kept = []
                for line in lines:
                    trimmed = line.strip()
                    if trimmed and is_internal_note(trimmed, patterns):
                        removed.append(trimmed[:_SAMPLE_LENGTH])
                    else:
                        kept.append(line)
                if len(kept) != len(lines):
                    remaining = "\n".join(kept)
                    if remaining.strip():
                        node.replace_with(remaining)
                    else:
                        node.extract()

        if opts.get("removeEmptyContainers"):
            _remove_empty_containers(soup)

        if not removed:
            return success_result(html)

        summary = ", ".join(f"{selector}({count})" for selector, count in counts.items()) or "text nodes"
        if not opts.get("autoRemove"):
            return failed_result(html, [f"Found {len(removed)} internal note(s) to remove: {summary}"])

        return warning_result(
            serialize(soup),
            [f"Removed {len(removed)} internal note(s): {' | '.join(removed[:3])}"],
            [f"removed {len(removed)} internal note(s)"],
        )


def _remove_empty_containers(soup: BeautifulSoup) -> None:
    changed = True
    while changed:
        changed = False
        for element in soup.find_all(_BLOCK_SELECTORS):
            if is_detached(element):
                continue
            if is_semantically_empty(element, ignore_breaks=True):
                element.decompose()
                changed = True


REGISTRY.register(RemoveInternalNotesPolicy())
