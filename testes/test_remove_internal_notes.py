import logging
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from docs2gutenberg.policies.builtin.remove_internal_notes import (
    DEFAULT_NOTE_PATTERNS,
    RemoveInternalNotesPolicy,
    compile_patterns,
    is_internal_note,
)
from docs2gutenberg.utils.dom import parse_html

POLICY = RemoveInternalNotesPolicy()


def apply(html, options=None):
    return POLICY.apply(html, parse_html(html), POLICY.resolve_options(options))


def test_team_instruction_paragraph_removed():
    result = apply("<p>To Team Web: please fix the banner</p><p>Real content</p>")
    assert result.html == "<p>Real content</p>"
    assert result.passed
    assert result.warnings[0].startswith("Removed 1 internal note(s)")


def test_thai_graphic_note_removed():
    result = apply("<p>กราฟิก: รูปหน้าปก</p><p>เนื้อหา</p>")
    assert "กราฟิก" not in result.html
    assert "เนื้อหา" in result.html


def test_google_docs_comments_removed():
    html = (
        '<p>Body<sup><a href="#cmnt1" id="cmnt_ref1">[a]</a></sup></p>'
        '<div><p><a href="#cmnt_ref1" id="cmnt1">[a]</a>Please check the numbers</p></div>'
    )
    result = apply(html)
    assert "Body" in result.html
    assert "[a]" not in result.html
    assert "Please check" not in result.html
    assert "<div" not in result.html


def test_note_lines_inside_text_are_dropped():
    result = apply("<p>Intro line\n@john check this\nMore text</p>")
    assert "@john" not in result.html
    assert "Intro line" in result.html
    assert "More text" in result.html


def test_no_notes_leaves_html_untouched():
    html = "<p>Just an article</p>"
    result = apply(html)
    assert result.html == html
    assert not result.triggered


def test_report_only_mode_fails_without_changes():
    html = "<p>Alt: photo of a cat</p><p>text</p>"
    soup = parse_html(html)
    result = POLICY.apply(html, soup, POLICY.resolve_options({"autoRemove": False}))
    assert str(soup) == html
    assert not result.passed
    assert result.html == html
    assert "internal note" in result.errors[0]


def test_custom_patterns_and_invalid_regex(caplog):
    with caplog.at_level(logging.WARNING, logger="docs2gutenberg.policies.builtin.remove_internal_notes"):
        result = apply("<p>DRAFT: rewrite</p><p>keep</p>", {"patterns": ["(unclosed", r"^DRAFT"]})
    assert result.html == "<p>keep</p>"
    assert "Invalid internal note pattern" in caplog.text


def test_compile_patterns_accepts_mappings():
    compiled = compile_patterns([{"name": "fixme", "pattern": "^fixme"}, DEFAULT_NOTE_PATTERNS[0]])
    assert len(compiled) == 2
    assert is_internal_note("FIXME later", compiled)
    assert is_internal_note("[b] comment", compiled)


def test_default_patterns():
    compiled = compile_patterns(DEFAULT_NOTE_PATTERNS)
    assert is_internal_note("  Alt: picture", compiled)
    assert is_internal_note("NOTE SEO Writer: keyword", compiled)
    assert is_internal_note("Landing: https://example.com", compiled)
    assert not is_internal_note("An ordinary sentence.", compiled)
