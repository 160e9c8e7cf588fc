import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
requests = pytest.importorskip("requests")

from docs2gutenberg.extractors import html_loader
from docs2gutenberg.extractors.html_loader import load_from_file, load_from_url, load_html, looks_like_html
from docs2gutenberg.utils.errors import HtmlLoadError


class FakeResponse:
    def __init__(self, text, status_code=200, encoding=None):
        self.text = text
        self.status_code = status_code
        self.encoding = encoding

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


def test_looks_like_html():
    assert looks_like_html("  <p>x</p>")
    assert looks_like_html("text before <!DOCTYPE html>")
    assert not looks_like_html("article.html")
    assert not looks_like_html("")


def test_string_input():
    loaded = load_html("<p>x</p>")
    assert loaded.html == "<p>x</p>"
    assert loaded.source_path is None


def test_file_input_strips_bom(tmp_path):
    path = tmp_path / "doc.html"
    path.write_text("\ufeff<p>ไทย</p>", encoding="utf-8")
    loaded = load_html(str(path))
    assert loaded.html == "<p>ไทย</p>"
    assert loaded.source_path == str(path)


def test_missing_file():
    with pytest.raises(HtmlLoadError, match="File not found"):
        load_from_file("/no/such/file.html")


def test_directory_is_rejected(tmp_path):
    with pytest.raises(HtmlLoadError, match="Not a file"):
        load_from_file(str(tmp_path))


def test_invalid_utf8(tmp_path):
    path = tmp_path / "latin.html"
    path.write_bytes(b"<p>\xff\xfe</p>")
    with pytest.raises(HtmlLoadError):
        load_from_file(str(path))


def test_url_input(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse("<p>remote</p>")

    monkeypatch.setattr(html_loader.requests, "get", fake_get)
    loaded = load_html("https://docs.example.com/export?format=html")
    assert loaded.html == "<p>remote</p>"
    assert loaded.source_path == "https://docs.example.com/export?format=html"
    assert calls == [("https://docs.example.com/export?format=html", 30)]


def test_url_network_error(monkeypatch):
    def fake_get(url, timeout):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(html_loader.requests, "get", fake_get)
    with pytest.raises(HtmlLoadError, match="Could not download"):
        load_from_url("https://docs.example.com/doc")


def test_url_http_error(monkeypatch):
    monkeypatch.setattr(html_loader.requests, "get", lambda url, timeout: FakeResponse("", status_code=404))
    with pytest.raises(HtmlLoadError, match="404"):
        load_from_url("https://docs.example.com/missing", timeout=5)
