"""
HTML cleanup.

Currently this subpackage exposes ``clean_html`` and the Google Docs /
Word artifact removers from :mod:`docs2gutenberg.cleaners.html_cleaner`.
"""

from .html_cleaner import CleanerOptions, clean_html, remove_google_docs_artifacts, remove_word_artifacts

__all__ = ["CleanerOptions", "clean_html", "remove_google_docs_artifacts", "remove_word_artifacts"]
