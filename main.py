"""
Entry point for the HTML to Gutenberg converter.

Equivalent to the ``docs2gutenberg`` console script::

  python main.py convert docs/article.html -o output/article.gutenberg.html --report
"""

import sys

from docs2gutenberg.cli import main

if __name__ == "__main__":
    sys.exit(main())
