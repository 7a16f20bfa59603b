"""HTML extraction for documentation pages.

Two stages:
  1. ``extract_main_content`` strips scripts and styles and serialises the
     primary content region (``<main>`` if present, else ``<body>``). This
     intermediate markup is what the content cache stores.
  2. ``html_to_markdown`` converts that markup to markdown for the model.
     Every element of the region is kept: headings, lists (including link
     lists), code blocks and tables. It runs on every load, cache hit or not.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from markdownify import ATX, markdownify

_BLANK_LINES_RE = re.compile(r"\n{3,}")


def extract_main_content(html: str) -> str:
    """Return the serialised primary content region of an HTML document."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()

    region = soup.find("main") or soup.body or soup
    return str(region)


def html_to_markdown(markup: str) -> str:
    """Convert extracted page markup to markdown."""
    markdown = markdownify(
        markup,
        heading_style=ATX,
        bullets="-",
    )
    return _BLANK_LINES_RE.sub("\n\n", markdown).strip()
