"""Shared test fixtures for the docpilot test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from docpilot.index import build_index
from docpilot.models.corpus import Corpus, DocumentationIndex

if TYPE_CHECKING:
    from collections.abc import Callable

_DOCS_HOST = "developers.glean.com"


@pytest.fixture()
def corpus() -> Corpus:
    """Small corpus with one unnormalised URL and two entries that get dropped."""
    return Corpus.model_validate(
        {
            "categories": {
                "authentication": [
                    {
                        "url": "https://developers.glean.com/api-info/client/authentication/overview",
                        "description": "Client API authentication overview.",
                    },
                    {
                        "url": (
                            "HTTP://Developers.Glean.com"
                            "/api-info/client/authentication/glean-issued/?ref=nav"
                        )
                    },
                ],
                "search": [
                    {
                        "url": "https://developers.glean.com/api/client-api/search/search",
                        "description": "Search endpoint reference.",
                    },
                    {"url": "https://example.com/search", "description": "Off-host page."},
                    {"url": "not a url", "description": "Broken entry."},
                ],
            }
        }
    )


@pytest.fixture()
def index(corpus: Corpus) -> DocumentationIndex:
    """Index built from the sample corpus."""
    return build_index(corpus, _DOCS_HOST)


@pytest.fixture()
def page_html() -> Callable[[str, str], str]:
    """Builds a documentation page with navigation chrome around the main region."""

    def _build(title: str, body: str) -> str:
        return f"""\
<html>
  <head><title>{title}</title><style>body {{ color: red; }}</style></head>
  <body>
    <nav>Site navigation</nav>
    <main>
      <h1>{title}</h1>
      <p>{body}</p>
      <script>trackPageView();</script>
    </main>
    <footer>Footer links</footer>
  </body>
</html>"""

    return _build
