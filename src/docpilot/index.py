"""Documentation corpus: loading and index building."""

from __future__ import annotations

import json
from importlib.resources import files
from pathlib import Path

import structlog

from docpilot.models.corpus import Corpus, DocumentationIndex, PageDescriptor
from docpilot.urls import is_allowed_host, normalize_url

log = structlog.get_logger()

_BUNDLED_CORPUS = "docs_index.json"


def load_corpus(path: Path | None = None) -> Corpus:
    """Load the corpus JSON from ``path``, or the snapshot bundled with the package.

    Raises ``OSError`` / ``ValueError`` on unreadable or malformed files; the
    corpus is required at startup, so there is no fallback.
    """
    if path is None:
        raw = files("docpilot").joinpath("data", _BUNDLED_CORPUS).read_text(encoding="utf-8")
        source = "bundled"
    else:
        raw = path.read_text(encoding="utf-8")
        source = str(path)

    corpus = Corpus.model_validate(json.loads(raw))
    log.info(
        "corpus_loaded",
        source=source,
        categories=len(corpus.categories),
        entries=sum(len(entries) for entries in corpus.categories.values()),
    )
    return corpus


def build_index(corpus: Corpus, host: str) -> DocumentationIndex:
    """Build the category and URL lookups from the corpus in a single pass.

    Entries whose URL does not normalise, or that live off ``host``, are
    dropped from their category. A URL listed under several categories is
    kept in each category list but maps to the last one in ``by_url``.
    """
    by_category: dict[str, tuple[PageDescriptor, ...]] = {}
    by_url: dict[str, tuple[str, PageDescriptor]] = {}
    dropped = 0

    for category, entries in corpus.categories.items():
        pages: list[PageDescriptor] = []
        for entry in entries:
            normalized = normalize_url(entry.url)
            if normalized is None or not is_allowed_host(normalized, host):
                log.debug("index_entry_dropped", category=category, url=entry.url)
                dropped += 1
                continue

            page = PageDescriptor(url=normalized, description=entry.description)
            pages.append(page)

            previous = by_url.get(normalized)
            if previous is not None and previous[0] != category:
                log.warning(
                    "index_duplicate_url",
                    url=normalized,
                    previous_category=previous[0],
                    category=category,
                )
            by_url[normalized] = (category, page)

        by_category[category] = tuple(pages)

    log.info(
        "index_built",
        categories=len(by_category),
        urls=len(by_url),
        dropped=dropped,
    )
    return DocumentationIndex(by_category=by_category, by_url=by_url)
