"""Page loader: content cache in front of the fetcher, markdown out."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from docpilot.parser import extract_main_content, html_to_markdown

if TYPE_CHECKING:
    from docpilot.cache import ContentCache
    from docpilot.protocols import FetcherProtocol


class PageLoader:
    def __init__(self, fetcher: FetcherProtocol, cache: ContentCache) -> None:
        self._fetcher = fetcher
        self._cache = cache

    async def load(self, normalized_url: str) -> str:
        """Return markdown for an indexed page.

        The cache holds the extracted HTML region, not the markdown, so
        conversion runs on every call. Fetch failures propagate as
        DocPilotError.
        """
        log = structlog.get_logger().bind(url=normalized_url)

        markup = self._cache.get(normalized_url)
        if markup is not None:
            log.info("cache_hit")
        else:
            log.info("cache_miss_fetching")
            html = await self._fetcher.fetch(normalized_url)
            markup = extract_main_content(html)
            self._cache.put(normalized_url, markup)

        return html_to_markdown(markup)
