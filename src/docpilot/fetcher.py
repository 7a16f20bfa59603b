"""HTTP documentation fetcher restricted to the documentation host.

All network I/O for fetching pages goes through a single Fetcher instance
shared across requests. The Fetcher receives an httpx.AsyncClient via
constructor injection; the server lifespan owns the client lifecycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urljoin

import httpx
import structlog

from docpilot.errors import DocPilotError, ErrorCode
from docpilot.urls import is_allowed_host

if TYPE_CHECKING:
    from docpilot.config import FetcherSettings

log = structlog.get_logger()


def build_http_client(settings: FetcherSettings | None = None) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    timeout = settings.timeout_seconds if settings is not None else 30.0
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": "docpilot/1.0"},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


class Fetcher:
    """GET-only page fetcher with per-hop host validation on redirects."""

    def __init__(self, client: httpx.AsyncClient, host: str, *, max_redirects: int = 3) -> None:
        self._client = client
        self._host = host
        self._max_redirects = max_redirects

    async def fetch(self, url: str) -> str:
        """Fetch ``url`` and return the response body text.

        Raises DocPilotError when a hop leaves the documentation host, on
        network errors, and on non-2xx responses.
        """
        current_url = url

        try:
            for hop in range(self._max_redirects + 1):
                if not is_allowed_host(current_url, self._host):
                    log.warning("fetch_blocked", url=current_url, reason="host_not_allowed")
                    raise DocPilotError(
                        code=ErrorCode.URL_NOT_ALLOWED,
                        message=f"URL not allowed: outside {self._host}",
                        suggestion="Only pages on the documentation host can be loaded.",
                    )

                response = await self._client.get(current_url)

                if response.is_redirect and "location" in response.headers:
                    if hop == self._max_redirects:
                        raise DocPilotError(
                            code=ErrorCode.PAGE_FETCH_FAILED,
                            message=f"Too many redirects fetching {url}",
                            suggestion="The page has an unusually long redirect chain.",
                        )
                    current_url = urljoin(current_url, response.headers["location"])
                    continue

                if not response.is_success:
                    if response.status_code == 404:
                        raise DocPilotError(
                            code=ErrorCode.PAGE_NOT_FOUND,
                            message=f"Failed to fetch (404) {url}",
                            suggestion="The page does not exist at this URL.",
                        )
                    raise DocPilotError(
                        code=ErrorCode.PAGE_FETCH_FAILED,
                        message=f"Failed to fetch ({response.status_code}) {url}",
                        suggestion="The documentation site may be temporarily unavailable.",
                        recoverable=True,
                    )

                log.info(
                    "fetch_complete",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.text),
                )
                return response.text

        except DocPilotError:
            raise
        except httpx.HTTPError as exc:
            raise DocPilotError(
                code=ErrorCode.PAGE_FETCH_FAILED,
                message=f"Network error fetching {url}: {exc}",
                suggestion="The documentation site may be temporarily unavailable.",
                recoverable=True,
            ) from exc

        # Unreachable but satisfies the type checker
        raise DocPilotError(
            code=ErrorCode.PAGE_FETCH_FAILED,
            message="Redirect loop",
        )
