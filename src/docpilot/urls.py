"""URL canonicalisation and host checks.

The normalised form is the only key used by the documentation index and the
content cache, so two URLs that differ only by scheme, host case, trailing
slash, query string or fragment must normalise to the same string.

Hostnames may contain underscores; internationalised hostnames are stored in
their IDNA (punycode) form.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_HOSTNAME_RE = re.compile(
    r"^[a-z0-9_]([a-z0-9_-]*[a-z0-9_])?(\.[a-z0-9_]([a-z0-9_-]*[a-z0-9_])?)*\.?$"
)


def normalize_url(raw: object) -> str | None:
    """Return the canonical form of ``raw``, or None if it cannot be parsed.

    Steps:
      1. Require an http(s) scheme and a valid hostname
      2. Force the scheme to https and lowercase the host
      3. Drop query string and fragment
      4. Strip trailing slashes unless the path is exactly ``/``
    """
    if not isinstance(raw, str):
        return None

    try:
        parts = urlsplit(raw.strip())
        port = parts.port
    except ValueError:
        return None

    if parts.scheme.lower() not in ("http", "https"):
        return None

    try:
        hostname = (parts.hostname or "").encode("idna").decode("ascii")
    except UnicodeError:
        return None
    if not _HOSTNAME_RE.match(hostname):
        return None

    netloc = hostname
    if port is not None and port != 443:
        netloc = f"{hostname}:{port}"

    path = parts.path
    if any(ch.isspace() for ch in path):
        return None
    if path != "/":
        path = path.rstrip("/") or "/"

    return f"https://{netloc}{path}"


def is_allowed_host(url: str, host: str) -> bool:
    """Check whether ``url`` points at the single permitted documentation host."""
    try:
        hostname = urlsplit(url).hostname or ""
    except ValueError:
        return False
    return hostname == host.lower()
