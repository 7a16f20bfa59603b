from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntry:
    """Extracted page markup held by the content cache."""

    value: str  # Serialised main-content HTML, before markdown conversion
    expires_at: float  # Clock reading after which the entry is treated as absent
