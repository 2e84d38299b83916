from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import requests

from member_lookup.cache import SnapshotCache
from member_lookup.config import Settings
from member_lookup.parser import parse_csv_text
from member_lookup.remote import fetch_csv_text
from member_lookup.shared import ParseResult

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_CACHE = "cache"
SOURCE_NONE = "none"


@dataclass(frozen=True)
class SyncOutcome:
    result: ParseResult
    source: str
    error: str | None = None

    @property
    def has_data(self) -> bool:
        return self.source != SOURCE_NONE


def sync_members(
    settings: Settings,
    *,
    fetch: Callable[..., str] = fetch_csv_text,
    cache: SnapshotCache | None = None,
) -> SyncOutcome:
    """Fetch the published sheet, keeping the last good snapshot as fallback.

    A fresh result replaces the snapshot only when it holds at least one
    record. Fetch failures and empty sheets fall back to the snapshot.
    """
    cache = cache if cache is not None else SnapshotCache(settings.cache_dir)
    error: str | None = None

    if not settings.csv_url:
        error = "No sheet URL configured (set csv_url or MEMBER_LOOKUP_CSV_URL)."
    else:
        try:
            text = fetch(settings.csv_url, timeout=settings.request_timeout)
        except (requests.RequestException, ValueError) as exc:
            error = f"Failed to fetch sheet data: {exc}"
        else:
            result = parse_csv_text(text)
            if result.records:
                try:
                    cache.save(settings.cache_key, result)
                except OSError as exc:
                    logger.warning("Could not save member snapshot: %s", exc)
                return SyncOutcome(result, SOURCE_REMOTE)
            error = "Sheet returned no member records."

    logger.warning("%s Falling back to cached snapshot.", error)
    cached = cache.load(settings.cache_key)
    if cached is not None:
        return SyncOutcome(cached, SOURCE_CACHE, error)
    return SyncOutcome(ParseResult(), SOURCE_NONE, error)
