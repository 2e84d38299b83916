from __future__ import annotations

import re
import time
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

import requests

from member_lookup.loader import decode_csv_bytes

MAX_REMOTE_FILE_MB = 100
MAX_REMOTE_FILE_BYTES = MAX_REMOTE_FILE_MB * 1024 * 1024
CACHE_BUST_PARAM = "cache_bust"


def normalize_sheet_url(raw_url: str) -> str:
    """Point Google Sheets share/edit/published links at their CSV export."""
    parsed = urlparse(raw_url.strip())
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("URL must start with http:// or https://")

    host = parsed.netloc.lower()
    path = parsed.path
    query = parse_qs(parsed.query, keep_blank_values=True)

    if host == "docs.google.com" and "/spreadsheets/" in path:
        trimmed = path.rstrip("/")
        if trimmed.endswith("/pub") or trimmed.endswith("/pubhtml"):
            query["output"] = ["csv"]
            published = trimmed[: trimmed.rfind("/")] + "/pub"
            return urlunparse(parsed._replace(path=published, query=urlencode(query, doseq=True)))
        sheet_match = re.search(r"/spreadsheets/d/([^/]+)", path)
        if sheet_match and sheet_match.group(1) != "e":
            gid = query.get("gid", ["0"])[0]
            if parsed.fragment.startswith("gid="):
                gid = parsed.fragment.split("=", 1)[1] or gid
            return (
                f"https://docs.google.com/spreadsheets/d/{sheet_match.group(1)}"
                f"/export?format=csv&gid={gid}"
            )

    return raw_url.strip()


def with_cache_bust(url: str, now: float | None = None) -> str:
    stamp = int((time.time() if now is None else now) * 1000)
    parsed = urlparse(url)
    query = parse_qs(parsed.query, keep_blank_values=True)
    query[CACHE_BUST_PARAM] = [str(stamp)]
    return urlunparse(parsed._replace(query=urlencode(query, doseq=True)))


def fetch_csv_bytes(
    raw_url: str,
    *,
    timeout: float = 60.0,
    session: requests.Session | None = None,
    now: float | None = None,
) -> bytes:
    url = with_cache_bust(normalize_sheet_url(raw_url), now=now)
    getter = session.get if session is not None else requests.get
    response = getter(url, timeout=timeout, allow_redirects=True, stream=True)
    try:
        response.raise_for_status()
        content_length = response.headers.get("Content-Length")
        if content_length:
            try:
                declared_size = int(content_length)
            except ValueError:
                declared_size = None
            if declared_size and declared_size > MAX_REMOTE_FILE_BYTES:
                raise ValueError(f"Remote file is larger than {MAX_REMOTE_FILE_MB} MB.")

        chunks: list[bytes] = []
        downloaded = 0
        for chunk in response.iter_content(chunk_size=1024 * 1024):
            if not chunk:
                continue
            downloaded += len(chunk)
            if downloaded > MAX_REMOTE_FILE_BYTES:
                raise ValueError(f"Remote file is larger than {MAX_REMOTE_FILE_MB} MB.")
            chunks.append(chunk)
        return b"".join(chunks)
    finally:
        response.close()


def fetch_csv_text(
    raw_url: str,
    *,
    timeout: float = 60.0,
    session: requests.Session | None = None,
    now: float | None = None,
) -> str:
    return decode_csv_bytes(fetch_csv_bytes(raw_url, timeout=timeout, session=session, now=now))
