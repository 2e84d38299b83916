from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path

from member_lookup.contracts import build_contract, utc_now_iso
from member_lookup.shared import NOT_AVAILABLE, MemberRecord, ParseResult

logger = logging.getLogger(__name__)

SNAPSHOT_CONTRACT = "member_lookup.snapshot"

_UNSAFE_KEY_RE = re.compile(r"[^A-Za-z0-9._-]+")


class SnapshotCache:
    """Last good parse result per key, kept as JSON files in one directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        safe_key = _UNSAFE_KEY_RE.sub("_", key).strip("._") or "snapshot"
        return self._directory / f"{safe_key}.json"

    def save(self, key: str, result: ParseResult) -> Path:
        payload = {
            "contract": build_contract(SNAPSHOT_CONTRACT),
            "saved_at": utc_now_iso(),
            "last_sync": result.metadata_date,
            "members": [record.to_dict() for record in result.records],
        }
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("Saved %d member records to %s", len(result.records), path)
        return path

    def load(self, key: str) -> ParseResult | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable snapshot %s: %s", path, exc)
            return None
        if not isinstance(payload, dict) or not isinstance(payload.get("members"), list):
            logger.warning("Ignoring malformed snapshot %s", path)
            return None

        records = [
            MemberRecord.from_dict(entry)
            for entry in payload["members"]
            if isinstance(entry, dict)
        ]
        last_sync = payload.get("last_sync")
        metadata_date = str(last_sync) if last_sync else NOT_AVAILABLE
        return ParseResult(records, metadata_date)
