from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from member_lookup.formatting import DEFAULT_CURRENCY_SYMBOL
from member_lookup.search import DEFAULT_SEARCH_LIMIT

DEFAULT_CACHE_KEY = "member_db_data_cloud"
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "member-lookup"
DEFAULT_REQUEST_TIMEOUT = 60.0

ENV_KEYS = {
    "csv_url": "MEMBER_LOOKUP_CSV_URL",
    "cache_dir": "MEMBER_LOOKUP_CACHE_DIR",
    "cache_key": "MEMBER_LOOKUP_CACHE_KEY",
    "currency_symbol": "MEMBER_LOOKUP_CURRENCY_SYMBOL",
    "search_limit": "MEMBER_LOOKUP_SEARCH_LIMIT",
    "request_timeout": "MEMBER_LOOKUP_TIMEOUT",
}


@dataclass(frozen=True)
class Settings:
    csv_url: str | None = None
    cache_dir: Path = DEFAULT_CACHE_DIR
    cache_key: str = DEFAULT_CACHE_KEY
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    search_limit: int = DEFAULT_SEARCH_LIMIT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["cache_dir"] = str(self.cache_dir)
        return payload


def _coerce(name: str, value: Any) -> Any:
    if name == "cache_dir":
        if not isinstance(value, (str, Path)) or not str(value):
            raise ValueError(f"cache_dir must be a path, got {value!r}")
        return Path(value).expanduser()
    if name == "search_limit":
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"search_limit must be an integer, got {value!r}") from exc
    if name == "request_timeout":
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"request_timeout must be a number, got {value!r}") from exc
    return None if value is None else str(value)


def read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Could not read config {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Config root must be a JSON object.")
    return payload


def load_settings(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from defaults, then a JSON config file, then the environment."""
    env = os.environ if env is None else env
    known = {item.name for item in fields(Settings)}
    overrides: dict[str, Any] = {}

    if path is not None:
        for key, value in read_config_file(Path(path)).items():
            if key in known:
                overrides[key] = _coerce(key, value)

    for key, env_name in ENV_KEYS.items():
        value = env.get(env_name)
        if value:
            overrides[key] = _coerce(key, value)

    return replace(Settings(), **overrides)


def starter_config() -> str:
    payload = {
        "csv_url": "https://docs.google.com/spreadsheets/d/e/<published-id>/pub?output=csv",
        "cache_dir": str(DEFAULT_CACHE_DIR),
        "cache_key": DEFAULT_CACHE_KEY,
        "currency_symbol": DEFAULT_CURRENCY_SYMBOL,
        "search_limit": DEFAULT_SEARCH_LIMIT,
        "request_timeout": DEFAULT_REQUEST_TIMEOUT,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
