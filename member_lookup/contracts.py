"""Shared versioned contracts for member-lookup JSON outputs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

CONTRACT_VERSIONS = {
    "member_lookup.parse_result": "1.0.0",
    "member_lookup.snapshot": "1.0.0",
    "member_lookup.search_result": "1.0.0",
    "member_lookup.sync_summary": "1.0.0",
}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def build_contract(name: str) -> dict[str, str]:
    version = CONTRACT_VERSIONS[name]
    return {"name": name, "version": version}


def with_contract(name: str, payload: dict[str, Any]) -> dict[str, Any]:
    contract = build_contract(name)
    return {"contract": contract, "schema_version": contract["version"], **payload}


def build_run_summary(
    *,
    tool: str,
    command: str,
    input_ref: str | None,
    status: str = "ok",
    metrics: dict[str, Any] | None = None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "tool": tool,
        "command": command,
        "status": status,
        "generated_at": utc_now_iso(),
        "input": input_ref,
        "warnings_count": len(warnings or []),
        "warnings": list(warnings or []),
        "metrics": metrics or {},
    }
