from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from member_lookup import __version__ as TOOL_VERSION
from member_lookup.cache import SnapshotCache
from member_lookup.config import Settings, load_settings, starter_config
from member_lookup.contracts import build_run_summary, with_contract
from member_lookup.export import EXPORT_FORMATS, export_result
from member_lookup.loader import load_csv_text
from member_lookup.parser import ParseDetails, parse_csv_details
from member_lookup.presentation import render_member_text, sync_caption
from member_lookup.search import search_members
from member_lookup.shared import FIELD_NAMES
from member_lookup.sync import SOURCE_CACHE, SOURCE_NONE, sync_members

TOOL_NAME = "member-lookup"

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_READ_FAILED = 2
EXIT_NO_MATCH = 3
EXIT_SYNC_FROM_CACHE = 4
EXIT_SYNC_NO_DATA = 5


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class MemberLookupArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)


def ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def write_text(path: Path, payload: str) -> None:
    ensure_parent(path)
    path.write_text(payload, encoding="utf-8")


def write_json(path: Path, payload: Any) -> None:
    write_text(path, json_dumps(payload))


def maybe_emit_json_stdout(payload: Any, enabled: bool) -> None:
    if enabled:
        print(json_dumps(payload))


def safe_output_path(path: Path) -> Path:
    if path.exists():
        raise CliError(f"Refusing to overwrite existing output: {path}", EXIT_COMMAND_ERROR)
    return path


def configure_logging(args: argparse.Namespace) -> None:
    level = logging.WARNING
    if getattr(args, "verbose", False):
        level = logging.INFO
    if getattr(args, "quiet", False):
        level = logging.ERROR
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def classify_backend_exception(exc: Exception) -> int:
    if isinstance(exc, CliError):
        return exc.code
    if isinstance(exc, FileNotFoundError):
        return EXIT_COMMAND_ERROR
    if isinstance(exc, (UnicodeDecodeError, IsADirectoryError, PermissionError, ValueError)):
        return EXIT_READ_FAILED
    return EXIT_COMMAND_ERROR


def settings_from_args(args: argparse.Namespace) -> Settings:
    try:
        return load_settings(getattr(args, "config", None))
    except (FileNotFoundError, ValueError) as exc:
        raise CliError(str(exc), EXIT_COMMAND_ERROR) from exc


def read_details(input_path: Path) -> ParseDetails:
    if not input_path.exists():
        raise CliError(f"File not found: {input_path}", EXIT_COMMAND_ERROR)
    return parse_csv_details(load_csv_text(input_path))


def parse_payload(details: ParseDetails, input_path: Path) -> dict[str, Any]:
    result = details.result
    return with_contract(
        "member_lookup.parse_result",
        {
            "tool": TOOL_NAME,
            "tool_version": TOOL_VERSION,
            "input": str(input_path),
            "metadata_date": result.metadata_date,
            "header_row_index": details.header_row_index,
            "header": details.header,
            "column_map": details.column_map,
            "record_count": len(result.records),
            "members": [record.to_dict() for record in result.records],
        },
    )


def render_parse_text(details: ParseDetails, input_path: Path) -> str:
    lines = [
        f"Parsed: {input_path.name}",
        f"Metadata date: {details.result.metadata_date}",
        f"Header row: {details.header_row_index + 1} of {details.line_count} non-blank line(s)",
        f"Member records: {len(details.result.records)}",
        "Column map:",
    ]
    for name in FIELD_NAMES:
        idx = details.column_map.get(name, -1)
        if 0 <= idx < len(details.header):
            lines.append(f"  {name}: column {idx + 1} ({details.header[idx] or 'blank header'})")
        elif idx >= 0:
            lines.append(f"  {name}: column {idx + 1} (past the end of the header row)")
        else:
            lines.append(f"  {name}: not found (defaults used)")
    return "\n".join(lines) + "\n"


def build_parser() -> argparse.ArgumentParser:
    parser = MemberLookupArgumentParser(prog=TOOL_NAME, description="Parse and search member sheet exports.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Parse a member CSV export.")
    parse.add_argument("input", help="Input CSV path")
    parse.add_argument("--output", help="Write the JSON payload to this path")
    parse.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    parse.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    parse.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    search = subparsers.add_parser("search", help="Search members by name or account number.")
    search.add_argument("query", help="Name or account number fragment")
    search.add_argument("--input", help="Search this CSV instead of the cached snapshot")
    search.add_argument("--limit", type=int, default=None, help="Maximum results (default from config)")
    search.add_argument("--config", help="JSON config path")
    search.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    search.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    search.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    sync = subparsers.add_parser("sync", help="Fetch the published sheet and refresh the cached snapshot.")
    sync.add_argument("--url", help="Published sheet URL (overrides config)")
    sync.add_argument("--config", help="JSON config path")
    sync.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    sync.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    sync.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    export = subparsers.add_parser("export", help="Export parsed members to .xlsx or .csv.")
    export.add_argument("input", help="Input CSV path")
    export.add_argument("--output", required=True, help="Output path (.xlsx or .csv)")
    export.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    export.add_argument("-v", "--verbose", action="store_true", help="More human logs")

    config = subparsers.add_parser("config", help="Generate configuration.")
    config_subparsers = config.add_subparsers(dest="config_command", required=True)
    config_init = config_subparsers.add_parser("init", help="Write a starter config file.")
    config_init.add_argument("--path", default="member-lookup.json", help="Config output path")

    subparsers.add_parser("version", help="Print version")
    return parser


def run_parse(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    try:
        details = read_details(input_path)
        payload = parse_payload(details, input_path)
        if args.output:
            output_path = Path(args.output)
            write_json(output_path, payload)
            emit_human(f"Parse result written: {output_path}", quiet=args.quiet)
        if args.json:
            maybe_emit_json_stdout(payload, True)
        else:
            emit_human(render_parse_text(details, input_path).rstrip(), quiet=args.quiet)
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_search(args: argparse.Namespace) -> int:
    try:
        settings = settings_from_args(args)
        limit = args.limit if args.limit is not None else settings.search_limit
        if args.input:
            input_ref = args.input
            result = read_details(Path(args.input)).result
        else:
            cache = SnapshotCache(settings.cache_dir)
            input_ref = str(cache.path_for(settings.cache_key))
            result = cache.load(settings.cache_key)
            if result is None:
                raise CliError(
                    "No cached member data. Run 'member-lookup sync' or pass --input.",
                    EXIT_SYNC_NO_DATA,
                )

        matches = search_members(result.records, args.query, limit=limit)
        if args.json:
            payload = with_contract(
                "member_lookup.search_result",
                {
                    "tool": TOOL_NAME,
                    "query": args.query,
                    "input": input_ref,
                    "metadata_date": result.metadata_date,
                    "searched_records": len(result.records),
                    "match_count": len(matches),
                    "members": [record.to_dict() for record in matches],
                },
            )
            maybe_emit_json_stdout(payload, True)
        else:
            emit_human(f"Searching {len(result.records):,} member records ({sync_caption(result.metadata_date)})", quiet=args.quiet)
            if matches:
                emit_human(f"Found {len(matches)} matching records", quiet=args.quiet)
                print("\n\n".join(render_member_text(record, settings.currency_symbol) for record in matches))
            else:
                emit_human("No matching members", quiet=args.quiet)
        return EXIT_SUCCESS if matches else EXIT_NO_MATCH
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_sync(args: argparse.Namespace) -> int:
    try:
        settings = settings_from_args(args)
        if args.url:
            settings = replace(settings, csv_url=args.url)
        outcome = sync_members(settings)
        warnings = [outcome.error] if outcome.error else []
        status = "ok" if outcome.source not in (SOURCE_CACHE, SOURCE_NONE) else outcome.source
        summary = build_run_summary(
            tool=TOOL_NAME,
            command="sync",
            input_ref=settings.csv_url,
            status=status,
            metrics={
                "source": outcome.source,
                "record_count": len(outcome.result.records),
                "metadata_date": outcome.result.metadata_date,
            },
            warnings=warnings,
        )
        if args.json:
            maybe_emit_json_stdout(with_contract("member_lookup.sync_summary", {"run_summary": summary}), True)
        else:
            if outcome.error:
                emit_human(f"Warning: {outcome.error}", quiet=args.quiet)
            caption = sync_caption(outcome.result.metadata_date if outcome.has_data else None)
            emit_human(f"{caption}: {len(outcome.result.records):,} member records ({outcome.source})", quiet=args.quiet)
        if outcome.source == SOURCE_NONE:
            return EXIT_SYNC_NO_DATA
        if outcome.source == SOURCE_CACHE:
            return EXIT_SYNC_FROM_CACHE
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_export(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    try:
        output_path = Path(args.output)
        if output_path.suffix.lower() not in EXPORT_FORMATS:
            raise CliError(
                f"Unsupported export type '{output_path.suffix or '[missing extension]'}'. "
                f"Supported: {', '.join(sorted(EXPORT_FORMATS))}",
                EXIT_COMMAND_ERROR,
            )
        safe_output_path(output_path)
        details = read_details(input_path)
        export_result(details.result, output_path)
        emit_human(f"Exported {len(details.result.records)} member records: {output_path}", quiet=args.quiet)
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_config_init(args: argparse.Namespace) -> int:
    config_path = Path(args.path)
    if config_path.exists():
        eprint(f"Refusing to overwrite existing config: {config_path}")
        return EXIT_COMMAND_ERROR
    write_text(config_path, starter_config())
    emit_human(f"Config written: {config_path}")
    return EXIT_SUCCESS


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        configure_logging(args)
        if args.command == "parse":
            return run_parse(args)
        if args.command == "search":
            return run_search(args)
        if args.command == "sync":
            return run_sync(args)
        if args.command == "export":
            return run_export(args)
        if args.command == "config":
            if args.config_command == "init":
                return run_config_init(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code


if __name__ == "__main__":
    raise SystemExit(main())
