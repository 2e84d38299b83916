"""
Tolerant member-sheet parser.

Public API:
    result = parse_csv_text(text)
    result.records       : list[MemberRecord], in data-row order
    result.metadata_date : first cell of the first non-blank line, or "N/A"

The parser never raises for text input. Header names, the header row
position, column order and quoting may all drift between exports; missing
values resolve to the defaults in ``member_lookup.shared.FIELD_DEFAULTS``.
"""

from __future__ import annotations

from dataclasses import dataclass

from member_lookup.header import detect_header_row_index
from member_lookup.mapper import map_columns
from member_lookup.shared import FIELD_DEFAULTS, FIELD_NAMES, NOT_AVAILABLE, MemberRecord, ParseResult
from member_lookup.tokenizer import split_lines, split_row


@dataclass(frozen=True)
class ParseDetails:
    result: ParseResult
    header_row_index: int
    header: list[str]
    column_map: dict[str, int]
    line_count: int


def _cell(values: list[str], idx: int) -> str:
    if 0 <= idx < len(values):
        return values[idx]
    return ""


def build_record(values: list[str], column_map: dict[str, int]) -> MemberRecord:
    fields = {
        name: _cell(values, column_map.get(name, -1)) or FIELD_DEFAULTS[name]
        for name in FIELD_NAMES
    }
    return MemberRecord(**fields)


def build_records(data_rows: list[list[str]], column_map: dict[str, int]) -> list[MemberRecord]:
    return [build_record(values, column_map) for values in data_rows]


def parse_csv_details(text: str) -> ParseDetails:
    """Parse and also report which header row and column map were used."""
    lines = split_lines(text)
    if not lines:
        return ParseDetails(ParseResult([], NOT_AVAILABLE), 0, [], {}, 0)

    rows = [split_row(line) for line in lines]
    metadata_date = rows[0][0] or NOT_AVAILABLE

    header_idx = detect_header_row_index(rows)
    column_map = map_columns(rows[header_idx])
    records = build_records(rows[header_idx + 1:], column_map)
    return ParseDetails(
        result=ParseResult(records, metadata_date),
        header_row_index=header_idx,
        header=rows[header_idx],
        column_map=column_map,
        line_count=len(lines),
    )


def parse_csv_text(text: str) -> ParseResult:
    return parse_csv_details(text).result
