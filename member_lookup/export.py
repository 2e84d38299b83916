from __future__ import annotations

from pathlib import Path

import openpyxl
import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from member_lookup.shared import FIELD_NAMES, MemberRecord, ParseResult

EXPORT_FORMATS = {".xlsx", ".csv"}


def records_to_frame(records: list[MemberRecord]) -> pd.DataFrame:
    return pd.DataFrame([record.to_dict() for record in records], columns=list(FIELD_NAMES))


def write_csv(records: list[MemberRecord], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    records_to_frame(records).to_csv(output_path, index=False, encoding="utf-8")


def _style_sheet(ws, col_widths: list[int], header_color: str):
    """Apply bold header, color, frozen row, and column widths."""
    fill = PatternFill("solid", fgColor=header_color)
    font = Font(bold=True, color="FFFFFF")
    for cell in ws[1]:
        cell.font = font
        cell.fill = fill
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=False)
    ws.freeze_panes = "A2"
    for i, width in enumerate(col_widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width


def _infer_col_widths(rows: list[list], min_width: int = 10, max_width: int = 60, sample: int = 300) -> list[int]:
    if not rows:
        return []
    widths = [max(min_width, min(max_width, len(str(v)) + 2)) for v in rows[0]]
    for row in rows[1 : sample + 1]:
        for i, val in enumerate(row):
            widths[i] = max(widths[i], min(max_width, len(str(val)) + 2))
    return widths


def write_workbook(result: ParseResult, output_path: Path) -> None:
    wb = openpyxl.Workbook()

    # ── Sheet 1: Members ────────────────────────────────────────────────
    ws1 = wb.active
    ws1.title = "Members"
    headers = list(FIELD_NAMES)
    rows_for_width: list[list] = [headers]
    ws1.append(headers)
    for record in result.records:
        row_out = [getattr(record, name) for name in FIELD_NAMES]
        ws1.append(row_out)
        rows_for_width.append(row_out)
    _style_sheet(ws1, _infer_col_widths(rows_for_width), "3949AB")

    # ── Sheet 2: Sync Info ──────────────────────────────────────────────
    ws2 = wb.create_sheet("Sync Info")
    info_rows = [
        ["key", "value"],
        ["metadata_date", result.metadata_date],
        ["record_count", len(result.records)],
    ]
    for row in info_rows:
        ws2.append(row)
    _style_sheet(ws2, _infer_col_widths(info_rows), "1565C0")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)


def export_result(result: ParseResult, output_path: Path) -> Path:
    suffix = output_path.suffix.lower()
    if suffix not in EXPORT_FORMATS:
        raise ValueError(
            f"Unsupported export type '{suffix or '[missing extension]'}'. "
            f"Supported: {', '.join(sorted(EXPORT_FORMATS))}"
        )
    if suffix == ".csv":
        write_csv(result.records, output_path)
    else:
        write_workbook(result, output_path)
    return output_path
