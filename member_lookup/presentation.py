from __future__ import annotations

from typing import Any

from member_lookup.formatting import DEFAULT_CURRENCY_SYMBOL, OVERDUE, format_currency, format_date, overdue_status
from member_lookup.shared import MemberRecord

FIELD_LABELS = {
    "account_name": "Account Name",
    "account_number": "Acc No.",
    "next_due_date": "Next Due Date",
    "next_due_amount": "Next Due Amount",
    "bps": "Brochure Sales (BPS)",
    "overdue_amount": "Overdue Amount",
}


def member_card(record: MemberRecord, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> dict[str, Any]:
    status = overdue_status(record.overdue_amount)
    return {
        "account_name": record.account_name,
        "account_number": record.account_number,
        "next_due_date": format_date(record.next_due_date),
        "next_due_amount": format_currency(record.next_due_amount, currency_symbol),
        "bps": format_currency(record.bps, currency_symbol),
        "overdue_amount": format_currency(record.overdue_amount, currency_symbol),
        "status": status,
        "is_overdue": status == OVERDUE,
    }


def render_member_text(record: MemberRecord, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    card = member_card(record, currency_symbol)
    lines = [
        f"{card['account_name']}  [{card['status']}]",
        f"  {FIELD_LABELS['account_number']}: {card['account_number']}",
    ]
    for name in ("next_due_date", "next_due_amount", "bps", "overdue_amount"):
        lines.append(f"  {FIELD_LABELS[name]}: {card[name]}")
    return "\n".join(lines)


def sync_caption(metadata_date: str | None, *, loading: bool = False) -> str:
    if metadata_date:
        return f"Last Update: {metadata_date}"
    if loading:
        return "Syncing with Google Sheets..."
    return "Database disconnected"
