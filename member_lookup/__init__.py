"""member-lookup: tolerant member-sheet CSV parsing and lookup."""

from member_lookup.formatting import format_currency, format_date
from member_lookup.parser import parse_csv_text
from member_lookup.shared import MemberRecord, ParseResult

__version__ = "0.3.0"

__all__ = [
    "MemberRecord",
    "ParseResult",
    "format_currency",
    "format_date",
    "parse_csv_text",
    "__version__",
]
