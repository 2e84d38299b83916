from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

from member_lookup.shared import NOT_AVAILABLE

DEFAULT_CURRENCY_SYMBOL = "₱"

_AMOUNT_NOISE_RE = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER_RE = re.compile(r"^-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_CENTS = Decimal("0.01")

OVERDUE = "OVERDUE"
CURRENT = "CURRENT"


def read_amount(raw: str | float | int | None) -> float | None:
    """Read a loosely formatted amount such as '₱1,234.50' or '(12) PHP'.

    Everything except digits, '.' and '-' is dropped and the leading number
    is read, so '1.2.3' reads as 1.2. Returns None when nothing numeric leads.
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        value = float(raw)
        return None if math.isnan(value) else value
    cleaned = _AMOUNT_NOISE_RE.sub("", str(raw))
    match = _LEADING_NUMBER_RE.match(cleaned)
    if not match:
        return None
    return float(match.group(0))


def format_currency(raw: str | float | int | None, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Render an amount with two decimals, comma thousands and a period decimal.

    The grouping is fixed to the en-PH convention rather than read from the
    process locale. Unreadable amounts render as zero.
    """
    value = read_amount(raw)
    if value is None:
        value = 0.0
    if math.isinf(value):
        return f"{symbol}{'-' if value < 0 else ''}∞"
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(str(int(abs(value)))) + 3)
        amount = Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    if amount == 0:
        amount = Decimal("0.00")
    return f"{symbol}{amount:,.2f}"


def format_date(raw: str | None) -> str:
    """Render an eight-digit YYYYMMDD value as MM/DD/YYYY.

    Separators are ignored ('2024-06-15' works too). Blank input and 'N/A'
    become 'N/A'; any other shape is returned untouched.
    """
    if not raw or raw == NOT_AVAILABLE or not raw.strip():
        return NOT_AVAILABLE
    digits = _NON_DIGIT_RE.sub("", raw)
    if len(digits) == 8:
        return f"{digits[4:6]}/{digits[6:8]}/{digits[0:4]}"
    return raw


def overdue_status(raw: str | float | int | None) -> str:
    value = read_amount(raw)
    if value is not None and value > 0:
        return OVERDUE
    return CURRENT
