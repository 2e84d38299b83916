from __future__ import annotations

import re
from dataclasses import dataclass, field

FIELD_NAMES = (
    "account_name",
    "account_number",
    "next_due_date",
    "next_due_amount",
    "bps",
    "overdue_amount",
)

# Order matters: exact matches are tried per field in this order, and the
# header locator scores rows against the combined list.
FIELD_KEYWORDS: dict[str, tuple[str, ...]] = {
    "account_name": ("accountname", "membername", "customername", "name", "client", "fullname", "member", "subscriber"),
    "account_number": ("accountnumber", "accountno", "accnum", "id", "memberid", "acc#", "account#", "member#", "ref"),
    "next_due_date": ("nextduedate", "duedate", "nextdue", "billingdate", "expiry", "due"),
    "next_due_amount": ("nextdueamount", "dueamount", "amountdue", "balance", "totaldue", "payable"),
    "bps": ("bps", "brochuresales", "sales", "salesvolume", "volume", "commission"),
    "overdue_amount": ("overdueamount", "overdue", "pastdue", "arrears", "delinquent", "latefee"),
}

NOT_AVAILABLE = "N/A"
ZERO_AMOUNT = "0.00"

FIELD_DEFAULTS = {
    "account_name": NOT_AVAILABLE,
    "account_number": NOT_AVAILABLE,
    "next_due_date": NOT_AVAILABLE,
    "next_due_amount": ZERO_AMOUNT,
    "bps": ZERO_AMOUNT,
    "overdue_amount": ZERO_AMOUNT,
}

# Only name and number fall back to fixed columns when no header matches.
POSITIONAL_FALLBACKS = {
    "account_name": 0,
    "account_number": 1,
}

ABSENT = -1
HEADER_SCAN_ROWS = 10
BOM = "\ufeff"

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalise_token(value: str) -> str:
    """Lowercase and drop everything outside a-z0-9.

    Shared by header cells and keywords so both sides compare the same way.
    """
    return _NON_ALNUM_RE.sub("", value.lower())


NORMALISED_KEYWORDS: dict[str, tuple[str, ...]] = {
    name: tuple(normalise_token(keyword) for keyword in keywords)
    for name, keywords in FIELD_KEYWORDS.items()
}


@dataclass(frozen=True)
class MemberRecord:
    account_name: str = NOT_AVAILABLE
    account_number: str = NOT_AVAILABLE
    next_due_date: str = NOT_AVAILABLE
    next_due_amount: str = ZERO_AMOUNT
    bps: str = ZERO_AMOUNT
    overdue_amount: str = ZERO_AMOUNT

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in FIELD_NAMES}

    @classmethod
    def from_dict(cls, payload: dict) -> "MemberRecord":
        values = {}
        for name in FIELD_NAMES:
            value = payload.get(name)
            values[name] = str(value) if value not in (None, "") else FIELD_DEFAULTS[name]
        return cls(**values)


@dataclass(frozen=True)
class ParseResult:
    records: list[MemberRecord] = field(default_factory=list)
    metadata_date: str = NOT_AVAILABLE

    def to_dict(self) -> dict:
        return {
            "metadata_date": self.metadata_date,
            "record_count": len(self.records),
            "members": [record.to_dict() for record in self.records],
        }
