from __future__ import annotations

import re

from member_lookup.shared import MemberRecord

DEFAULT_SEARCH_LIMIT = 50

_NON_DIGIT_RE = re.compile(r"[^0-9]")


def _matches(record: MemberRecord, query: str, numeric_query: str) -> bool:
    name = record.account_name.lower()
    number = record.account_number.lower()
    if query in name or query in number:
        return True
    return bool(numeric_query) and numeric_query in _NON_DIGIT_RE.sub("", number)


def search_members(
    records: list[MemberRecord],
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[MemberRecord]:
    """Find members by name or account number.

    Digits in the query also match account numbers written with separators,
    so '1001' finds 'ACC-10-01'. A blank query returns nothing.
    """
    query = (query or "").strip().lower()
    if not query or limit <= 0:
        return []
    numeric_query = _NON_DIGIT_RE.sub("", query)
    results: list[MemberRecord] = []
    for record in records:
        if _matches(record, query, numeric_query):
            results.append(record)
            if len(results) >= limit:
                break
    return results
