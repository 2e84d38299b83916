from __future__ import annotations

from member_lookup.shared import ABSENT, FIELD_NAMES, NORMALISED_KEYWORDS, POSITIONAL_FALLBACKS, normalise_token


def find_column_index(headers: list[str], keywords: tuple[str, ...]) -> int:
    """Locate a column for one field in already-normalised header cells.

    An exact keyword match anywhere in the header wins over a substring
    match; within each pass the leftmost column is returned.
    """
    for idx, header in enumerate(headers):
        if any(header == keyword for keyword in keywords):
            return idx
    for idx, header in enumerate(headers):
        if any(keyword in header for keyword in keywords):
            return idx
    return ABSENT


def map_columns(header_row: list[str]) -> dict[str, int]:
    headers = [normalise_token(cell) for cell in header_row]
    column_map: dict[str, int] = {}
    for name in FIELD_NAMES:
        idx = find_column_index(headers, NORMALISED_KEYWORDS[name])
        if idx == ABSENT:
            idx = POSITIONAL_FALLBACKS.get(name, ABSENT)
        column_map[name] = idx
    return column_map
