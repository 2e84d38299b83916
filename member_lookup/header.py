from __future__ import annotations

from member_lookup.shared import HEADER_SCAN_ROWS, NORMALISED_KEYWORDS, normalise_token


def _all_keywords() -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for keywords in NORMALISED_KEYWORDS.values():
        for keyword in keywords:
            if keyword and keyword not in seen:
                seen.add(keyword)
                ordered.append(keyword)
    return tuple(ordered)


HEADER_KEYWORDS = _all_keywords()


def score_header_row(row: list[str]) -> int:
    """Count distinct field keywords that appear inside at least one cell."""
    cells = [normalise_token(cell) for cell in row]
    return sum(1 for keyword in HEADER_KEYWORDS if any(keyword in cell for cell in cells))


def detect_header_row_index(rows: list[list[str]], scan_rows: int = HEADER_SCAN_ROWS) -> int:
    """Return the index of the best-scoring row within the first ``scan_rows``.

    Ties keep the earliest row. With no rows at all the header is row 0.
    """
    header_idx = 0
    best_score = -1
    for idx, row in enumerate(rows[:scan_rows]):
        score = score_header_row(row)
        if score > best_score:
            best_score = score
            header_idx = idx
    return header_idx
