from __future__ import annotations

import re

from member_lookup.shared import BOM

_LINE_BREAK_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    """Split raw export text into its non-blank physical lines.

    A single leading byte-order mark is removed first. Blank and
    whitespace-only lines are dropped before any cell parsing happens.
    """
    if text.startswith(BOM):
        text = text[len(BOM):]
    return [line for line in _LINE_BREAK_RE.split(text) if line.strip()]


def split_row(line: str) -> list[str]:
    """Split one physical line into trimmed cells.

    Commas inside double quotes stay in the cell and a doubled quote inside a
    quoted section is a literal quote. An unterminated quote keeps the rest
    of the line in the current cell; nothing carries over to the next line.
    """
    cells: list[str] = []
    buffer: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"' and in_quotes and line[i + 1:i + 2] == '"':
            buffer.append('"')
            i += 2
            continue
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            cells.append("".join(buffer).strip())
            buffer = []
        else:
            buffer.append(char)
        i += 1
    cells.append("".join(buffer).strip())
    return cells
