"""
loader.py: turn exported sheet bytes into text for the parser

Public API:
    text = load_csv_text("path/to/export.csv")
    text = decode_csv_bytes(raw_bytes)
    info = detect_encoding_info(raw_bytes)
"""

from __future__ import annotations

from pathlib import Path

import chardet


# ══════════════════════════════════════════════════════════════════════════════
# ENCODING DETECTION
# ══════════════════════════════════════════════════════════════════════════════

def detect_encoding_info(raw: bytes) -> dict:
    """
    Detect encoding from raw bytes.

    Returns dict with: detected, confidence, is_utf8, suspicious_lines.
    """
    result = chardet.detect(raw)
    detected = result.get("encoding") or "unknown"
    confidence = round(result.get("confidence") or 0.0, 2)
    is_utf8 = detected.upper().replace("-", "").replace("_", "") in ("UTF8", "UTF8SIG", "ASCII")

    suspicious: list[int] = []
    if not is_utf8:
        for row_idx, line in enumerate(raw.split(b"\n")[:100], start=1):
            try:
                line.decode("utf-8")
            except UnicodeDecodeError:
                suspicious.append(row_idx)

    return {
        "detected": detected,
        "confidence": confidence,
        "is_utf8": is_utf8,
        "suspicious_lines": suspicious[:10],
    }


# ══════════════════════════════════════════════════════════════════════════════
# SAFE TEXT READING (mixed-encoding tolerant)
# ══════════════════════════════════════════════════════════════════════════════

def decode_csv_bytes(raw: bytes, preferred_encoding: str | None = None) -> str:
    """
    Decode raw bytes line-by-line.

    Strategy per line:
      1. Try UTF-8
      2. Try preferred_encoding (chardet result when not given)
      3. Try latin-1
      4. CP1252 with replace (never crashes)

    Null bytes are dropped. A UTF-8 BOM survives as U+FEFF for the parser
    to strip.
    """
    if not raw:
        return ""
    if preferred_encoding is None:
        preferred_encoding = detect_encoding_info(raw)["detected"]

    decoded_lines: list[str] = []
    for raw_line in raw.split(b"\n"):
        decoded: str | None = None
        for enc in ("utf-8", preferred_encoding, "latin-1"):
            if not enc or enc == "unknown":
                continue
            try:
                decoded = raw_line.decode(enc)
                break
            except (LookupError, UnicodeDecodeError):
                continue
        if decoded is None:
            decoded = raw_line.decode("cp1252", errors="replace")
        decoded_lines.append(decoded.replace("\x00", ""))
    return "\n".join(decoded_lines)


def load_csv_text(path: str | Path) -> str:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.is_dir():
        raise ValueError(f"Expected a CSV file, got a directory: {path}")
    return decode_csv_bytes(path.read_bytes())
