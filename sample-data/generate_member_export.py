#!/usr/bin/env python3
"""
generate_member_export.py

Generates sample-data/member_export.csv: a member sheet as it comes out of
a "Publish to web" CSV link after a few months of hand editing. It has a
BOM, a sync-date row above the real header, renamed headers, quoted commas,
doubled quotes, a whitespace-only line, a short row and mixed line endings.

Run: python sample-data/generate_member_export.py
"""

from pathlib import Path

OUT = Path(__file__).parent / "member_export.csv"

BOM = b"\xef\xbb\xbf"

lines = [
    BOM + b"2024-05-01 Export,,,,,\r\n",
    b"Member Name,Account No.,Next Due Date,Due Amount,BPS,Overdue\r\n",
    b'"Doe, Jane",1001,20240615,"1,500.00",250.00,0.00\r\n',
    b"Juan dela Cruz,ACC-10-02,2024-06-20,800.5,,120.00\n",
    b'"Maria ""Mia"" Santos",1003,June 2024,0,1000,\n',
    b"   \n",
    b"Pedro Reyes,1004\n",
    b",1005,20240701,300,,50\n",
]

OUT.write_bytes(b"".join(lines))
print(f"Wrote {OUT}")
