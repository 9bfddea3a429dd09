"""
引用表記（IEEE 風の簡易形式）

  A. Author, B. Author, and C. Author, “Title,” Venue, vol. 1, no. 2, pp. 3–4, 2021.

空の要素は出力しない。
"""

from __future__ import annotations

from typing import List

from .common import normalize_ws
from .extractor import UNKNOWN_YEAR
from .models import CanonicalRecord


def venue_segments(record: CanonicalRecord) -> List[str]:
    seg: List[str] = []
    if record.venue:
        seg.append(record.venue)
    if record.volume:
        seg.append(f"vol. {record.volume}")
    if record.issue:
        seg.append(f"no. {record.issue}")
    if record.pages:
        seg.append(f"pp. {record.pages}")
    if record.year and record.year != UNKNOWN_YEAR:
        seg.append(record.year)
    return seg


def format_citation(record: CanonicalRecord) -> str:
    parts: List[str] = []
    if record.author_line:
        parts.append(f"{record.author_line},")
    if record.title:
        parts.append(f"“{record.title},”")
    seg = venue_segments(record)
    if seg:
        parts.append(", ".join(seg) + ".")

    line = normalize_ws(" ".join(parts))
    # 誌名などが無いときは末尾を "." で閉じる
    if line.endswith(","):
        line = line[:-1] + "."
    elif line.endswith(",”"):
        line = line[:-2] + ".”"
    return line
