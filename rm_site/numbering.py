"""
通し番号と表示順

通し番号は古い順に 1 から振る。表示は新しい順（通し番号の降順）。
どちらも並べ替え結果から一度に計算する純粋関数で、走査順には依存しない。
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .extractor import UNKNOWN_YEAR
from .models import CanonicalRecord


def oldest_first(records: Sequence[CanonicalRecord]) -> List[CanonicalRecord]:
    """日付の古い順（同じ日付は入力順）。日付不明は最も古い扱い。"""
    indexed = sorted(enumerate(records), key=lambda pair: (pair[1].date, pair[0]))
    return [r for _, r in indexed]


def serial_numbers(records: Sequence[CanonicalRecord]) -> Dict[str, int]:
    """レコード ID → 通し番号（最古 = 1）"""
    return {r.id: n for n, r in enumerate(oldest_first(records), start=1)}


def display_order(records: Sequence[CanonicalRecord], serials: Dict[str, int]) -> List[CanonicalRecord]:
    """新しい順（通し番号の降順）"""
    return sorted(records, key=lambda r: serials.get(r.id, 0), reverse=True)


def group_by_year(records: Sequence[CanonicalRecord]) -> List[Tuple[str, List[CanonicalRecord]]]:
    """年ごとにまとめる（年の降順、年不明は最後）。各年の中は渡された順を保つ。"""
    groups: Dict[str, List[CanonicalRecord]] = {}
    for r in records:
        groups.setdefault(r.year, []).append(r)

    def year_key(year: str) -> Tuple[int, int]:
        if year == UNKNOWN_YEAR or not year.isdigit():
            return (1, 0)
        return (0, -int(year))

    return [(y, groups[y]) for y in sorted(groups, key=year_key)]
