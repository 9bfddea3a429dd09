#!/usr/bin/env python3
"""
分類結果の確認用 Excel（review/classification.xlsx）を作る

- 「分類一覧」シート: 全レコードと分類の根拠になったフラグ。未分類の行は黄色
- 「未分類」シート: 未分類のレコードだけ（分類ルールを見直すときの作業用）
"""

from __future__ import annotations

import io
from typing import Any, List, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .common import first_flag, pick_text
from .field_config import (
    INTERNATIONAL_EVENT_FIELDS,
    INTERNATIONAL_JOURNAL_FIELDS,
    INVITED_FIELDS,
    PAPER_KIND,
    PAPER_TYPE_FIELDS,
    PRESENTATION_TYPE_FIELDS,
    REFEREE_FIELDS,
)
from .models import CATEGORY_INFO, CanonicalRecord, Category

# 色の定義
FILL_HEADER = PatternFill(start_color='FFDAE3F3', end_color='FFDAE3F3', fill_type='solid')
FILL_YELLOW = PatternFill(start_color='FFFFFFCC', end_color='FFFFFFCC', fill_type='solid')

FONT_BOLD = Font(bold=True)

# 罫線定義
THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)

# (見出し, 列幅)
COLUMNS: List[Tuple[str, int]] = [
    ('通し番号', 10),
    ('分類', 22),
    ('種別', 18),
    ('年', 8),
    ('題目', 60),
    ('掲載誌・会議名', 40),
    ('掲載種別・発表形態', 28),
    ('査読', 10),
    ('招待', 10),
    ('国際', 10),
    ('ID', 14),
    ('URL', 40),
]

FLAG_LABELS = {True: 'はい', False: 'いいえ', None: '無回答'}


def _type_text(item: Any, kind: str) -> str:
    fields = PAPER_TYPE_FIELDS if kind == PAPER_KIND else PRESENTATION_TYPE_FIELDS
    return pick_text(item, fields)


def review_row(item: Any, record: CanonicalRecord, serial: int | None) -> List[Any]:
    international_fields = INTERNATIONAL_JOURNAL_FIELDS if record.kind == PAPER_KIND else ()
    international = first_flag(item, INTERNATIONAL_EVENT_FIELDS + international_fields)
    return [
        serial,
        CATEGORY_INFO[record.category]['ja'],
        record.kind,
        record.year,
        record.title,
        record.venue,
        _type_text(item, record.kind),
        FLAG_LABELS[first_flag(item, REFEREE_FIELDS)],
        FLAG_LABELS[first_flag(item, INVITED_FIELDS)],
        FLAG_LABELS[international],
        record.id,
        record.url,
    ]


def _write_sheet(ws, rows: Sequence[Tuple[List[Any], bool]]) -> None:
    for col, (header, width) in enumerate(COLUMNS, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = FONT_BOLD
        cell.fill = FILL_HEADER
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal='center', vertical='center')
        ws.column_dimensions[get_column_letter(col)].width = width

    for r, (values, highlight) in enumerate(rows, start=2):
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=r, column=col, value=value)
            cell.border = THIN_BORDER
            if highlight:
                cell.fill = FILL_YELLOW

    ws.freeze_panes = 'A2'


def build_review_workbook(
    pairs: Sequence[Tuple[Any, CanonicalRecord]],
    serials: dict[str, int] | None = None,
) -> Workbook:
    """(元レコード, 正規化レコード) の組から確認用ブックを作る"""
    serials = serials or {}
    rows = []
    for item, record in pairs:
        unclassified = record.category is Category.UNCLASSIFIED
        rows.append((review_row(item, record, serials.get(record.id)), unclassified))

    wb = Workbook()
    ws = wb.active
    ws.title = '分類一覧'
    _write_sheet(ws, rows)

    ws_unclassified = wb.create_sheet('未分類')
    _write_sheet(ws_unclassified, [row for row in rows if row[1]])
    return wb


def workbook_bytes(wb: Workbook) -> bytes:
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
