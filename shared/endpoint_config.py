#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
shared/endpoint_config.py — 取得対象 researchmap エンドポイント設定の共通モジュール

data/researchmap_endpoint_labels.csv に並んだエンドポイントだけを取得・読み込みの対象にする。
CSV が無い・空の場合は DEFAULT_ENDPOINTS（論文と講演）を使う。
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, List


LABELS_CSV = Path(__file__).parent.parent / "data" / "researchmap_endpoint_labels.csv"

DEFAULT_ENDPOINTS: Dict[str, Dict[str, str]] = {
    "published_papers": {"ja": "論文", "en": "Published Papers", "description": ""},
    "presentations": {"ja": "講演・口頭発表等", "en": "Presentations", "description": ""},
}

_labels: Dict[str, Dict[str, str]] | None = None


def _read_labels_csv(csv_path: Path) -> Dict[str, Dict[str, str]]:
    if not csv_path.exists():
        return {}
    labels: Dict[str, Dict[str, str]] = {}
    with csv_path.open("r", encoding="utf-8-sig", newline="") as f:
        for row in csv.DictReader(f):
            name = (row.get("endpoint") or "").strip()
            if not name:
                continue
            labels[name] = {col: (row.get(col) or "").strip() for col in ("ja", "en", "description")}
    return labels


def load_endpoint_labels(path: Path | None = None) -> Dict[str, Dict[str, str]]:
    """
    エンドポイント名 → {"ja", "en", "description"}（CSV の記載順）

    path を省略した場合は同梱の CSV を 1 度だけ読んで使い回す。
    """
    global _labels
    if path is not None:
        return _read_labels_csv(path) or dict(DEFAULT_ENDPOINTS)
    if _labels is None:
        _labels = _read_labels_csv(LABELS_CSV) or dict(DEFAULT_ENDPOINTS)
    return _labels


def get_endpoint_list(path: Path | None = None) -> List[str]:
    """取得対象のエンドポイント名"""
    return list(load_endpoint_labels(path))


def get_endpoint_ja_label(endpoint: str) -> str:
    """ログ表示用の日本語ラベル（未登録ならエンドポイント名のまま）"""
    info = load_endpoint_labels().get(endpoint)
    return info["ja"] if info and info["ja"] else endpoint
