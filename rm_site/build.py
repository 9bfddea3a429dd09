#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
researchmap API → 業績ページ（静的 HTML）＋ data/counts.json 生成

Usage:
  python -m rm_site.build --permalink read0134502 --out-dir site
  python -m rm_site.build --input-json saved.json --out-dir site   # 取得済み JSON から

Output:
  <out-dir>/publications/*.html     カテゴリごとのページと一覧ページ
  <out-dir>/data/counts.json        件数サマリーと未分類レコード
  <out-dir>/review/classification.xlsx  分類確認用ブック（--no-review-book で省略）

Notes:
- 取得に失敗した場合は何も書き出さずに終了コード 1 で終わる。
- 出力はすべてメモリ上で組み立ててから、ファイルごとに一時ファイル経由で置き換える。
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import httpx

from shared.api_client import ResearchmapAPIError, fetch_researcher_data
from shared.endpoint_config import get_endpoint_ja_label, get_endpoint_list

from .classifier import classify_records
from .config import ConfigError, Settings, load_settings
from .field_config import PAPER_KIND, PRESENTATION_KIND
from .models import CATEGORY_INFO, CanonicalRecord, Category, Counts, UnclassifiedEntry
from .numbering import serial_numbers
from .render import render_site
from .review_book import build_review_workbook, workbook_bytes


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="researchmap の業績から静的ページと counts.json を生成します。")
    p.add_argument("--permalink", help="researchmap のパーマリンク（既定: RM_SITE_PERMALINK）")
    p.add_argument("--out-dir", type=Path, help="出力先ルート（既定: RM_SITE_OUT_DIR または .）")
    p.add_argument("--input-json", type=Path, help="API を呼ばずに取得済み JSON を使う")
    p.add_argument("--no-review-book", action="store_true", help="review/classification.xlsx を作らない")
    return p.parse_args(argv)


# =========================
# Input
# =========================

def unwrap_items(container: Any) -> List[Dict[str, Any]]:
    """list[dict] / {"items": [...]} のどちらでも items を返す。"""
    if isinstance(container, list):
        return [x for x in container if isinstance(x, dict)]
    if isinstance(container, dict) and isinstance(container.get("items"), list):
        return [x for x in container["items"] if isinstance(x, dict)]
    return []


def load_input_json(path: Path) -> Dict[str, List[Dict[str, Any]]]:
    """保存済み JSON（{"published_papers": ..., "presentations": ...}）を読む。"""
    with path.open("r", encoding="utf-8") as f:
        root = json.load(f)
    if isinstance(root, dict) and isinstance(root.get("researchmap_data"), dict):
        root = root["researchmap_data"]
    if not isinstance(root, dict):
        raise ValueError(f"JSON の形式が不正です: {path}")
    return {key: unwrap_items(value) for key, value in root.items() if key in get_endpoint_list()}


async def fetch_data(settings: Settings) -> Dict[str, List[Dict[str, Any]]]:
    permalink = settings.require_permalink()
    print(f"Fetching researchmap data for {permalink}", file=sys.stderr)
    async with httpx.AsyncClient(timeout=60.0) as client:
        return await fetch_researcher_data(client, permalink, api_base=settings.api_base)


# =========================
# Pipeline
# =========================

def build_records(data: Mapping[str, Sequence[Any]], settings: Settings) -> List[Tuple[Any, CanonicalRecord]]:
    """(元レコード, 正規化レコード) のリスト（エンドポイント順・入力順）"""
    pairs: List[Tuple[Any, CanonicalRecord]] = []
    for kind, items in data.items():
        records = classify_records(items, kind, settings.policy, debug_unresolved=settings.debug_unresolved)
        pairs.extend(zip(items, records))
    return pairs


def group_by_category(records: Sequence[CanonicalRecord]) -> Dict[Category, List[CanonicalRecord]]:
    grouped: Dict[Category, List[CanonicalRecord]] = {c: [] for c in Category}
    for r in records:
        grouped[r.category].append(r)
    return grouped


def build_counts(
    permalink: str,
    now: datetime,
    data: Mapping[str, Sequence[Any]],
    grouped: Mapping[Category, Sequence[CanonicalRecord]],
) -> Counts:
    return Counts(
        permalink=permalink,
        updatedAt=now.isoformat(timespec="seconds").replace("+00:00", "Z"),
        papers_total=len(data.get(PAPER_KIND, ())),
        presentations_total=len(data.get(PRESENTATION_KIND, ())),
        counts={c.value: len(grouped.get(c, ())) for c in Category},
        journal=len(grouped.get(Category.JOURNAL, ())),
        int_conf=len(grouped.get(Category.CONFERENCE_INTERNATIONAL, ())),
        book_chapters=len(grouped.get(Category.BOOK_CHAPTER, ())),
        unclassified=[
            UnclassifiedEntry(id=r.id, kind=r.kind, title=r.title, year=r.year)
            for r in grouped.get(Category.UNCLASSIFIED, ())
        ],
    )


def build_outputs(
    data: Mapping[str, Sequence[Any]],
    settings: Settings,
    now: datetime,
    *,
    review_book: bool = True,
) -> Tuple[Dict[Path, bytes], Counts]:
    """書き出すファイル（パス → 内容）と counts を組み立てる。ここではファイルに触れない。"""
    pairs = build_records(data, settings)
    grouped = group_by_category([r for _, r in pairs])

    serials: Dict[str, int] = {}
    for category, records in grouped.items():
        if category is not Category.UNCLASSIFIED:
            serials.update(serial_numbers(records))

    outputs: Dict[Path, bytes] = {}
    pages = render_site(grouped, updated_date=now.date().isoformat(), site_title=settings.site_title)
    for name, html in pages.items():
        outputs[settings.pages_dir / name] = html.encode("utf-8")

    counts = build_counts(settings.permalink, now, data, grouped)
    outputs[settings.counts_path] = (
        json.dumps(counts.model_dump(), ensure_ascii=False, indent=2) + "\n"
    ).encode("utf-8")

    if review_book:
        outputs[settings.review_book_path] = workbook_bytes(build_review_workbook(pairs, serials))

    return outputs, counts


def atomic_write(path: Path, content: bytes) -> None:
    """一時ファイルに書いてから置き換える（途中で失敗しても壊れたファイルを残さない）"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_outputs(outputs: Mapping[Path, bytes]) -> None:
    for path, content in outputs.items():
        atomic_write(path, content)
        print(f"Wrote: {path}", file=sys.stderr)


def report(counts: Counts) -> None:
    """カテゴリ別件数と未分類レコードを stderr に出す"""
    print(f"{get_endpoint_ja_label(PAPER_KIND)}: {counts.papers_total} 件", file=sys.stderr)
    print(f"{get_endpoint_ja_label(PRESENTATION_KIND)}: {counts.presentations_total} 件", file=sys.stderr)
    for category in Category:
        print(f"  {CATEGORY_INFO[category]['en']}: {counts.counts.get(category.value, 0)}", file=sys.stderr)
    if counts.unclassified:
        print(f"Unclassified records ({len(counts.unclassified)}), review and extend the rules:", file=sys.stderr)
        for u in counts.unclassified:
            print(f"  [{u.kind}] {u.id} ({u.year}) {u.title}", file=sys.stderr)


def run(settings: Settings, *, input_json: Path | None = None, review_book: bool = True) -> Counts:
    if input_json is not None:
        data = load_input_json(input_json)
    else:
        data = asyncio.run(fetch_data(settings))

    outputs, counts = build_outputs(data, settings, datetime.now(timezone.utc), review_book=review_book)
    write_outputs(outputs)
    report(counts)
    return counts


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings()
    overrides: Dict[str, Any] = {}
    if args.permalink:
        overrides["permalink"] = args.permalink.strip()
    if args.out_dir:
        overrides["out_dir"] = args.out_dir
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        run(settings, input_json=args.input_json, review_book=not args.no_review_book)
    except (ConfigError, ResearchmapAPIError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
