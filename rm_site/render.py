"""
HTML 生成（Jinja2）

カテゴリごとのページ（publications/<page>.html）と一覧ページ（publications/index.html）を
メモリ上で文字列として組み立てる。ファイルへの書き出しは build.py が行う。
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from jinja2 import Environment, PackageLoader, select_autoescape

from .citation import format_citation
from .models import CATEGORY_INFO, CanonicalRecord, Category
from .numbering import display_order, group_by_year, serial_numbers

INDEX_PAGE = "index.html"
STYLESHEET = "style.css"

_env = Environment(
    loader=PackageLoader("rm_site", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def page_categories() -> List[Category]:
    """ページを持つカテゴリ（未分類は除く）"""
    return [c for c, info in CATEGORY_INFO.items() if info["page"]]


def year_blocks(records: Sequence[CanonicalRecord]) -> List[dict]:
    """テンプレートに渡す年ごとのブロック（新しい年が先、各エントリに通し番号）"""
    serials = serial_numbers(records)
    blocks = []
    for year, items in group_by_year(display_order(records, serials)):
        blocks.append({
            "year": year,
            "entries": [
                {"serial": serials[r.id], "citation": format_citation(r), "url": r.url}
                for r in items
            ],
        })
    return blocks


def render_category_page(
    category: Category,
    records: Sequence[CanonicalRecord],
    *,
    updated_date: str,
    site_title: str,
) -> str:
    info = CATEGORY_INFO[category]
    template = _env.get_template("category_page.html")
    return template.render(
        site_title=site_title,
        label_ja=info["ja"],
        label_en=info["en"],
        updated_date=updated_date,
        total=len(records),
        blocks=year_blocks(records),
        index_page=INDEX_PAGE,
    )


def render_index_page(
    grouped: Mapping[Category, Sequence[CanonicalRecord]],
    *,
    updated_date: str,
    site_title: str,
) -> str:
    rows = []
    for category in page_categories():
        info = CATEGORY_INFO[category]
        rows.append({
            "label_ja": info["ja"],
            "label_en": info["en"],
            "page": info["page"],
            "count": len(grouped.get(category, ())),
        })
    template = _env.get_template("index.html")
    return template.render(site_title=site_title, updated_date=updated_date, rows=rows)


def render_site(
    grouped: Mapping[Category, Sequence[CanonicalRecord]],
    *,
    updated_date: str,
    site_title: str,
) -> Dict[str, str]:
    """
    ファイル名 → HTML（と style.css）。

    0 件のカテゴリも空のページを作る（前回のビルドのページを上書きする）。
    """
    pages: Dict[str, str] = {}
    for category in page_categories():
        records = grouped.get(category, ())
        pages[CATEGORY_INFO[category]["page"]] = render_category_page(
            category, records, updated_date=updated_date, site_title=site_title
        )
    pages[INDEX_PAGE] = render_index_page(grouped, updated_date=updated_date, site_title=site_title)
    pages[STYLESHEET] = _env.loader.get_source(_env, STYLESHEET)[0]
    return pages
