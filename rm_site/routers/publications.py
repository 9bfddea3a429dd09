"""
生成済み業績データの参照APIエンドポイント
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..config import Settings, get_settings
from ..models import CATEGORY_INFO, Category, Counts, UnclassifiedEntry

router = APIRouter()


def read_counts(settings: Settings) -> Counts:
    path = settings.counts_path
    if not path.exists():
        raise HTTPException(
            status_code=404,
            detail="counts.json がまだ生成されていません（python -m rm_site.build を実行してください）",
        )
    return Counts.model_validate_json(path.read_text(encoding="utf-8"))


@router.get("/counts", response_model=Counts)
async def get_counts(settings: Settings = Depends(get_settings)):
    """
    件数サマリー（data/counts.json）を取得
    """
    return read_counts(settings)


@router.get("/unclassified", response_model=List[UnclassifiedEntry])
async def get_unclassified(settings: Settings = Depends(get_settings)):
    """
    未分類レコードの一覧を取得（分類ルールの見直し用）
    """
    return read_counts(settings).unclassified


@router.get("/categories")
async def get_categories(settings: Settings = Depends(get_settings)):
    """
    カテゴリ一覧と件数を取得

    Returns:
        [{"category": "journal", "ja": "論文誌", "en": "Journal Papers",
          "page": "journal-papers.html", "count": 12}, ...]
    """
    counts = read_counts(settings).counts
    return [
        {
            "category": c.value,
            "ja": CATEGORY_INFO[c]["ja"],
            "en": CATEGORY_INFO[c]["en"],
            "page": CATEGORY_INFO[c]["page"],
            "count": counts.get(c.value, 0),
        }
        for c in Category
    ]
