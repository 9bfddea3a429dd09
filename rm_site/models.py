"""
Pydanticモデル定義
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Category(str, Enum):
    """業績の出力カテゴリ"""
    JOURNAL = "journal"
    CONFERENCE_INTERNATIONAL = "conference_international"
    CONFERENCE_OTHER = "conference_other"
    BOOK_CHAPTER = "book_chapter"
    REVIEW_ARTICLE = "review_article"
    PRESENTATION_INVITED = "presentation_invited"
    PRESENTATION_INTERNATIONAL = "presentation_international"
    PRESENTATION_DOMESTIC = "presentation_domestic"
    UNCLASSIFIED = "unclassified"


# カテゴリの表示ラベル・出力ページ（ページ順）
CATEGORY_INFO = {
    Category.JOURNAL: {"ja": "論文誌", "en": "Journal Papers", "page": "journal-papers.html"},
    Category.CONFERENCE_INTERNATIONAL: {
        "ja": "国際会議録", "en": "International Conference Proceedings", "page": "international-conferences.html",
    },
    Category.CONFERENCE_OTHER: {"ja": "その他の会議録", "en": "Other Conference Papers", "page": "other-conferences.html"},
    Category.BOOK_CHAPTER: {"ja": "分担執筆", "en": "Book Chapters", "page": "book-chapters.html"},
    Category.REVIEW_ARTICLE: {"ja": "解説・総説", "en": "Review Articles", "page": "review-articles.html"},
    Category.PRESENTATION_INVITED: {"ja": "招待講演", "en": "Invited Talks", "page": "invited-talks.html"},
    Category.PRESENTATION_INTERNATIONAL: {
        "ja": "国際会議発表", "en": "International Presentations", "page": "presentations-international.html",
    },
    Category.PRESENTATION_DOMESTIC: {
        "ja": "国内学会発表", "en": "Domestic Presentations", "page": "presentations-domestic.html",
    },
    Category.UNCLASSIFIED: {"ja": "未分類", "en": "Unclassified", "page": None},
}


class CanonicalRecord(BaseModel):
    """正規化済みの業績レコード（1 回のビルドの中だけで使う）"""
    model_config = ConfigDict(frozen=True)

    id: str
    kind: str
    authors: tuple[str, ...] = ()
    author_line: str = ""
    title: str = ""
    venue: str = ""
    year: str
    date: str = ""
    volume: str = ""
    issue: str = ""
    pages: str = ""
    url: str = ""
    category: Category = Category.UNCLASSIFIED


class ClassifierPolicy(BaseModel):
    """分類ルールのうち、版ごとに揺れていた判断を切り替えるための設定"""
    model_config = ConfigDict(frozen=True)

    book_chapter_types: tuple[str, ...] = ("in_book",)
    # True にすると掲載種別が journal を示すときは誌名・題目の会議パターンを見ない
    trust_explicit_journal_type: bool = False
    # 総説判定に「査読無し」の明示を要求する（False なら査読不明 + 招待でも総説）
    review_requires_explicit_non_refereed: bool = True
    # 国際フラグが不明なとき、誌名・題目の "international" / "国際" で国際扱いにする
    international_text_fallback: bool = True
    invited_type_keywords: tuple[str, ...] = ("invited", "keynote")
    invited_text_keywords: tuple[str, ...] = ("招待", "基調講演", "invited talk", "keynote")


class UnclassifiedEntry(BaseModel):
    """手作業で確認するための未分類レコード"""
    id: str
    kind: str
    title: str
    year: str


class Counts(BaseModel):
    """data/counts.json の内容"""
    permalink: str
    updatedAt: str
    papers_total: int
    presentations_total: int
    counts: dict[str, int]
    journal: int
    int_conf: int
    book_chapters: int
    unclassified: list[UnclassifiedEntry]
    source: Optional[str] = None
