"""
テスト共通のフィクスチャ

SAMPLE_DATA は researchmap API の取得結果（エンドポイント → items）と同じ形。
想定する分類:
  論文誌 2（p1, p6）/ 国際会議録 1（p2）/ 解説・総説 1（p3）/ 分担執筆 1（p4）/ 未分類 1（p5）
  招待講演 1（t1）/ 国際会議発表 1（t2）/ 国内学会発表 1（t3）
"""

import copy
from datetime import datetime, timezone

import pytest

from rm_site.config import Settings


SAMPLE_DATA = {
    "published_papers": [
        {
            "rm:id": "p1",
            "paper_title": {"en": "Deep Learning for Sound", "ja": "音のための深層学習"},
            "authors": {"en": [{"name": "Smith, John Paul"}, {"name": "Alice Brown"}]},
            "publication_name": {"en": "IEEE Transactions on Audio"},
            "published_paper_type": "scientific_journal",
            "referee": True,
            "publication_date": "2021-03",
            "volume": "12",
            "number": "3",
            "starting_page": "100",
            "ending_page": "110",
            "identifiers": {"doi": ["10.1000/abc"]},
            "languages": ["eng"],
        },
        {
            "rm:id": "p2",
            "paper_title": {"en": "A Study of Room Acoustics"},
            "authors": {"en": [{"name": "Alice Brown"}]},
            "publication_name": {"en": "Proceedings of the International Conference on Acoustics"},
            "published_paper_type": "international_conference_proceedings",
            "referee": True,
            "publication_date": "2022-05-10",
            "languages": ["eng"],
        },
        {
            "rm:id": "p3",
            "paper_title": {"ja": "音響信号処理の最近の動向"},
            "authors": {"ja": [{"name": "山田 太郎"}]},
            "publication_name": {"ja": "日本音響学会誌"},
            "published_paper_type": "scientific_journal",
            "referee": False,
            "invited": True,
            "publication_date": "2020",
            "languages": ["jpn"],
        },
        {
            "rm:id": "p4",
            "paper_title": {"en": "Audio Coding"},
            "publication_name": {"en": "Handbook of Audio"},
            "published_paper_type": "in_book",
            "publication_date": "2019-01-01",
        },
        {
            "rm:id": "p5",
            "paper_title": {"en": "Mystery Item"},
            "published_paper_type": "research_society",
            "referee": False,
        },
        {
            "rm:id": "p6",
            "paper_title": {"en": "Older Journal Paper"},
            "publication_name": {"en": "Journal of Old Results"},
            "published_paper_type": "scientific_journal",
            "referee": True,
            "publication_date": "2018-02",
        },
    ],
    "presentations": [
        {
            "rm:id": "t1",
            "presentation_title": {"en": "Listening Machines"},
            "event": {"en": "ICASSP 2023"},
            "invited": True,
            "is_international_presentation": True,
            "from_event_date": "2023-06-01",
        },
        {
            "rm:id": "t2",
            "presentation_title": {"en": "Reverberation Estimation"},
            "event": {"en": "International Workshop on Acoustic Signal Enhancement"},
            "invited": False,
            "is_international_presentation": True,
            "from_event_date": "2022-09-01",
        },
        {
            "rm:id": "t3",
            "presentation_title": {"ja": "残響推定の検討"},
            "event": {"ja": "日本音響学会 春季研究発表会"},
            "invited": False,
            "is_international_presentation": False,
            "from_event_date": "2021-03-01",
        },
    ],
}

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def sample_data():
    """サンプルの取得結果（テストごとに複製）"""
    return copy.deepcopy(SAMPLE_DATA)


@pytest.fixture
def now():
    """ビルド時刻（固定）"""
    return FIXED_NOW


@pytest.fixture
def settings(tmp_path):
    """出力先を一時ディレクトリにした設定"""
    return Settings(permalink="read0001", out_dir=tmp_path, site_title="Test Lab")
