#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
classifier.py — 業績レコードを出力カテゴリに振り分ける

論文（published_papers）は上から順に判定し、最初に当たった規則で決まる:
  1. 掲載種別が in_book → 分担執筆
  2. 掲載種別・誌名・題目が会議録パターンに当たる → 論文誌からは除外（掲載種別が journal でも同じ）
  3. 査読無し かつ 招待 → 解説・総説（論文誌・会議録より優先）
  4. 掲載種別が journal / 査読有り / 国際誌 / （査読が不明なら）誌名あり → 論文誌
  5. 会議録パターンに当たり国際と確認できる → 国際会議録、確認できない → その他の会議録
  6. どれにも当たらない → 未分類（手作業で確認する）

講演（presentations）は 招待講演 → 国際 / 国内 の順に分ける。

欠落フィールドで例外は出さない。判定できないものは Category.UNCLASSIFIED。
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping, Sequence

from .common import first_flag, pick_text, uniq_preserve
from .extractor import EN_FIRST, JA_FIRST, extract_record
from .field_config import (
    CONFERENCE_PATTERNS,
    FREE_TEXT_FIELDS,
    INTERNATIONAL_EVENT_FIELDS,
    INTERNATIONAL_JOURNAL_FIELDS,
    INTERNATIONAL_PATTERNS,
    INVITED_FIELDS,
    PAPER_KIND,
    PAPER_TYPE_FIELDS,
    PRESENTATION_KIND,
    PRESENTATION_TYPE_FIELDS,
    REFEREE_FIELDS,
    TITLE_FIELDS,
    VENUE_FIELDS,
)
from .models import CanonicalRecord, Category, ClassifierPolicy


DEFAULT_POLICY = ClassifierPolicy()

_CONFERENCE_RE = re.compile("|".join(re.escape(p) for p in CONFERENCE_PATTERNS), re.IGNORECASE)
_INTERNATIONAL_RE = re.compile("|".join(re.escape(p) for p in INTERNATIONAL_PATTERNS), re.IGNORECASE)


def _texts(item: Any, fields: Sequence[Any]) -> List[str]:
    """日英どちらの表記でもパターンを拾えるよう、両方の言語で解決した値を返す。"""
    return uniq_preserve(t for t in (pick_text(item, fields, JA_FIRST), pick_text(item, fields, EN_FIRST)) if t)


def _matches(pattern: re.Pattern, texts: Iterable[str]) -> bool:
    return any(pattern.search(t) for t in texts)


def is_conference_text(*texts: str) -> bool:
    return _matches(_CONFERENCE_RE, texts)


def is_international(item: Any, type_text: str, venues: Sequence[str], policy: ClassifierPolicy) -> bool:
    """
    国際会議かどうか。
    国際フラグ True → 国際、種別に international → 国際、国際フラグ False → 国内、
    フラグ不明なら（policy が許せば）誌名・会議名の international / 国際 で判断する。
    題目は見ない。
    """
    flag = first_flag(item, INTERNATIONAL_EVENT_FIELDS)
    if flag is True:
        return True
    if _INTERNATIONAL_RE.search(type_text):
        return True
    if flag is False:
        return False
    return policy.international_text_fallback and _matches(_INTERNATIONAL_RE, venues)


# =========================
# Published papers
# =========================

def classify_paper(item: Any, policy: ClassifierPolicy = DEFAULT_POLICY) -> Category:
    type_text = pick_text(item, PAPER_TYPE_FIELDS).lower()

    # 1. 分担執筆（他の値に関係なく確定）
    if any(t in type_text for t in policy.book_chapter_types):
        return Category.BOOK_CHAPTER

    # 2. 会議録パターン
    venues = _texts(item, VENUE_FIELDS)
    texts = venues + _texts(item, TITLE_FIELDS)
    type_says_journal = "journal" in type_text
    if is_conference_text(type_text):
        conference = True
    elif policy.trust_explicit_journal_type and type_says_journal:
        conference = False
    else:
        conference = is_conference_text(*texts)

    # 3. 解説・総説
    referee = first_flag(item, REFEREE_FIELDS)
    invited = first_flag(item, INVITED_FIELDS)
    if policy.review_requires_explicit_non_refereed:
        non_refereed = referee is False
    else:
        non_refereed = referee is not True
    if invited is True and non_refereed:
        return Category.REVIEW_ARTICLE

    # 4. 論文誌
    if not conference:
        if type_says_journal:
            return Category.JOURNAL
        if referee is True or first_flag(item, INTERNATIONAL_JOURNAL_FIELDS) is True:
            return Category.JOURNAL
        # 最後の手段: 査読が不明で誌名がある
        if referee is None and venues:
            return Category.JOURNAL
        return Category.UNCLASSIFIED

    # 5. 会議録
    if is_international(item, type_text, venues, policy):
        return Category.CONFERENCE_INTERNATIONAL
    return Category.CONFERENCE_OTHER


# =========================
# Presentations
# =========================

def is_invited_presentation(item: Any, type_text: str, policy: ClassifierPolicy = DEFAULT_POLICY) -> bool:
    invited = first_flag(item, INVITED_FIELDS)
    if invited is True:
        return True
    if any(k in type_text for k in policy.invited_type_keywords):
        return True
    if invited is False:
        return False
    # 招待フラグが無いときだけ自由記述の「招待」「基調講演」などを見る
    free_text = " ".join(_texts(item, FREE_TEXT_FIELDS)).lower()
    return any(k.lower() in free_text for k in policy.invited_text_keywords)


def classify_presentation(item: Any, policy: ClassifierPolicy = DEFAULT_POLICY) -> Category:
    type_text = pick_text(item, PRESENTATION_TYPE_FIELDS).lower()
    if is_invited_presentation(item, type_text, policy):
        return Category.PRESENTATION_INVITED

    venues = _texts(item, VENUE_FIELDS)
    if is_international(item, type_text, venues, policy):
        return Category.PRESENTATION_INTERNATIONAL
    return Category.PRESENTATION_DOMESTIC


# =========================
# Entry points
# =========================

def classify(item: Any, kind: str, policy: ClassifierPolicy | None = None) -> Category:
    """レコード 1 件のカテゴリ。どんな入力でも必ずいずれかの Category を返す。"""
    policy = policy or DEFAULT_POLICY
    if not isinstance(item, Mapping):
        return Category.UNCLASSIFIED
    if kind == PAPER_KIND:
        return classify_paper(item, policy)
    if kind == PRESENTATION_KIND:
        return classify_presentation(item, policy)
    return Category.UNCLASSIFIED


def classify_records(
    items: Sequence[Any],
    kind: str,
    policy: ClassifierPolicy | None = None,
    *,
    debug_unresolved: bool = False,
) -> List[CanonicalRecord]:
    """取得した items を分類・正規化して CanonicalRecord のリスト（入力順）にする。"""
    return [
        extract_record(
            item,
            kind,
            index=i,
            category=classify(item, kind, policy),
            debug_unresolved=debug_unresolved,
        )
        for i, item in enumerate(items)
    ]
