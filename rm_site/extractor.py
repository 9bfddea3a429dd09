#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
extractor.py — RawRecord（researchmap の業績 1 件）→ CanonicalRecord の正規化

フィールド名の揺れは field_config.py の一覧（優先順位順）で吸収する。
どの関数も欠落・想定外の形で例外を出さず、空文字（年は UNKNOWN_YEAR）を返す。
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Sequence, Tuple

from .common import (
    DEFAULT_LANGS,
    NAME_KEYS,
    as_list,
    contains_japanese,
    describe_unresolved,
    find_see_also_url,
    first_non_empty,
    lang_keys,
    normalize_doi,
    normalize_ws,
    pick,
    pick_text,
    resolve_text,
    uniq_preserve,
)
from .field_config import (
    AUTHOR_FIELDS,
    DATE_FIELDS,
    DOI_FIELDS,
    END_PAGE_FIELDS,
    FAMILY_NAME_FIELDS,
    GIVEN_NAME_FIELDS,
    ID_FIELDS,
    ISSUE_FIELDS,
    JAPANESE_LANGUAGE_CODES,
    LANGUAGE_FIELDS,
    PAGE_RANGE_FIELDS,
    START_PAGE_FIELDS,
    TITLE_FIELDS,
    URL_FIELDS,
    VENUE_FIELDS,
    VOLUME_FIELDS,
    YEAR_FIELDS,
)
from .models import CanonicalRecord, Category


UNKNOWN_YEAR = "----"
EN_DASH = "–"

JA_FIRST: Tuple[str, ...] = DEFAULT_LANGS
EN_FIRST: Tuple[str, ...] = ("en", "ja")


# =========================
# Language
# =========================

def record_languages(item: Any) -> Tuple[str, ...]:
    """
    タイトル・誌名・著者をどちらの言語で解決するかを返す。

    languages に jpn があれば日本語優先、他の言語だけなら英語優先。
    言語情報が無ければ、タイトルに日本語が含まれるかで決める。
    """
    for path in LANGUAGE_FIELDS:
        codes = [resolve_text(x).lower() for x in as_list(pick(item, path))]
        codes = [c for c in codes if c]
        if codes:
            return JA_FIRST if any(c in JAPANESE_LANGUAGE_CODES for c in codes) else EN_FIRST
    title = pick_text(item, TITLE_FIELDS, JA_FIRST)
    return JA_FIRST if contains_japanese(title) else EN_FIRST


# =========================
# Authors
# =========================

_NAME_SPLIT = re.compile(r"\s*[;；]\s*|\s+and\s+")
_COMMA_SPLIT = re.compile(r"\s*[,，、]\s*")


def is_family_given(name: str) -> bool:
    """"Family, Given Middle" の形か（カンマが 1 つで、姓が 1 語）"""
    parts = name.split(",")
    return len(parts) == 2 and len(parts[0].split()) == 1 and bool(parts[1].strip())


def split_names(s: str) -> List[str]:
    """
    1 つの文字列に並んだ複数の人名を分割する。

    ; / ； / " and " で区切ったうえで、"Family, Given" の形でないものはカンマ（, ， 、）でも区切る。
      "A. Smith, B. Jones, C. Lee" → ["A. Smith", "B. Jones", "C. Lee"]
      "Smith, John Paul"           → ["Smith, John Paul"]
    """
    names: List[str] = []
    for part in _NAME_SPLIT.split(s or ""):
        part = normalize_ws(part)
        if not part:
            continue
        if _COMMA_SPLIT.search(part) and not is_family_given(part):
            names.extend(n for n in _COMMA_SPLIT.split(part) if n)
        else:
            names.append(part)
    return names


def _person_name(entry: Any, prefer: Sequence[str]) -> str:
    if not isinstance(entry, Mapping):
        return first_non_empty(entry, prefer=prefer)

    name = first_non_empty(*(entry.get(k) for k in NAME_KEYS), entry.get("author_name"), prefer=prefer)
    if name:
        return name

    given = pick_text(entry, GIVEN_NAME_FIELDS, prefer)
    family = pick_text(entry, FAMILY_NAME_FIELDS, prefer)
    if given or family:
        # 日本語名は「姓 名」の順
        if contains_japanese(family + given):
            return normalize_ws(f"{family} {given}")
        return normalize_ws(f"{given} {family}")

    return first_non_empty(entry, prefer=prefer)


def _is_language_container(value: Mapping[str, Any]) -> bool:
    if any(value.get(k) is not None for k in NAME_KEYS):
        return False
    return any(
        isinstance(value.get(k), (list, tuple, str))
        for lang in JA_FIRST
        for k in lang_keys(lang)
    )


def names_from(value: Any, prefer: Sequence[str] = JA_FIRST) -> List[str]:
    """著者フィールドの値（str / list / 多言語 dict / 人名 dict）から人名のリストを取り出す。"""
    if value is None:
        return []
    if isinstance(value, str):
        return split_names(value)
    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for entry in value:
            if isinstance(entry, str):
                out.extend(split_names(entry))
            elif entry is not None:
                name = _person_name(entry, prefer)
                if name:
                    out.append(name)
        return out
    if isinstance(value, Mapping):
        if _is_language_container(value):
            # {"ja": [...], "en": [...]} は優先言語のリスト、無ければもう一方
            for lang in prefer:
                for key in lang_keys(lang):
                    names = names_from(value.get(key), prefer)
                    if names:
                        return names
            return []
        name = _person_name(value, prefer)
        return [name] if name else []
    name = first_non_empty(value, prefer=prefer)
    return [name] if name else []


def extract_author_names(item: Any, prefer: Sequence[str] = JA_FIRST) -> List[str]:
    """AUTHOR_FIELDS を順に調べ、最初に人名が取れたフィールドの人名（重複除去済み）を返す。"""
    for path in AUTHOR_FIELDS:
        names = names_from(pick(item, path), prefer)
        if names:
            return uniq_preserve(names, casefold=True)
    return []


def _initial(token: str) -> str:
    for ch in token:
        if ch.isalpha():
            return f"{ch.upper()}."
    return token


def format_author(raw: Any) -> str:
    """
    人名を "J. P. Smith" 形式にする。

      - 日本語を含む名前はそのまま
      - "Family, Given Middle" → 名・ミドルネームを頭文字にして姓を後ろに
      - それ以外のカンマを含む文字列（複数人の列挙など）は並べ替えずにそのまま
      - "Given Middle Family" → 最後の語を姓とし、それ以外を頭文字に
      - 1 語だけの名前はそのまま
    """
    name = first_non_empty(raw)
    if not name or contains_japanese(name):
        return name

    if "," in name:
        if not is_family_given(name):
            return name
        family, given = name.split(",", 1)
        return " ".join([_initial(t) for t in given.split()] + [family.strip()])

    tokens = name.split()
    if len(tokens) < 2:
        return name
    return " ".join([_initial(t) for t in tokens[:-1]] + [tokens[-1]])


def join_authors(names: Sequence[str]) -> str:
    """[] → "" / [A] → "A" / [A, B] → "A and B" / [A, B, C] → "A, B, and C" """
    names = [n for n in names if n]
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return ", ".join(names[:-1]) + f", and {names[-1]}"


# =========================
# Year / date
# =========================

_YEAR = re.compile(r"(?<!\d)((?:19|20)\d{2})(?!\d)")
_COMPACT_DATE = re.compile(r"^((?:19|20)\d{2})(0\d|1[0-2])(\d{2})?$")
_DATE = re.compile(r"^((?:19|20)\d{2})(?:[-/.](\d{1,2})(?:[-/.](\d{1,2}))?)?")


def extract_year(item: Any) -> str:
    """YEAR_FIELDS を順に調べ、最初に見つかった西暦 4 桁（無ければ UNKNOWN_YEAR）。"""
    for path in YEAR_FIELDS:
        s = first_non_empty(pick(item, path))
        if not s:
            continue
        m = _YEAR.search(s) or _COMPACT_DATE.match(s)
        if m:
            return m.group(1)
    return UNKNOWN_YEAR


def normalize_date(s: str) -> str:
    """日付文字列を YYYY-MM-DD（不明部分は 00）にする。解釈できなければ ""。"""
    s = normalize_ws(s)
    m = _COMPACT_DATE.match(s) or _DATE.match(s)
    if not m:
        return ""
    year, month, day = m.group(1), m.group(2) or "0", m.group(3) or "0"
    return f"{year}-{int(month):02d}-{int(day):02d}"


def extract_date(item: Any, year: str) -> str:
    """並べ替え用の日付。日付フィールドが無ければ年だけ（YYYY-00-00）。"""
    for path in DATE_FIELDS:
        d = normalize_date(first_non_empty(pick(item, path)))
        if d:
            return d
    if year != UNKNOWN_YEAR:
        return f"{year}-00-00"
    return ""


# =========================
# Volume / issue / pages
# =========================

_PP_PREFIX = re.compile(r"^pp?\.\s*", re.IGNORECASE)
_HYPHENS = re.compile(r"\s*[-‐‑‒–−]\s*")


def normalize_page_range(raw: str) -> str:
    """"pp. 12-34" → "12–34" """
    s = _PP_PREFIX.sub("", normalize_ws(raw))
    return _HYPHENS.sub(EN_DASH, s)


def extract_pages(item: Any) -> str:
    start = pick_text(item, START_PAGE_FIELDS)
    end = pick_text(item, END_PAGE_FIELDS)
    if start and end:
        return f"{start}{EN_DASH}{end}"
    page_range = pick_text(item, PAGE_RANGE_FIELDS)
    if page_range:
        return normalize_page_range(page_range)
    return start or end


# =========================
# DOI / URL
# =========================

def _first_doi(value: Any) -> str:
    for v in as_list(value):
        doi = normalize_doi(first_non_empty(v))
        if doi:
            return doi
    return ""


def extract_url(item: Any) -> str:
    """
    リンク先 URL。優先順位:
      1. DOI フィールド（https://doi.org/ 形式に正規化）
      2. identifiers.doi
      3. see_also の label == "doi"
      4. see_also の label == "url"、url / link フィールド
    """
    for path in DOI_FIELDS:
        doi = _first_doi(pick(item, path))
        if doi:
            return doi

    doi = _first_doi(pick(item, ("identifiers", "doi")))
    if doi:
        return doi

    see_also = pick(item, "see_also")
    doi = normalize_doi(find_see_also_url(see_also, "doi"))
    if doi:
        return doi

    url = find_see_also_url(see_also, "url")
    if url:
        return url
    return pick_text(item, URL_FIELDS)


# =========================
# Record
# =========================

def extract_id(item: Any, kind: str, index: int) -> str:
    for path in ID_FIELDS:
        s = first_non_empty(pick(item, path))
        if s:
            return s
    return f"{kind}-{index}"


def extract_title(item: Any, prefer: Sequence[str], debug_unresolved: bool = False) -> str:
    title = pick_text(item, TITLE_FIELDS, prefer)
    if title or not debug_unresolved:
        return title
    for path in TITLE_FIELDS:
        raw = pick(item, path)
        if raw is not None:
            return describe_unresolved(raw)
    return ""


def extract_record(
    item: Any,
    kind: str,
    *,
    index: int = 0,
    category: Category = Category.UNCLASSIFIED,
    debug_unresolved: bool = False,
) -> CanonicalRecord:
    """RawRecord 1 件を CanonicalRecord にする（item は変更しない）。"""
    prefer = record_languages(item)
    authors = tuple(a for a in (format_author(n) for n in extract_author_names(item, prefer)) if a)
    year = extract_year(item)

    return CanonicalRecord(
        id=extract_id(item, kind, index),
        kind=kind,
        authors=authors,
        author_line=join_authors(authors),
        title=extract_title(item, prefer, debug_unresolved),
        venue=pick_text(item, VENUE_FIELDS, prefer),
        year=year,
        date=extract_date(item, year),
        volume=pick_text(item, VOLUME_FIELDS),
        issue=pick_text(item, ISSUE_FIELDS),
        pages=extract_pages(item),
        url=extract_url(item),
        category=category,
    )
