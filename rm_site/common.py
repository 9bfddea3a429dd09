#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
common.py — researchmap の不定形レコード（RawRecord）を読むための共通ユーティリティ

重要:
- researchmap のフィールドは 文字列 / 多言語 dict（{"ja": ..., "en": ...}）/ その配列 / 欠落
  のいずれでも来る。ここの関数はどの形でも例外を出さず、取れなければ空文字・None を返す。
- dict をそのまま文字列化した値（"{'ja': ...}" のようなもの）を表示側に出してはいけない。
  デバッグ用に中身を見たい場合だけ describe_unresolved() を使う（"[unresolved]" で始まる）。
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Iterable, List, Mapping, Sequence, Tuple, Union


# =========================
# Basic helpers
# =========================

def as_list(x: Any) -> List[Any]:
    """None / scalar / list を list に正規化。"""
    if x is None:
        return []
    if isinstance(x, list):
        return x
    if isinstance(x, tuple):
        return list(x)
    return [x]


def uniq_preserve(xs: Iterable[str], *, casefold: bool = False) -> List[str]:
    """順序を保って重複除去（casefold=True なら大文字小文字を区別しない）。"""
    seen = set()
    out: List[str] = []
    for x in xs:
        s = str(x).strip()
        key = s.casefold() if casefold else s
        if not s or key in seen:
            continue
        seen.add(key)
        out.append(s)
    return out


_WS = re.compile(r"\s+")


def normalize_ws(s: str) -> str:
    """空白の連続を 1 つにまとめて前後を削る。"""
    return _WS.sub(" ", s or "").strip()


# 日本語（ひらがな・カタカナ・半角カナ・漢字・々〆〤）
_JA_PAT = re.compile(r"[\u3040-\u309f\u30a0-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uff66-\uff9f々〆〤]")


def contains_japanese(s: str) -> bool:
    return bool(_JA_PAT.search(s or ""))


# =========================
# Text resolution
# =========================

# 人名・名称を表すキー（言語キーより優先）
NAME_KEYS: Tuple[str, ...] = ("name", "full_name", "display_name", "rm:name")
# 値のラッパー
VALUE_KEYS: Tuple[str, ...] = ("value", "text", "@value", "rm:value")

DEFAULT_LANGS: Tuple[str, ...] = ("ja", "en")


def lang_keys(lang: str) -> Tuple[str, ...]:
    return (lang, f"rm:{lang}", f"@{lang}")


def _scalar_text(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v).strip()


def resolve_text(value: Any, prefer: Sequence[str] = DEFAULT_LANGS) -> str:
    """
    RawRecord のフィールド値を表示用テキストに解決する。

      - None → ""
      - str / 数値 / bool → 文字列化して strip
      - list → 各要素を解決して空でないものを半角スペースで連結
      - dict → name 系キー → prefer 順の言語キー（ja → en など、rm:ja / @ja も）→ value 系キー
               のどれでも取れなければ ""（dict を文字列化して返すことはしない）
    """
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return _scalar_text(value)
    if isinstance(value, (list, tuple)):
        parts = [resolve_text(v, prefer) for v in value]
        return " ".join(p for p in parts if p)
    if isinstance(value, Mapping):
        for key in NAME_KEYS:
            s = resolve_text(value.get(key), prefer)
            if s:
                return s
        for lang in prefer:
            for key in lang_keys(lang):
                s = resolve_text(value.get(key), prefer)
                if s:
                    return s
        for key in VALUE_KEYS:
            s = resolve_text(value.get(key), prefer)
            if s:
                return s
        return ""
    return ""


def describe_unresolved(value: Any) -> str:
    """デバッグ用: 解決できなかった値の中身を "[unresolved] {...}" 形式で返す。"""
    try:
        dumped = json.dumps(value, ensure_ascii=False, sort_keys=True, default=str)
    except (TypeError, ValueError):
        dumped = repr(value)
    return f"[unresolved] {dumped}"


def first_non_empty(*candidates: Any, prefer: Sequence[str] = DEFAULT_LANGS) -> str:
    """候補を左から resolve_text し、最初に空でなかったもの（空白正規化済み）を返す。"""
    for c in candidates:
        s = normalize_ws(resolve_text(c, prefer))
        if s:
            return s
    return ""


# =========================
# Field probes
# =========================

# フィールドの指定方法: キー / ネストしたキーのタプル / item を受け取る関数
FieldPath = Union[str, Tuple[str, ...], Callable[[Mapping[str, Any]], Any]]


def pick(item: Any, path: FieldPath) -> Any:
    """item から path の値を取り出す。途中で欠けていれば None。"""
    if callable(path):
        return path(item)
    keys = (path,) if isinstance(path, str) else path
    cur = item
    for key in keys:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(key)
        if cur is None:
            return None
    return cur


def pick_text(item: Any, paths: Sequence[FieldPath], prefer: Sequence[str] = DEFAULT_LANGS) -> str:
    """paths を優先順位順に試し、最初に取れたテキストを返す。"""
    return first_non_empty(*(pick(item, p) for p in paths), prefer=prefer)


# =========================
# Boolean helpers
# =========================

_TRUE_WORDS = {"true", "1", "yes", "y", "on", "有", "有り", "あり", "はい"}
_FALSE_WORDS = {"false", "0", "no", "n", "off", "無", "無し", "なし", "いいえ"}


def parse_flag(v: Any) -> bool | None:
    """
    真偽値らしき値を True / False / None（不明）に正規化する。

      - True/False → そのまま
      - 1/0 → True/False
      - "true"/"1"/"yes"/"有" など → True、"false"/"0"/"no"/"無" など → False
      - それ以外（None / 空 / 想定外）→ None（False とは区別する）
    """
    if v is None:
        return None
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        if v == 1:
            return True
        if v == 0:
            return False
        return None
    if isinstance(v, str):
        s = v.strip().lower()
        if s in _TRUE_WORDS:
            return True
        if s in _FALSE_WORDS:
            return False
    return None


def first_flag(item: Any, paths: Sequence[FieldPath]) -> bool | None:
    """paths を順に parse_flag し、最初に True/False になったものを返す。"""
    for p in paths:
        flag = parse_flag(pick(item, p))
        if flag is not None:
            return flag
    return None


# =========================
# DOI / URL helpers
# =========================

DOI_BASE = "https://doi.org/"
_DOI_PREFIX = re.compile(r"^(?:https?://(?:dx\.)?doi\.org/|doi:\s*)", re.IGNORECASE)


def normalize_doi(value: Any) -> str:
    """
    DOI を "https://doi.org/<id>" に正規化する（何度適用しても同じ結果）。

    https://doi.org/ / http://dx.doi.org/ / doi: の接頭辞は何重でも取り除いてから付け直す。
    """
    s = resolve_text(value).strip()
    while True:
        stripped = _DOI_PREFIX.sub("", s, count=1).strip()
        if stripped == s:
            break
        s = stripped
    if not s:
        return ""
    return f"{DOI_BASE}{s}"


def find_see_also_url(see_also: Any, label: str = "url") -> str:
    """see_also[] のうち label が一致する要素の @id を返す。"""
    for it in as_list(see_also):
        if not isinstance(it, Mapping):
            continue
        if str(it.get("label", "")).strip().lower() == label.lower():
            return str(it.get("@id", "") or "").strip()
    return ""
