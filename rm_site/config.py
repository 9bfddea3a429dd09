#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
config.py — 環境変数（.env）からの設定読み込み

プロジェクトルートの .env を読み込んだうえで、以下の環境変数を参照する:

  RM_SITE_PERMALINK                              researchmap のパーマリンク（必須、--permalink でも可）
  RM_SITE_API_BASE                               API のベース URL（既定: https://api.researchmap.jp）
  RM_SITE_OUT_DIR                                出力先ルート（既定: .）
  RM_SITE_SITE_TITLE                             ページ見出しに付ける名称（既定: Publications）
  RM_SITE_DEBUG_UNRESOLVED                       解決できなかった題目を [unresolved] で表示（既定: 0）
  RM_SITE_REVIEW_REQUIRES_EXPLICIT_NON_REFEREED  総説判定に査読無しの明示を要求（既定: 1）
  RM_SITE_INTERNATIONAL_TEXT_FALLBACK            会議名の "International" で国際扱い（既定: 1）
  RM_SITE_TRUST_EXPLICIT_JOURNAL_TYPE            掲載種別 journal なら誌名の会議パターンを見ない（既定: 0）
  RM_SITE_ROOT_PATH                              プレビューサーバをサブパス配下で動かす場合の root_path
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel

from shared.api_client import RESEARCHMAP_API_BASE

from .common import parse_flag
from .models import ClassifierPolicy

PROJECT_ROOT = Path(__file__).parent.parent


class ConfigError(ValueError):
    """設定が足りない・不正"""


class Settings(BaseModel):
    """ビルド設定"""
    permalink: str = ""
    api_base: str = RESEARCHMAP_API_BASE
    out_dir: Path = Path(".")
    site_title: str = "Publications"
    debug_unresolved: bool = False
    policy: ClassifierPolicy = ClassifierPolicy()
    root_path: str = ""

    @property
    def counts_path(self) -> Path:
        return self.out_dir / "data" / "counts.json"

    @property
    def pages_dir(self) -> Path:
        return self.out_dir / "publications"

    @property
    def review_book_path(self) -> Path:
        return self.out_dir / "review" / "classification.xlsx"

    def require_permalink(self) -> str:
        if not self.permalink:
            raise ConfigError("RM_SITE_PERMALINK が設定されていません（--permalink でも指定できます）")
        return self.permalink


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    flag = parse_flag(env.get(name))
    return default if flag is None else flag


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """環境変数から Settings を作る（env を渡した場合は .env を読まない）"""
    if env is None:
        load_dotenv(PROJECT_ROOT / ".env")
        env = os.environ

    policy = ClassifierPolicy(
        review_requires_explicit_non_refereed=_env_flag(
            env, "RM_SITE_REVIEW_REQUIRES_EXPLICIT_NON_REFEREED", True
        ),
        international_text_fallback=_env_flag(env, "RM_SITE_INTERNATIONAL_TEXT_FALLBACK", True),
        trust_explicit_journal_type=_env_flag(env, "RM_SITE_TRUST_EXPLICIT_JOURNAL_TYPE", False),
    )

    return Settings(
        permalink=env.get("RM_SITE_PERMALINK", "").strip(),
        api_base=env.get("RM_SITE_API_BASE", "").strip() or RESEARCHMAP_API_BASE,
        out_dir=Path(env.get("RM_SITE_OUT_DIR", "").strip() or "."),
        site_title=env.get("RM_SITE_SITE_TITLE", "").strip() or "Publications",
        debug_unresolved=_env_flag(env, "RM_SITE_DEBUG_UNRESOLVED", False),
        policy=policy,
        root_path=env.get("RM_SITE_ROOT_PATH", "").strip(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """プレビューサーバ用（プロセス内で 1 回だけ読み込む）"""
    return load_settings()
