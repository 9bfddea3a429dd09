#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
shared/api_client.py — researchmap API クライアントの共通モジュール

カテゴリ（published_papers / presentations など）ごとに全件を取得する。
ページング（_links.next）・rm:id による重複除去・リトライはここで吸収し、
呼び出し側には items の list だけを返す。
"""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Dict, List, Tuple

import httpx

from .endpoint_config import get_endpoint_list


RESEARCHMAP_API_BASE = "https://api.researchmap.jp"

# 1 リクエストあたりの取得件数（researchmap API の上限）
PAGE_LIMIT = 1000
# _links.next を辿る回数の上限
MAX_PAGES = 50
# 429 / 5xx / 通信エラー時の試行回数
MAX_ATTEMPTS = 3
RETRY_STATUS = {429, 500, 502, 503, 504}


class ResearchmapAPIError(RuntimeError):
    """researchmap API から取得できなかった（ビルド全体を中断する）"""


def normalize_items(payload: Any) -> Tuple[List[Dict[str, Any]], str | None]:
    """
    レスポンス JSON から (items, next_href) を取り出す。

    researchmap のコレクションは
      - list[dict]
      - {"items": [dict, ...], "_links": {"next": {"href": "..."}}}
    のどちらでも返ってくる。
    """
    if isinstance(payload, list):
        return [x for x in payload if isinstance(x, dict)], None
    if not isinstance(payload, dict):
        return [], None

    items = payload.get("items")
    items = [x for x in items if isinstance(x, dict)] if isinstance(items, list) else []

    links = payload.get("_links")
    next_href = None
    if isinstance(links, dict) and isinstance(links.get("next"), dict):
        href = links["next"].get("href")
        if isinstance(href, str) and href.strip():
            next_href = href.strip()
    return items, next_href


def item_id(item: Dict[str, Any]) -> str | None:
    """重複除去用の ID（rm:id → id）"""
    for key in ("rm:id", "id"):
        v = item.get(key)
        if v is not None and str(v).strip():
            return str(v).strip()
    return None


async def fetch_json(client: httpx.AsyncClient, url: str) -> Any | None:
    """
    URL を取得して JSON を返す。404 は None（データなし）。

    429 / 5xx / 通信エラーは MAX_ATTEMPTS 回まで待機して再試行し、
    それでも失敗した場合は ResearchmapAPIError を送出する。
    """
    last_error = ""
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            response = await client.get(url, headers={"Accept": "application/json"}, timeout=30.0)
        except httpx.HTTPError as e:
            last_error = f"{type(e).__name__}: {e}"
        else:
            if response.status_code == 200:
                return response.json()
            if response.status_code == 404:
                # 404は正常（データが存在しない可能性）
                return None
            last_error = f"HTTP {response.status_code}"
            if response.status_code not in RETRY_STATUS:
                break

        if attempt < MAX_ATTEMPTS:
            print(f"  Retry {attempt}/{MAX_ATTEMPTS - 1} after {last_error}: {url}", file=sys.stderr)
            await asyncio.sleep(0.5 * attempt)

    raise ResearchmapAPIError(f"researchmap API error ({last_error}): {url}")


async def fetch_all_items(
    client: httpx.AsyncClient,
    rm_id: str,
    endpoint: str,
    api_base: str = RESEARCHMAP_API_BASE,
) -> List[Dict[str, Any]]:
    """1 エンドポイントの items を全ページ分取得（rm:id で重複除去、出現順を保持）"""
    base = api_base.rstrip("/")
    url = f"{base}/{rm_id}/{endpoint}?format=json&limit={PAGE_LIMIT}&start=1"

    all_items: List[Dict[str, Any]] = []
    seen: set[str] = set()

    for _ in range(MAX_PAGES):
        payload = await fetch_json(client, url)
        if payload is None:
            break

        items, next_href = normalize_items(payload)
        for it in items:
            iid = item_id(it)
            if iid is not None:
                if iid in seen:
                    continue
                seen.add(iid)
            all_items.append(it)

        if not next_href:
            break
        url = next_href if next_href.startswith("http") else f"{base}{next_href}"

    return all_items


async def fetch_researcher_data(
    client: httpx.AsyncClient,
    rm_id: str,
    endpoints: List[str] | None = None,
    api_base: str = RESEARCHMAP_API_BASE,
) -> Dict[str, List[Dict[str, Any]]]:
    """researchmap から研究者の対象エンドポイントを全件取得"""
    # 取得するエンドポイント一覧（CSVから読み込み）
    if endpoints is None:
        endpoints = get_endpoint_list()

    result: Dict[str, List[Dict[str, Any]]] = {}

    for endpoint in endpoints:
        items = await fetch_all_items(client, rm_id, endpoint, api_base=api_base)
        result[endpoint] = items
        print(f"  Fetched {endpoint}: {len(items)} items", file=sys.stderr)
        # 各エンドポイント間に少し待機
        await asyncio.sleep(0.1)

    return result
