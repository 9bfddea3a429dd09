"""
プレビューサーバ（rm_site.main）のテスト

使用方法:
    pytest tests/test_server.py -v
"""

import pytest
from fastapi.testclient import TestClient

from rm_site.build import build_outputs, write_outputs
from rm_site.config import get_settings
from rm_site.main import create_app


@pytest.fixture
def client(settings):
    """一時ディレクトリの生成物を配信するクライアント（ビルド前）"""
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


@pytest.fixture
def built_client(client, sample_data, settings, now):
    """サンプルデータでビルド済みのクライアント"""
    outputs, _ = build_outputs(sample_data, settings, now, review_book=False)
    write_outputs(outputs)
    return client


class TestHealth:
    """ヘルスチェックとトップページ"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_root_redirects(self, client):
        response = client.get("/", follow_redirects=False)
        assert response.status_code in (302, 307)
        assert response.headers["location"].endswith("publications/index.html")


class TestApiBeforeBuild:
    """ビルド前は 404"""

    def test_counts_missing(self, client):
        response = client.get("/api/counts")
        assert response.status_code == 404
        assert "counts.json" in response.json()["detail"]


class TestApiAfterBuild:
    """ビルド後の参照 API と静的ファイル"""

    def test_counts(self, built_client):
        data = built_client.get("/api/counts").json()
        assert data["journal"] == 2
        assert data["int_conf"] == 1
        assert data["book_chapters"] == 1

    def test_unclassified(self, built_client):
        data = built_client.get("/api/unclassified").json()
        assert [u["id"] for u in data] == ["p5"]

    def test_categories(self, built_client):
        data = built_client.get("/api/categories").json()
        assert len(data) == 9
        journal = next(c for c in data if c["category"] == "journal")
        assert journal["count"] == 2
        assert journal["page"] == "journal-papers.html"

    def test_static_pages(self, built_client):
        response = built_client.get("/publications/journal-papers.html")
        assert response.status_code == 200
        assert "Deep Learning for Sound" in response.text

    def test_static_counts(self, built_client):
        response = built_client.get("/data/counts.json")
        assert response.status_code == 200
        assert response.json()["permalink"] == "read0001"
