"""
生成済みサイトのプレビュー用 FastAPI アプリケーション

  uvicorn rm_site.main:app --port 8000

サブパス配下での運用:
  RM_SITE_ROOT_PATH=/publications-preview uvicorn rm_site.main:app --port 8000
"""

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings, get_settings
from .routers import publications


def create_app(settings: Settings) -> FastAPI:
    """settings.out_dir 配下の生成物を配信するアプリを作る"""
    # root_path は nginx でサブパス配下に配置する場合に設定
    app = FastAPI(
        title="researchmap Publications Preview",
        description="researchmap から生成した業績ページのプレビューと件数サマリー API",
        version="1.0.0",
        root_path=settings.root_path,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )

    # 生成済みの静的ファイル（ビルド前でも起動できるよう check_dir=False）
    app.mount(
        "/publications",
        StaticFiles(directory=str(settings.pages_dir), html=True, check_dir=False),
        name="publications",
    )
    app.mount(
        "/data",
        StaticFiles(directory=str(settings.counts_path.parent), check_dir=False),
        name="data",
    )

    # ルーター登録
    app.include_router(publications.router, prefix="/api", tags=["publications"])

    @app.get("/")
    async def index():
        """
        トップページ（生成済みの一覧ページへ）
        """
        return RedirectResponse(url="publications/index.html")

    @app.get("/health")
    async def health_check():
        """
        ヘルスチェック
        """
        return {"status": "ok", "root_path": settings.root_path}

    return app


app = create_app(get_settings())


if __name__ == "__main__":
    import uvicorn
    # 開発時は直接実行可能
    uvicorn.run(
        "rm_site.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        root_path=get_settings().root_path,
    )
