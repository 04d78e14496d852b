"""
FastAPIアプリケーション エントリーポイント

店舗クアドラント ダッシュボードのバックエンドAPIを提供する。
店舗・実績・目標値をSupabaseで管理し、四象限チャートのデータを返す。
"""
import logging
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.endpoints import quadrant, records, settings as settings_endpoints, stores
from app.schemas.common import HealthResponse, APIInfo


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# FastAPIアプリケーション初期化
# =============================================================================

app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# =============================================================================
# CORSミドルウェア設定
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
    max_age=600,
)


# =============================================================================
# ルーター登録
# =============================================================================

# 店舗管理
app.include_router(stores.router, prefix="/api/v1/stores", tags=["店舗管理"])

# 実績管理
app.include_router(records.router, prefix="/api/v1/records", tags=["実績管理"])

# 目標値設定
app.include_router(settings_endpoints.router, prefix="/api/v1/settings", tags=["目標値設定"])

# クアドラント
app.include_router(quadrant.router, prefix="/api/v1/quadrant", tags=["クアドラント"])


# =============================================================================
# ルートエンドポイント
# =============================================================================

@app.get(
    "/",
    response_model=APIInfo,
    summary="API情報",
    tags=["システム"],
)
async def root() -> APIInfo:
    """APIの基本情報（タイトル、バージョン、説明）を返す。"""
    return APIInfo(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        docs_url="/docs",
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="ヘルスチェック",
    tags=["システム"],
)
async def health_check() -> HealthResponse:
    """
    ヘルスチェックエンドポイント

    ロードバランサーやモニタリングツールから稼働状態を確認するために使用する。
    """
    return HealthResponse(
        status="healthy",
        environment=settings.APP_ENV,
        version=settings.API_VERSION,
        timestamp=datetime.now(),
    )


# =============================================================================
# イベントハンドラ
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """アプリケーション起動時に設定内容をログに出力する"""
    logger.info("%s v%s が起動しました", settings.API_TITLE, settings.API_VERSION)
    logger.info("環境: %s / デバッグ: %s", settings.APP_ENV, settings.DEBUG)
    logger.info("許可オリジン: %s", settings.allowed_origins_list)
    logger.info(
        "目標値デフォルト: 売上 %s / 標準化 %s",
        settings.DEFAULT_TARGET_REVENUE, settings.DEFAULT_TARGET_COMPLIANCE,
    )
    logger.info("監査ログ: %s", "有効" if settings.ENABLE_AUDIT_LOG else "無効")


@app.on_event("shutdown")
async def shutdown_event():
    """アプリケーション終了時の処理"""
    logger.info("%s を終了します", settings.API_TITLE)


# =============================================================================
# 開発用: uvicornで直接実行する場合
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
