"""
依存注入モジュール

FastAPIの依存注入機能を使用して、DB接続・設定などの共通処理を提供する。
テストでは app.dependency_overrides でこれらを差し替える。
"""
from fastapi import Depends, HTTPException
from supabase import Client, create_client

from app.core.config import Settings, get_settings
from app.core.errors import RecordStoreError
from app.schemas.quadrant import Thresholds
from app.services import settings_service


def get_app_settings() -> Settings:
    """アプリケーション設定を取得する"""
    return get_settings()


def get_supabase_client(app_settings: Settings = Depends(get_app_settings)) -> Client:
    """
    Supabaseクライアントを取得する

    店舗・実績・設定テーブルの読み書きに使用する。

    Returns:
        Client: Supabaseクライアントインスタンス
    """
    return create_client(app_settings.SUPABASE_URL, app_settings.SUPABASE_KEY)


async def get_thresholds(
    supabase: Client = Depends(get_supabase_client),
    app_settings: Settings = Depends(get_app_settings),
) -> Thresholds:
    """
    保存済みの目標値を取得する

    リクエストごとに読み込み、集計処理に引数として渡す。
    未登録の場合は設定のデフォルト値を返す。
    """
    try:
        return await settings_service.get_thresholds(
            supabase, settings_service.default_thresholds(app_settings)
        )
    except RecordStoreError as e:
        raise to_http_exception(e)


def to_http_exception(error: RecordStoreError) -> HTTPException:
    """ドメイン例外をHTTPExceptionに変換する"""
    return HTTPException(status_code=error.status_code, detail=error.message)
