"""
環境変数管理モジュール

pydantic-settingsを使用して環境変数を型安全に管理する。
.envファイルからの自動読み込みに対応。
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    アプリケーション設定クラス

    環境変数または.envファイルから設定を読み込む。
    目標値のデフォルトは設定テーブルが未登録の場合にのみ使用される。
    """

    # Supabase設定
    # SupabaseプロジェクトのURL
    SUPABASE_URL: str = "http://localhost:54321"
    # サービス用キー（店舗・実績・設定テーブルを読み書きする）
    SUPABASE_KEY: str = ""

    # アプリケーション設定
    # 実行環境（development, staging, production）
    APP_ENV: str = "development"
    # デバッグモード（開発時はTrue）
    DEBUG: bool = True
    # 許可するCORSオリジン（カンマ区切り）
    ALLOWED_ORIGINS: str = "http://localhost:3000"
    # ログレベル
    LOG_LEVEL: str = "INFO"
    # 監査ログの有効/無効
    ENABLE_AUDIT_LOG: bool = True

    # APIメタ情報
    API_TITLE: str = "店舗クアドラント ダッシュボード API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "店舗別の売上・標準化スコアを目標値と比較する四象限ダッシュボードのAPI"

    # 目標値のデフォルト
    # 売上スコア目標
    DEFAULT_TARGET_REVENUE: float = 90.0
    # 標準化スコア目標（0〜100）
    DEFAULT_TARGET_COMPLIANCE: float = 85.0

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        許可されたオリジンをリストで取得

        Returns:
            List[str]: 許可されたオリジンのリスト
        """
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        """本番環境かどうかを判定"""
        return self.APP_ENV == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    設定インスタンスを取得（シングルトン）

    lru_cacheを使用して設定の読み込みは一度だけ行う。

    Returns:
        Settings: アプリケーション設定
    """
    return Settings()


# グローバル設定インスタンス（簡易アクセス用）
settings = get_settings()
