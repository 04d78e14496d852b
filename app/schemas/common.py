"""
共通スキーマ

システム系エンドポイントのレスポンスモデルを定義する。
"""
from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """ヘルスチェックレスポンス"""
    status: str = Field(..., description="稼働状態")
    environment: str = Field(..., description="実行環境")
    version: str = Field(..., description="APIバージョン")
    timestamp: datetime = Field(..., description="応答時刻")


class APIInfo(BaseModel):
    """API情報レスポンス"""
    title: str = Field(..., description="APIタイトル")
    version: str = Field(..., description="APIバージョン")
    description: str = Field(..., description="API説明")
    docs_url: str = Field(..., description="Swagger UIのURL")
