"""
実績スキーマ

店舗別・月別の実績（売上スコア・標準化スコア）のPydanticスキーマを定義する。
"""
from datetime import date as date_type
from typing import List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# 実績レコード
# =============================================================================

class MetricRecord(BaseModel):
    """
    実績レコード

    1店舗・1か月分の実績。集計処理では変更しない。
    compliance_score はサブスコア3項目の平均として登録時に算出済み。
    """
    id: str = Field(..., description="実績ID")
    store_id: str = Field(..., description="店舗ID")
    date: date_type = Field(..., description="対象日")
    revenue_score: float = Field(..., description="売上スコア（目標比%）")
    compliance_score: float = Field(..., description="標準化スコア（0〜100）")
    standardization: Optional[float] = Field(None, description="標準化")
    layout: Optional[float] = Field(None, description="レイアウト")
    culture: Optional[float] = Field(None, description="カルチャー")


class MetricRecordInput(BaseModel):
    """実績登録・更新入力"""
    store_id: str = Field(..., min_length=1, description="店舗ID")
    date: date_type = Field(..., description="対象日")
    revenue_score: float = Field(..., ge=0, description="売上スコア（目標比%）")
    standardization: float = Field(..., ge=0, le=100, description="標準化（0〜100）")
    layout: float = Field(..., ge=0, le=100, description="レイアウト（0〜100）")
    culture: float = Field(..., ge=0, le=100, description="カルチャー（0〜100）")


class MetricRecordItem(MetricRecord):
    """実績一覧の行（店舗名付き）"""
    store_name: str = Field(..., description="店舗名")


class MetricRecordListResponse(BaseModel):
    """実績一覧レスポンス"""
    month: Optional[str] = Field(None, description="対象月（YYYY-MM）")
    total: int = Field(default=0, description="件数")
    items: List[MetricRecordItem] = Field(default_factory=list, description="実績一覧（日付降順）")
