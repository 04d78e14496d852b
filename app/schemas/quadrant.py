"""
クアドラントスキーマ

店舗別集計・四象限分類・期間サマリーのPydanticスキーマを定義する。
"""
from datetime import date as date_type
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.validators import ALL_STORES


# =============================================================================
# Enum定義
# =============================================================================

class QuadrantEnum(str, Enum):
    """
    四象限

    - success: 売上・標準化ともに目標以上
    - risk: 売上は目標以上、標準化が未達
    - potential: 標準化は目標以上、売上が未達
    - critical: 両方未達
    """
    SUCCESS = "success"
    RISK = "risk"
    POTENTIAL = "potential"
    CRITICAL = "critical"


# =============================================================================
# 入力
# =============================================================================

class Thresholds(BaseModel):
    """目標値（境界値は目標達成側に含める）"""
    target_revenue: float = Field(..., description="売上スコア目標")
    target_compliance: float = Field(..., description="標準化スコア目標")


class AggregationFilter(BaseModel):
    """
    集計フィルタ

    期間は開始日・終了日ともに含む。片方のみ指定した場合はその側のみで絞り込む。
    store_ids が None の場合は全店舗を対象とする（"all" も同じ扱い）。
    空集合は「店舗を1つも選択していない」ことを表し、どの実績にも一致しない。
    """
    start_date: Optional[date_type] = Field(None, description="開始日（含む）")
    end_date: Optional[date_type] = Field(None, description="終了日（含む）")
    store_ids: Optional[FrozenSet[str]] = Field(None, description="対象店舗ID")

    @field_validator("store_ids", mode="before")
    @classmethod
    def _normalize_store_ids(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            value = [item.strip() for item in value.split(",") if item.strip()]
        ids = frozenset(value)
        if ALL_STORES in ids:
            return None
        return ids

    @model_validator(mode="after")
    def _validate_range(self) -> "AggregationFilter":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


# =============================================================================
# 出力
# =============================================================================

class SummaryPoint(BaseModel):
    """
    店舗別集計点

    count は必ず1以上。該当実績が0件の店舗は出力しない。
    """
    store_id: str = Field(..., description="店舗ID")
    store_name: str = Field(..., description="店舗名")
    avg_revenue: float = Field(..., description="平均売上スコア")
    avg_compliance: float = Field(..., description="平均標準化スコア")
    count: int = Field(..., ge=1, description="集計対象の実績件数")


class ClassifiedPoint(BaseModel):
    """象限付き集計点"""
    point: SummaryPoint = Field(..., description="店舗別集計点")
    quadrant: QuadrantEnum = Field(..., description="象限")


class ClassificationResult(BaseModel):
    """分類結果"""
    classified: List[ClassifiedPoint] = Field(default_factory=list, description="象限付き集計点")
    tally: Dict[QuadrantEnum, int] = Field(default_factory=dict, description="象限別件数（0件を含む）")


class PeriodSummary(BaseModel):
    """期間サマリー（件数加重平均）"""
    avg_revenue: float = Field(default=0.0, description="加重平均売上スコア")
    avg_compliance: float = Field(default=0.0, description="加重平均標準化スコア")
    total_revenue: float = Field(default=0.0, description="売上スコア合計（全実績）")
    total_records: int = Field(default=0, description="集計対象の実績件数")
    store_count: int = Field(default=0, description="集計対象の店舗数")


class QuadrantChartResponse(BaseModel):
    """クアドラントチャートレスポンス"""
    start_date: date_type = Field(..., description="開始日")
    end_date: date_type = Field(..., description="終了日")
    thresholds: Thresholds = Field(..., description="適用した目標値")
    has_records: bool = Field(..., description="実績が1件以上登録されているか")
    points: List[ClassifiedPoint] = Field(default_factory=list, description="象限付き集計点")
    tally: Dict[QuadrantEnum, int] = Field(default_factory=dict, description="象限別件数")
    summary: PeriodSummary = Field(default_factory=PeriodSummary, description="期間サマリー")
