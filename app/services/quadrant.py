"""
四象限分類モジュール

店舗別集計点を目標値と比較して四象限に分類し、象限別件数と
期間全体の加重平均を算出する。

象限定義（比較はいずれも「以上」で判定し、境界値は達成側に含める）:

    売上 >= 目標  標準化 >= 目標  象限
    ----------  --------------  ---------
    True        True            success
    True        False           risk
    False       True            potential
    False       False           critical
"""
import logging
from datetime import date
from typing import AbstractSet, Dict, Optional, Sequence

from app.schemas.quadrant import (
    AggregationFilter,
    ClassificationResult,
    ClassifiedPoint,
    PeriodSummary,
    QuadrantChartResponse,
    QuadrantEnum,
    SummaryPoint,
    Thresholds,
)
from app.schemas.record import MetricRecord
from app.schemas.store import Store
from app.services.aggregation import aggregate


logger = logging.getLogger(__name__)


# =============================================================================
# 分類
# =============================================================================

def get_quadrant(point: SummaryPoint, thresholds: Thresholds) -> QuadrantEnum:
    """
    集計点の象限を判定する

    Args:
        point: 店舗別集計点
        thresholds: 目標値

    Returns:
        QuadrantEnum: 象限
    """
    meets_revenue = point.avg_revenue >= thresholds.target_revenue
    meets_compliance = point.avg_compliance >= thresholds.target_compliance

    if meets_revenue and meets_compliance:
        return QuadrantEnum.SUCCESS
    if meets_revenue:
        return QuadrantEnum.RISK
    if meets_compliance:
        return QuadrantEnum.POTENTIAL
    return QuadrantEnum.CRITICAL


def empty_tally() -> Dict[QuadrantEnum, int]:
    """全象限を0件で初期化した件数マップ"""
    return {quadrant: 0 for quadrant in QuadrantEnum}


def classify(points: Sequence[SummaryPoint], thresholds: Thresholds) -> ClassificationResult:
    """
    全集計点を分類し、象限別件数を集計する

    件数0の象限も結果に含める（画面表示を安定させるため）。

    Args:
        points: 店舗別集計点
        thresholds: 目標値

    Returns:
        ClassificationResult: 象限付き集計点と象限別件数
    """
    tally = empty_tally()
    classified = []

    for point in points:
        quadrant = get_quadrant(point, thresholds)
        tally[quadrant] += 1
        classified.append(ClassifiedPoint(point=point, quadrant=quadrant))

    return ClassificationResult(classified=classified, tally=tally)


# =============================================================================
# 期間サマリー
# =============================================================================

def summarize_period(points: Sequence[SummaryPoint]) -> PeriodSummary:
    """
    期間全体の加重平均を算出する

    集計点ごとに実績件数が異なるため、平均の平均ではなく件数で加重する。

    加重平均 = Σ(平均 × 件数) ÷ Σ件数

    売上合計（total_revenue）は Σ(平均 × 件数)、つまり対象実績の売上スコアの総和。

    件数合計が0の場合は平均・合計ともに0とする。データ有無の判定は元の実績一覧で行うこと。

    Args:
        points: 店舗別集計点

    Returns:
        PeriodSummary: 期間サマリー
    """
    total_count = sum(point.count for point in points)
    if total_count == 0:
        return PeriodSummary()

    revenue_total = sum(point.avg_revenue * point.count for point in points)
    compliance_total = sum(point.avg_compliance * point.count for point in points)

    return PeriodSummary(
        avg_revenue=revenue_total / total_count,
        avg_compliance=compliance_total / total_count,
        total_revenue=revenue_total,
        total_records=total_count,
        store_count=len(points),
    )


# =============================================================================
# メイン関数
# =============================================================================

def build_quadrant_chart(
    records: Sequence[MetricRecord],
    stores: Sequence[Store],
    start_date: date,
    end_date: date,
    thresholds: Thresholds,
    store_ids: Optional[AbstractSet[str]] = None,
) -> QuadrantChartResponse:
    """
    クアドラントチャートのデータを作成する

    集計 → 分類 → 期間サマリーを毎回実行する。状態は保持しない。

    Args:
        records: 実績レコード一覧（期間で絞り込む前の全件）
        stores: 店舗一覧
        start_date: 開始日（含む）
        end_date: 終了日（含む）
        thresholds: 目標値
        store_ids: 対象店舗ID（None の場合は全店舗）

    Returns:
        QuadrantChartResponse: チャートデータ
    """
    period_filter = AggregationFilter(start_date=start_date, end_date=end_date, store_ids=store_ids)

    points = aggregate(records, stores, period_filter)
    result = classify(points, thresholds)
    summary = summarize_period(points)

    logger.debug(
        "クアドラント集計: 期間=%s〜%s 店舗数=%d 実績件数=%d",
        start_date, end_date, summary.store_count, summary.total_records,
    )

    return QuadrantChartResponse(
        start_date=start_date,
        end_date=end_date,
        thresholds=thresholds,
        has_records=len(records) > 0,
        points=result.classified,
        tally=result.tally,
        summary=summary,
    )
