"""
店舗別集計モジュール

実績レコードを期間・店舗で絞り込み、店舗ごとの平均スコアと件数を算出する。

集計ルール:
- 期間は開始日・終了日ともに含む（日付単位で比較）
- 平均は実績1件ずつの単純平均（サブスコアからの再計算はしない）
- 該当0件の店舗は出力しない
- 店舗マスタに存在しない店舗IDは "Unknown Store" として集計する
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from app.schemas.quadrant import AggregationFilter, SummaryPoint
from app.schemas.record import MetricRecord
from app.schemas.store import Store
from app.services.metrics import to_date


UNKNOWN_STORE_NAME = "Unknown Store"


# =============================================================================
# ヘルパー関数
# =============================================================================

def build_store_name_map(stores: Iterable[Store]) -> Dict[str, str]:
    """店舗ID→店舗名のマップを作成する"""
    return {store.id: store.name for store in stores}


def resolve_store_name(store_id: str, store_names: Mapping[str, str]) -> str:
    """
    店舗名を解決する

    削除済みの店舗を参照する実績もあるため、見つからない場合はエラーにせず
    プレースホルダー名を返す。
    """
    return store_names.get(store_id, UNKNOWN_STORE_NAME)


def matches_filter(record: MetricRecord, filters: AggregationFilter) -> bool:
    """
    実績がフィルタ条件（期間 AND 店舗）を満たすか判定する

    Args:
        record: 実績レコード
        filters: 集計フィルタ

    Returns:
        bool: 条件を満たす場合True
    """
    record_date = to_date(record.date)

    if filters.start_date is not None and record_date < filters.start_date:
        return False
    if filters.end_date is not None and record_date > filters.end_date:
        return False
    if filters.store_ids is not None and record.store_id not in filters.store_ids:
        return False

    return True


def filter_records(
    records: Iterable[MetricRecord],
    filters: Optional[AggregationFilter] = None,
) -> List[MetricRecord]:
    """フィルタ条件を満たす実績のみを返す"""
    if filters is None:
        return list(records)
    return [record for record in records if matches_filter(record, filters)]


# =============================================================================
# 集計
# =============================================================================

def aggregate(
    records: Sequence[MetricRecord],
    stores: Sequence[Store],
    filters: Optional[AggregationFilter] = None,
) -> List[SummaryPoint]:
    """
    店舗別の集計点を作成する

    入力は変更せず、呼び出しごとに新しいリストを返す。
    出力順は実績に最初に現れた店舗の順。

    Args:
        records: 実績レコード一覧
        stores: 店舗一覧（店舗名の解決に使用）
        filters: 集計フィルタ（省略時は全件）

    Returns:
        List[SummaryPoint]: 店舗別集計点（件数1以上の店舗のみ）

    Examples:
        2件の実績（売上95/標準化90、売上60/標準化95）を持つ店舗A
        → avg_revenue=77.5, avg_compliance=92.5, count=2
    """
    # 店舗ID → [売上合計, 標準化合計, 件数]
    totals: Dict[str, List[float]] = {}

    for record in filter_records(records, filters):
        bucket = totals.setdefault(record.store_id, [0.0, 0.0, 0])
        bucket[0] += record.revenue_score
        bucket[1] += record.compliance_score
        bucket[2] += 1

    store_names = build_store_name_map(stores)

    return [
        SummaryPoint(
            store_id=store_id,
            store_name=resolve_store_name(store_id, store_names),
            avg_revenue=revenue_sum / count,
            avg_compliance=compliance_sum / count,
            count=count,
        )
        for store_id, (revenue_sum, compliance_sum, count) in totals.items()
    ]
