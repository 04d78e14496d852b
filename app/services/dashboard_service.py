"""
ダッシュボードサービス

クアドラント画面のデータ取得を行うサービス。
店舗・実績・目標値を取得し、集計・分類処理に渡す。
"""
from datetime import date
from typing import AbstractSet, Optional

from supabase import Client

from app.schemas.quadrant import QuadrantChartResponse, Thresholds
from app.services import record_service, store_service
from app.services.metrics import get_current_month_range
from app.services.quadrant import build_quadrant_chart


async def get_quadrant_dashboard(
    supabase: Client,
    thresholds: Thresholds,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    store_ids: Optional[AbstractSet[str]] = None,
) -> QuadrantChartResponse:
    """
    クアドラントチャートのデータを取得する

    期間を省略した場合は今月（月初〜月末）を対象とする。
    取得した実績は一貫したスナップショットとして集計に渡す。

    Args:
        supabase: Supabaseクライアント
        thresholds: 適用する目標値
        start_date: 開始日（含む）
        end_date: 終了日（含む）
        store_ids: 対象店舗ID（省略時は全店舗）

    Returns:
        QuadrantChartResponse: チャートデータ
    """
    default_start, default_end = get_current_month_range()
    start_date = start_date or default_start
    end_date = end_date or default_end

    stores = await store_service.list_stores(supabase)
    records = await record_service.fetch_records(supabase)

    return build_quadrant_chart(
        records,
        stores,
        start_date=start_date,
        end_date=end_date,
        thresholds=thresholds,
        store_ids=store_ids,
    )
