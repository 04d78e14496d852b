"""
クアドラントAPIエンドポイント

店舗別集計・四象限分類の結果を返すAPIエンドポイントを定義する。
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from supabase import Client

from app.api.deps import get_supabase_client, get_thresholds, to_http_exception
from app.core.errors import RecordStoreError
from app.core.validators import validator
from app.schemas.quadrant import QuadrantChartResponse, Thresholds
from app.services import dashboard_service
from app.services.metrics import get_current_month_range

router = APIRouter()


@router.get(
    "",
    response_model=QuadrantChartResponse,
    summary="クアドラントチャート取得",
    description="""
    期間・店舗で絞り込んだ実績を店舗別に集計し、目標値と比較して四象限に分類する。

    - 期間の初期値は今月（月初〜月末）、開始日・終了日ともに含む
    - 目標値を指定しない場合は保存済みの目標値を使用する
    - has_records が false の場合は実績が1件も登録されていない
    """,
)
async def get_quadrant_chart(
    start_date: Optional[date] = Query(None, description="開始日（YYYY-MM-DD）"),
    end_date: Optional[date] = Query(None, description="終了日（YYYY-MM-DD）"),
    store_ids: Optional[str] = Query(None, description="店舗ID（カンマ区切り、all=全店舗）"),
    target_revenue: Optional[float] = Query(None, description="売上スコア目標（保存値を上書き）"),
    target_compliance: Optional[float] = Query(None, description="標準化スコア目標（保存値を上書き）"),
    saved_thresholds: Thresholds = Depends(get_thresholds),
    supabase: Client = Depends(get_supabase_client),
):
    """クアドラントチャートのデータを取得する。"""
    default_start, default_end = get_current_month_range()
    start_date = start_date or default_start
    end_date = end_date or default_end
    validator.validate_date_range(start_date, end_date)

    thresholds = Thresholds(
        target_revenue=saved_thresholds.target_revenue if target_revenue is None else target_revenue,
        target_compliance=saved_thresholds.target_compliance if target_compliance is None else target_compliance,
    )

    try:
        return await dashboard_service.get_quadrant_dashboard(
            supabase,
            thresholds,
            start_date=start_date,
            end_date=end_date,
            store_ids=validator.parse_store_ids(store_ids),
        )
    except RecordStoreError as e:
        raise to_http_exception(e)
