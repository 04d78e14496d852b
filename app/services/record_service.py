"""
実績サービスモジュール

店舗別・月別実績の登録・取得・更新・削除を行うサービスを提供する。

一意制約:
- 1店舗につき1か月1件まで（store_id, month）
- 書き込み前に既存データを確認するが、同時書き込みに対する保証は
  DBの一意インデックスが担う。インデックス違反も同じエラーとして扱う。
"""
import logging
from datetime import date
from typing import AbstractSet, Any, Dict, List, Optional

from postgrest.exceptions import APIError
from supabase import Client

from app.core.errors import DuplicateRecordError, NotFoundError, RecordStoreError, is_invalid_id
from app.schemas.record import (
    MetricRecord,
    MetricRecordInput,
    MetricRecordItem,
    MetricRecordListResponse,
)
from app.services import store_service
from app.services.aggregation import build_store_name_map, resolve_store_name
from app.services.audit_log_service import audit_log
from app.services.metrics import calculate_compliance_score, format_month, normalize_to_month_start


logger = logging.getLogger(__name__)

RECORDS_TABLE = "metric_records"

# PostgreSQLの一意制約違反コード
UNIQUE_VIOLATION = "23505"


# =============================================================================
# ヘルパー関数
# =============================================================================

def _row_to_record(row: Dict[str, Any]) -> MetricRecord:
    """Supabaseの行を実績レコードに変換する"""
    return MetricRecord(
        id=str(row["id"]),
        store_id=str(row["store_id"]),
        date=row["date"],
        revenue_score=float(row["revenue_score"]),
        compliance_score=float(row["compliance_score"]),
        standardization=row.get("standardization"),
        layout=row.get("layout"),
        culture=row.get("culture"),
    )


def _input_to_row(data: MetricRecordInput) -> Dict[str, Any]:
    """入力値を保存用の行に変換する（標準化スコアはここで算出）"""
    return {
        "store_id": data.store_id,
        "date": data.date.isoformat(),
        "month": normalize_to_month_start(data.date).isoformat(),
        "revenue_score": data.revenue_score,
        "standardization": data.standardization,
        "layout": data.layout,
        "culture": data.culture,
        "compliance_score": calculate_compliance_score(
            data.standardization, data.layout, data.culture
        ),
    }


def _is_unique_violation(error: Exception) -> bool:
    return isinstance(error, APIError) and error.code == UNIQUE_VIOLATION


async def _ensure_unique_month(
    supabase: Client,
    store_id: str,
    target_date: date,
    action: str,
    exclude_id: Optional[str] = None,
) -> None:
    """
    同一店舗・同一月の実績が既に存在しないか確認する

    Args:
        supabase: Supabaseクライアント
        store_id: 店舗ID
        target_date: 対象日
        action: 監査ログ用のアクション名
        exclude_id: 更新時の自レコードID（比較対象から除外）

    Raises:
        DuplicateRecordError: 既に実績が存在する場合
    """
    month = normalize_to_month_start(target_date)
    try:
        response = supabase.table(RECORDS_TABLE).select("id").eq(
            "store_id", store_id
        ).eq("month", month.isoformat()).execute()
    except Exception as e:
        raise RecordStoreError(f"実績の重複確認に失敗しました: {str(e)}")

    duplicates = [row for row in (response.data or []) if str(row["id"]) != exclude_id]
    if duplicates:
        audit_log.log_conflict(action, "metric_record", {
            "store_id": store_id,
            "month": format_month(month),
            "existing_id": str(duplicates[0]["id"]),
        })
        raise DuplicateRecordError()


# =============================================================================
# 実績取得
# =============================================================================

async def fetch_records(supabase: Client) -> List[MetricRecord]:
    """
    全実績を取得する（集計用）

    Args:
        supabase: Supabaseクライアント

    Returns:
        List[MetricRecord]: 実績一覧
    """
    try:
        response = supabase.table(RECORDS_TABLE).select("*").execute()
    except Exception as e:
        raise RecordStoreError(f"実績の取得に失敗しました: {str(e)}")

    return [_row_to_record(row) for row in (response.data or [])]


async def list_records(
    supabase: Client,
    month: Optional[date] = None,
    store_ids: Optional[AbstractSet[str]] = None,
) -> MetricRecordListResponse:
    """
    実績一覧を取得する（日付降順、店舗名付き）

    Args:
        supabase: Supabaseクライアント
        month: 対象月（月初日、省略時は全期間）
        store_ids: 対象店舗ID（省略時は全店舗）

    Returns:
        MetricRecordListResponse: 実績一覧
    """
    try:
        query = supabase.table(RECORDS_TABLE).select("*")
        if month:
            query = query.eq("month", normalize_to_month_start(month).isoformat())
        if store_ids is not None:
            query = query.in_("store_id", sorted(store_ids))
        response = query.order("date", desc=True).execute()
    except Exception as e:
        if is_invalid_id(e):
            raise RecordStoreError("店舗IDの形式が正しくありません", status_code=400)
        raise RecordStoreError(f"実績一覧の取得に失敗しました: {str(e)}")

    records = [_row_to_record(row) for row in (response.data or [])]
    store_names = build_store_name_map(await store_service.list_stores(supabase))

    items = [
        MetricRecordItem(
            **record.model_dump(),
            store_name=resolve_store_name(record.store_id, store_names),
        )
        for record in sorted(records, key=lambda r: r.date, reverse=True)
    ]

    return MetricRecordListResponse(
        month=format_month(month) if month else None,
        total=len(items),
        items=items,
    )


async def get_record(supabase: Client, record_id: str) -> MetricRecord:
    """
    IDで実績を取得する

    Raises:
        NotFoundError: 実績が存在しない場合
    """
    try:
        response = supabase.table(RECORDS_TABLE).select("*").eq("id", record_id).execute()
    except Exception as e:
        if is_invalid_id(e):
            raise NotFoundError("実績が見つかりません")
        raise RecordStoreError(f"実績の取得に失敗しました: {str(e)}")

    if not response.data:
        raise NotFoundError("実績が見つかりません")
    return _row_to_record(response.data[0])


# =============================================================================
# 実績登録・更新・削除
# =============================================================================

async def create_record(supabase: Client, data: MetricRecordInput) -> MetricRecord:
    """
    実績を新規登録する

    Args:
        supabase: Supabaseクライアント
        data: 登録データ

    Returns:
        MetricRecord: 登録した実績

    Raises:
        NotFoundError: 店舗が存在しない場合
        DuplicateRecordError: 同一店舗・同一月の実績が既に存在する場合
    """
    await store_service.get_store(supabase, data.store_id)
    await _ensure_unique_month(supabase, data.store_id, data.date, "CREATE")

    try:
        response = supabase.table(RECORDS_TABLE).insert(_input_to_row(data)).execute()
    except Exception as e:
        if _is_unique_violation(e):
            logger.info("同時書き込みによる重複を検出しました: store_id=%s", data.store_id)
            audit_log.log_conflict("CREATE", "metric_record", {
                "store_id": data.store_id,
                "month": format_month(data.date),
            })
            raise DuplicateRecordError()
        raise RecordStoreError(f"実績の登録に失敗しました: {str(e)}")

    if not response.data:
        raise RecordStoreError("実績の登録に失敗しました")

    record = _row_to_record(response.data[0])
    audit_log.log_create("metric_record", record.id, {
        "store_id": record.store_id,
        "month": format_month(record.date),
    })
    return record


async def update_record(
    supabase: Client,
    record_id: str,
    data: MetricRecordInput,
) -> MetricRecord:
    """
    実績を更新する

    店舗・対象月を変更する場合も一意制約を確認する（自レコードは除外）。

    Raises:
        NotFoundError: 実績または店舗が存在しない場合
        DuplicateRecordError: 変更後の店舗・月に別の実績が存在する場合
    """
    await get_record(supabase, record_id)
    await store_service.get_store(supabase, data.store_id)
    await _ensure_unique_month(supabase, data.store_id, data.date, "UPDATE", exclude_id=record_id)

    try:
        response = supabase.table(RECORDS_TABLE).update(_input_to_row(data)).eq(
            "id", record_id
        ).execute()
    except Exception as e:
        if _is_unique_violation(e):
            audit_log.log_conflict("UPDATE", "metric_record", {
                "store_id": data.store_id,
                "month": format_month(data.date),
            })
            raise DuplicateRecordError()
        raise RecordStoreError(f"実績の更新に失敗しました: {str(e)}")

    if not response.data:
        raise NotFoundError("実績が見つかりません")

    record = _row_to_record(response.data[0])
    audit_log.log_update("metric_record", record.id, {
        "store_id": record.store_id,
        "month": format_month(record.date),
    })
    return record


async def delete_record(supabase: Client, record_id: str) -> None:
    """
    実績を削除する

    Raises:
        NotFoundError: 実績が存在しない場合
    """
    try:
        response = supabase.table(RECORDS_TABLE).delete().eq("id", record_id).execute()
    except Exception as e:
        if is_invalid_id(e):
            raise NotFoundError("実績が見つかりません")
        raise RecordStoreError(f"実績の削除に失敗しました: {str(e)}")

    if not response.data:
        raise NotFoundError("実績が見つかりません")

    audit_log.log_delete("metric_record", record_id)
