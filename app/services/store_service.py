"""
店舗サービスモジュール

店舗マスタの登録・取得・名称変更・削除を行うサービスを提供する。
店舗を削除しても実績は削除しない（実績側は "Unknown Store" として集計される）。
"""
import logging
from typing import Any, Dict, List

from supabase import Client

from app.core.errors import NotFoundError, RecordStoreError, is_invalid_id
from app.schemas.store import Store, StoreDeleteResult
from app.services.audit_log_service import audit_log


logger = logging.getLogger(__name__)

STORES_TABLE = "stores"
RECORDS_TABLE = "metric_records"


def _row_to_store(row: Dict[str, Any]) -> Store:
    return Store(id=str(row["id"]), name=row["name"])


def _clean_name(name: str) -> str:
    """前後の空白のみ除去する（記号などはそのまま保存する）"""
    cleaned = (name or "").strip()
    if not cleaned:
        raise RecordStoreError("店舗名を入力してください", status_code=400)
    return cleaned


# =============================================================================
# 店舗取得
# =============================================================================

async def list_stores(supabase: Client) -> List[Store]:
    """
    店舗一覧を取得する（店舗名順）

    Args:
        supabase: Supabaseクライアント

    Returns:
        List[Store]: 店舗一覧
    """
    try:
        response = supabase.table(STORES_TABLE).select("id, name").order("name").execute()
        return [_row_to_store(row) for row in (response.data or [])]
    except Exception as e:
        raise RecordStoreError(f"店舗一覧の取得に失敗しました: {str(e)}")


async def get_store(supabase: Client, store_id: str) -> Store:
    """
    IDで店舗を取得する

    Raises:
        NotFoundError: 店舗が存在しない場合
    """
    try:
        response = supabase.table(STORES_TABLE).select("id, name").eq("id", store_id).execute()
    except Exception as e:
        if is_invalid_id(e):
            raise NotFoundError("店舗が見つかりません")
        raise RecordStoreError(f"店舗の取得に失敗しました: {str(e)}")

    if not response.data:
        raise NotFoundError("店舗が見つかりません")
    return _row_to_store(response.data[0])


# =============================================================================
# 店舗登録・更新・削除
# =============================================================================

async def create_store(supabase: Client, name: str) -> Store:
    """
    店舗を新規登録する

    Args:
        supabase: Supabaseクライアント
        name: 店舗名（前後の空白は除去）

    Returns:
        Store: 登録した店舗
    """
    cleaned = _clean_name(name)

    try:
        response = supabase.table(STORES_TABLE).insert({"name": cleaned}).execute()
    except Exception as e:
        raise RecordStoreError(f"店舗の登録に失敗しました: {str(e)}")

    if not response.data:
        raise RecordStoreError("店舗の登録に失敗しました")

    store = _row_to_store(response.data[0])
    audit_log.log_create("store", store.id, {"name": store.name})
    return store


async def rename_store(supabase: Client, store_id: str, name: str) -> Store:
    """
    店舗名を変更する

    Raises:
        NotFoundError: 店舗が存在しない場合
    """
    cleaned = _clean_name(name)

    try:
        response = supabase.table(STORES_TABLE).update({"name": cleaned}).eq("id", store_id).execute()
    except Exception as e:
        if is_invalid_id(e):
            raise NotFoundError("店舗が見つかりません")
        raise RecordStoreError(f"店舗名の変更に失敗しました: {str(e)}")

    if not response.data:
        raise NotFoundError("店舗が見つかりません")

    store = _row_to_store(response.data[0])
    audit_log.log_update("store", store.id, {"name": store.name})
    return store


async def delete_store(supabase: Client, store_id: str) -> StoreDeleteResult:
    """
    店舗を削除する

    紐づく実績は削除しない。削除後も残る実績件数を返すので、
    呼び出し側で利用者に警告できる。

    Args:
        supabase: Supabaseクライアント
        store_id: 店舗ID

    Returns:
        StoreDeleteResult: 削除結果

    Raises:
        NotFoundError: 店舗が存在しない場合
    """
    # 残る実績の件数は削除前に数える
    try:
        records_response = supabase.table(RECORDS_TABLE).select("id").eq("store_id", store_id).execute()
        response = supabase.table(STORES_TABLE).delete().eq("id", store_id).execute()
    except Exception as e:
        if is_invalid_id(e):
            raise NotFoundError("店舗が見つかりません")
        raise RecordStoreError(f"店舗の削除に失敗しました: {str(e)}")

    if not response.data:
        raise NotFoundError("店舗が見つかりません")

    orphaned = len(records_response.data or [])
    if orphaned:
        logger.warning("店舗 %s を削除しました。実績 %d 件が残っています", store_id, orphaned)

    audit_log.log_delete("store", store_id, {"orphaned_record_count": orphaned})
    return StoreDeleteResult(id=store_id, orphaned_record_count=orphaned)
