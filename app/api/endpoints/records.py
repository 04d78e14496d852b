"""
実績APIエンドポイント

店舗別・月別実績の登録・一覧・更新・削除のAPIエンドポイントを定義する。
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from supabase import Client

from app.api.deps import get_supabase_client, to_http_exception
from app.core.errors import RecordStoreError
from app.core.validators import validator
from app.schemas.record import MetricRecord, MetricRecordInput, MetricRecordListResponse
from app.services import record_service

router = APIRouter()


@router.get(
    "/",
    response_model=MetricRecordListResponse,
    summary="実績一覧取得",
    description="実績を日付の新しい順に取得する。対象月・店舗で絞り込める。",
)
async def list_records(
    month: Optional[str] = Query(None, description="対象月（YYYY-MM形式）"),
    store_ids: Optional[str] = Query(None, description="店舗ID（カンマ区切り、all=全店舗）"),
    supabase: Client = Depends(get_supabase_client),
):
    """実績一覧を取得する。"""
    target_month = validator.parse_month(month) if month else None
    try:
        return await record_service.list_records(
            supabase,
            month=target_month,
            store_ids=validator.parse_store_ids(store_ids),
        )
    except RecordStoreError as e:
        raise to_http_exception(e)


@router.get(
    "/{record_id}",
    response_model=MetricRecord,
    summary="実績取得",
)
async def get_record(
    record_id: str,
    supabase: Client = Depends(get_supabase_client),
):
    """実績を1件取得する。"""
    try:
        return await record_service.get_record(supabase, record_id)
    except RecordStoreError as e:
        raise to_http_exception(e)


@router.post(
    "/",
    response_model=MetricRecord,
    status_code=status.HTTP_201_CREATED,
    summary="実績登録",
    description="""
    実績を新規登録する。

    標準化スコアは標準化・レイアウト・カルチャーの平均として算出される。
    同一店舗・同一月の実績が既に存在する場合は 409 を返す。
    """,
)
async def create_record(
    data: MetricRecordInput,
    supabase: Client = Depends(get_supabase_client),
):
    """実績を新規登録する。"""
    try:
        return await record_service.create_record(supabase, data)
    except RecordStoreError as e:
        raise to_http_exception(e)


@router.put(
    "/{record_id}",
    response_model=MetricRecord,
    summary="実績更新",
    description="実績を更新する。変更後の店舗・月に別の実績が存在する場合は 409 を返す。",
)
async def update_record(
    record_id: str,
    data: MetricRecordInput,
    supabase: Client = Depends(get_supabase_client),
):
    """実績を更新する。"""
    try:
        return await record_service.update_record(supabase, record_id, data)
    except RecordStoreError as e:
        raise to_http_exception(e)


@router.delete(
    "/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="実績削除",
)
async def delete_record(
    record_id: str,
    supabase: Client = Depends(get_supabase_client),
):
    """実績を削除する。"""
    try:
        await record_service.delete_record(supabase, record_id)
    except RecordStoreError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
