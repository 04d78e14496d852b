"""
店舗管理APIエンドポイント

店舗マスタの登録・一覧・名称変更・削除のAPIエンドポイントを定義する。
"""
from typing import List

from fastapi import APIRouter, Depends, status
from supabase import Client

from app.api.deps import get_supabase_client, to_http_exception
from app.core.errors import RecordStoreError
from app.schemas.store import Store, StoreDeleteResult, StoreInput
from app.services import store_service

router = APIRouter()


@router.get(
    "/",
    response_model=List[Store],
    summary="店舗一覧取得",
    description="登録済みの店舗を店舗名順に取得する。",
)
async def list_stores(
    supabase: Client = Depends(get_supabase_client),
):
    """店舗一覧を取得する。"""
    try:
        return await store_service.list_stores(supabase)
    except RecordStoreError as e:
        raise to_http_exception(e)


@router.post(
    "/",
    response_model=Store,
    status_code=status.HTTP_201_CREATED,
    summary="店舗登録",
    description="店舗を新規登録する。",
)
async def create_store(
    data: StoreInput,
    supabase: Client = Depends(get_supabase_client),
):
    """店舗を新規登録する。"""
    try:
        return await store_service.create_store(supabase, data.name)
    except RecordStoreError as e:
        raise to_http_exception(e)


@router.put(
    "/{store_id}",
    response_model=Store,
    summary="店舗名変更",
    description="店舗名を変更する。",
)
async def rename_store(
    store_id: str,
    data: StoreInput,
    supabase: Client = Depends(get_supabase_client),
):
    """店舗名を変更する。"""
    try:
        return await store_service.rename_store(supabase, store_id, data.name)
    except RecordStoreError as e:
        raise to_http_exception(e)


@router.delete(
    "/{store_id}",
    response_model=StoreDeleteResult,
    summary="店舗削除",
    description="""
    店舗を削除する。

    紐づく実績は削除されない。レスポンスの orphaned_record_count で
    削除後も残る実績件数を確認できる。
    """,
)
async def delete_store(
    store_id: str,
    supabase: Client = Depends(get_supabase_client),
):
    """店舗を削除する。"""
    try:
        return await store_service.delete_store(supabase, store_id)
    except RecordStoreError as e:
        raise to_http_exception(e)
