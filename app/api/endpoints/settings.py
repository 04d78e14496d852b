"""
目標値設定APIエンドポイント
"""
from fastapi import APIRouter, Depends
from supabase import Client

from app.api.deps import get_supabase_client, get_thresholds, to_http_exception
from app.core.errors import RecordStoreError
from app.schemas.quadrant import Thresholds
from app.services import settings_service

router = APIRouter()


@router.get(
    "/thresholds",
    response_model=Thresholds,
    summary="目標値取得",
    description="保存済みの目標値を取得する。未登録の場合はデフォルト値を返す。",
)
async def read_thresholds(
    thresholds: Thresholds = Depends(get_thresholds),
):
    """目標値を取得する。"""
    return thresholds


@router.put(
    "/thresholds",
    response_model=Thresholds,
    summary="目標値保存",
    description="目標値を保存する。次回以降のクアドラント表示に使用される。",
)
async def save_thresholds(
    data: Thresholds,
    supabase: Client = Depends(get_supabase_client),
):
    """目標値を保存する。"""
    try:
        return await settings_service.save_thresholds(supabase, data)
    except RecordStoreError as e:
        raise to_http_exception(e)
