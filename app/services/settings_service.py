"""
目標値設定サービスモジュール

クアドラントの目標値（売上・標準化）を設定テーブルから読み書きする。
目標値は集計処理の引数として毎回渡し、グローバルな状態としては保持しない。
"""
from supabase import Client

from app.core.config import Settings
from app.core.errors import RecordStoreError
from app.schemas.quadrant import Thresholds
from app.services.audit_log_service import audit_log


SETTINGS_TABLE = "dashboard_settings"

# 設定テーブルは1行のみ
SETTINGS_ROW_ID = 1


def default_thresholds(app_settings: Settings) -> Thresholds:
    """設定テーブル未登録時に使用する目標値"""
    return Thresholds(
        target_revenue=app_settings.DEFAULT_TARGET_REVENUE,
        target_compliance=app_settings.DEFAULT_TARGET_COMPLIANCE,
    )


async def get_thresholds(supabase: Client, defaults: Thresholds) -> Thresholds:
    """
    保存済みの目標値を取得する

    Args:
        supabase: Supabaseクライアント
        defaults: 未登録時の目標値

    Returns:
        Thresholds: 目標値
    """
    try:
        response = supabase.table(SETTINGS_TABLE).select(
            "target_revenue, target_compliance"
        ).eq("id", SETTINGS_ROW_ID).execute()
    except Exception as e:
        raise RecordStoreError(f"目標値の取得に失敗しました: {str(e)}")

    if not response.data:
        return defaults

    row = response.data[0]
    return Thresholds(
        target_revenue=float(row["target_revenue"]),
        target_compliance=float(row["target_compliance"]),
    )


async def save_thresholds(supabase: Client, thresholds: Thresholds) -> Thresholds:
    """
    目標値を保存する（Upsert）

    Args:
        supabase: Supabaseクライアント
        thresholds: 保存する目標値

    Returns:
        Thresholds: 保存した目標値
    """
    data = {
        "id": SETTINGS_ROW_ID,
        "target_revenue": thresholds.target_revenue,
        "target_compliance": thresholds.target_compliance,
    }

    try:
        response = supabase.table(SETTINGS_TABLE).upsert(data).execute()
    except Exception as e:
        raise RecordStoreError(f"目標値の保存に失敗しました: {str(e)}")

    if not response.data:
        raise RecordStoreError("目標値の保存に失敗しました")

    audit_log.log_update("thresholds", str(SETTINGS_ROW_ID), thresholds.model_dump())
    return thresholds
