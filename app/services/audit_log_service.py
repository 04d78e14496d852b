"""
監査ログサービス
店舗・実績・目標値の変更を記録
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.core.config import settings

# 監査ログ用のロガー設定
audit_logger = logging.getLogger("audit")
audit_logger.setLevel(logging.INFO)

if not audit_logger.handlers:
    # コンソールハンドラ（コンテナ環境ではこれがログに出力される）
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    audit_logger.addHandler(console_handler)


class AuditLogService:
    """監査ログを記録するサービス"""

    @staticmethod
    def log_action(
        action: str,
        resource: str,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        success: bool = True,
    ) -> Optional[Dict[str, Any]]:
        """
        アクションを監査ログに記録

        Args:
            action: 実行されたアクション（CREATE, UPDATE, DELETE 等）
            resource: 操作対象リソース（store, metric_record, thresholds）
            resource_id: リソースID
            details: 追加の詳細情報
            success: 成功したかどうか

        Returns:
            Optional[Dict[str, Any]]: 記録したログエントリ（無効時はNone）
        """
        if not settings.ENABLE_AUDIT_LOG:
            return None

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "success": success,
            "resource": resource,
            "resource_id": resource_id,
        }
        if details:
            log_entry["details"] = details

        status_str = "SUCCESS" if success else "FAILED"
        audit_logger.info(
            f"{status_str} | {action} | resource:{resource} | id:{resource_id or 'N/A'}"
            + (f" | {details}" if details else "")
        )
        return log_entry

    # 便利メソッド
    @staticmethod
    def log_create(resource: str, resource_id: str, details: Optional[Dict[str, Any]] = None):
        return AuditLogService.log_action("CREATE", resource, resource_id, details)

    @staticmethod
    def log_update(resource: str, resource_id: str, details: Optional[Dict[str, Any]] = None):
        return AuditLogService.log_action("UPDATE", resource, resource_id, details)

    @staticmethod
    def log_delete(resource: str, resource_id: str, details: Optional[Dict[str, Any]] = None):
        return AuditLogService.log_action("DELETE", resource, resource_id, details)

    @staticmethod
    def log_conflict(action: str, resource: str, details: Dict[str, Any]):
        """一意制約違反で拒否した書き込みを記録"""
        return AuditLogService.log_action(action, resource, details=details, success=False)


# シングルトンインスタンス
audit_log = AuditLogService()
