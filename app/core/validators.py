"""
入力バリデーション用ユーティリティ
"""
import re
from datetime import date
from typing import Optional, Set

from fastapi import HTTPException, status


# 店舗フィルタで「全店舗」を表す値
ALL_STORES = "all"


class InputValidator:
    """クエリパラメータ・入力値のバリデーション"""

    # 許可される年の範囲
    MIN_YEAR = 2000
    MAX_YEAR = 2100

    MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")

    @staticmethod
    def validate_year(year: int) -> int:
        """年の妥当性を検証"""
        if not InputValidator.MIN_YEAR <= year <= InputValidator.MAX_YEAR:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"年は{InputValidator.MIN_YEAR}から{InputValidator.MAX_YEAR}の範囲で指定してください"
            )
        return year

    @staticmethod
    def validate_month(month: int) -> int:
        """月の妥当性を検証"""
        if not 1 <= month <= 12:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="月は1から12の範囲で指定してください"
            )
        return month

    @staticmethod
    def parse_month(value: str) -> date:
        """
        "YYYY-MM" 形式の文字列を月初日に変換する

        Args:
            value: 対象月文字列

        Returns:
            date: 月初日

        Raises:
            HTTPException(400): 形式が不正な場合
        """
        match = InputValidator.MONTH_PATTERN.match(value.strip())
        if not match:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="対象月は YYYY-MM 形式で指定してください"
            )
        year = InputValidator.validate_year(int(match.group(1)))
        month = InputValidator.validate_month(int(match.group(2)))
        return date(year, month, 1)

    @staticmethod
    def validate_date_range(start_date: date, end_date: date) -> None:
        """期間の開始日が終了日以前であることを検証"""
        if start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="開始日は終了日以前の日付を指定してください"
            )

    @staticmethod
    def parse_store_ids(value: Optional[str]) -> Optional[Set[str]]:
        """
        カンマ区切りの店舗IDを集合に変換する

        未指定・空・"all" を含む場合は None（店舗で絞り込まない）を返す。
        """
        if not value:
            return None
        ids = {item.strip() for item in value.split(",") if item.strip()}
        if not ids or ALL_STORES in ids:
            return None
        return ids


validator = InputValidator()
