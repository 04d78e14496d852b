"""
スコア計算・期間ユーティリティモジュール

標準化スコアの算出と、月単位の期間計算を提供する。

標準化スコア（compliance score）:
- 標準化・レイアウト・カルチャーの3項目の単純平均
- 小数第1位に丸める
"""
import calendar
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple, Union


# =============================================================================
# スコア計算
# =============================================================================

def calculate_compliance_score(
    standardization: float,
    layout: float,
    culture: float,
) -> float:
    """
    3つのサブスコアから標準化スコアを算出する

    標準化スコア = (標準化 + レイアウト + カルチャー) ÷ 3

    Args:
        standardization: 標準化スコア（0〜100）
        layout: レイアウトスコア（0〜100）
        culture: カルチャースコア（0〜100）

    Returns:
        float: 標準化スコア（小数第1位）

    Examples:
        >>> calculate_compliance_score(90, 80, 100)
        90.0
        >>> calculate_compliance_score(85, 90, 90)
        88.3
    """
    total = Decimal(str(standardization)) + Decimal(str(layout)) + Decimal(str(culture))
    result = (total / Decimal("3")).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(result)


# =============================================================================
# 期間計算
# =============================================================================

def to_date(value: Union[date, datetime, str]) -> date:
    """
    日付・日時・ISO文字列を日付に正規化する

    Supabaseから返る日付は文字列のため、比較前に必ず変換する。
    日時の場合は時刻を切り捨てる。
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def normalize_to_month_start(target_date: date) -> date:
    """
    日付を月初日に正規化する

    Args:
        target_date: 対象日付

    Returns:
        date: 月初日
    """
    return date(target_date.year, target_date.month, 1)


def get_month_range(target_date: date) -> Tuple[date, date]:
    """
    対象日を含む月の開始日・終了日を返す

    Examples:
        >>> get_month_range(date(2024, 2, 10))
        (date(2024, 2, 1), date(2024, 2, 29))
    """
    _, last_day = calendar.monthrange(target_date.year, target_date.month)
    return date(target_date.year, target_date.month, 1), date(target_date.year, target_date.month, last_day)


def get_current_month_range(today: Optional[date] = None) -> Tuple[date, date]:
    """
    今月の開始日・終了日を返す（クアドラントの初期表示期間）
    """
    return get_month_range(today or date.today())


def format_month(target_date: date) -> str:
    """日付を "YYYY-MM" 形式の文字列にする"""
    return f"{target_date.year:04d}-{target_date.month:02d}"
