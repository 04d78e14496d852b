"""
ドメイン例外モジュール

店舗・実績データの永続化層で発生するエラーを定義する。
各例外はHTTPステータスコードを保持し、エンドポイントでHTTPExceptionに変換される。
"""
from postgrest.exceptions import APIError


# PostgreSQLの型変換エラー（uuid列に不正な文字列を渡した場合など）
INVALID_TEXT_REPRESENTATION = "22P02"


class RecordStoreError(Exception):
    """
    データストアエラー

    Supabaseへの読み書きに失敗した場合に発生する例外。
    """

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(RecordStoreError):
    """対象の店舗・実績が存在しない"""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class DuplicateRecordError(RecordStoreError):
    """
    同一店舗・同一月の実績重複エラー

    (store_id, 月) の一意制約違反を表す。事前チェックでの検出と、
    DBの一意インデックス違反（同時書き込み）の両方で発生する。
    """

    DEFAULT_MESSAGE = "a record already exists for this store this month"

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message, status_code=409)


def is_invalid_id(error: Exception) -> bool:
    """
    IDの形式不正によるSupabaseエラーか判定する

    uuid列に変換できない値で検索した場合、該当データは存在し得ないため
    呼び出し側では NotFoundError として扱う。
    """
    return isinstance(error, APIError) and error.code == INVALID_TEXT_REPRESENTATION
