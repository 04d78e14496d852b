"""
店舗スキーマ

店舗マスタのPydanticスキーマを定義する。
"""
from pydantic import BaseModel, Field, field_validator


class Store(BaseModel):
    """店舗"""
    id: str = Field(..., description="店舗ID")
    name: str = Field(..., description="店舗名")


class StoreInput(BaseModel):
    """店舗登録・名称変更入力"""
    name: str = Field(..., max_length=100, description="店舗名")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("店舗名を入力してください")
        return value


class StoreDeleteResult(BaseModel):
    """
    店舗削除結果

    店舗を削除しても実績は削除されない。
    残った実績は集計時に "Unknown Store" として扱われる。
    """
    id: str = Field(..., description="削除した店舗ID")
    orphaned_record_count: int = Field(default=0, description="削除後も残る実績件数")
