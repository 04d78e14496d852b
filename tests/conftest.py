"""共通フィクスチャ: Supabaseテーブル操作のインメモリ代替"""

from __future__ import annotations

import copy
import uuid
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Set

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.api.deps import get_supabase_client
from app.main import app


ID_COLUMNS = {"id", "store_id"}


class FakeQuery:
    """サービス層が使うpostgrestクエリビルダーの一部を模したもの"""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.filters: List = []
        self.order_by: Optional[tuple] = None
        self.id_values: List[Any] = []

    # 操作
    def select(self, *_columns: str) -> "FakeQuery":
        self.operation = "select"
        return self

    def insert(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.operation, self.payload = "insert", payload
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.operation, self.payload = "update", payload
        return self

    def upsert(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.operation, self.payload = "upsert", payload
        return self

    def delete(self) -> "FakeQuery":
        self.operation = "delete"
        return self

    # フィルタ
    def eq(self, column: str, value: Any) -> "FakeQuery":
        if column in ID_COLUMNS:
            self.id_values.append(value)
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        if column in ID_COLUMNS:
            self.id_values.extend(values)
        allowed = set(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(check(row) for check in self.filters)

    def execute(self) -> SimpleNamespace:
        self.db.calls.append((self.table, self.operation))
        if (self.table, self.operation) in self.db.failing:
            raise APIError({"message": "connection reset", "code": "08006", "hint": None, "details": None})
        if self.db.strict_ids:
            for value in self.id_values:
                self.db.check_uuid(value)
        rows = self.db.tables.setdefault(self.table, [])

        if self.operation == "select":
            data = [copy.deepcopy(row) for row in rows if self._matches(row)]
            if self.order_by:
                column, desc = self.order_by
                data.sort(key=lambda row: row.get(column), reverse=desc)
            return SimpleNamespace(data=data)

        if self.operation == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            self.db.check_unique(self.table, row)
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])

        if self.operation == "upsert":
            for existing in rows:
                if existing.get("id") == self.payload.get("id"):
                    existing.update(self.payload)
                    return SimpleNamespace(data=[copy.deepcopy(existing)])
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[dict(self.payload)])

        if self.operation == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    candidate = {**row, **self.payload}
                    self.db.check_unique(self.table, candidate, ignore_id=row["id"])
                    row.update(self.payload)
                    updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated)

        if self.operation == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=removed)

        raise AssertionError(f"unsupported operation {self.operation}")


class FakeSupabase:
    """
    (store_id, month) の一意インデックスを持つ最小限のインメモリDB

    strict_ids を有効にすると、uuid列に変換できない値での検索を
    PostgRESTと同じく 22P02 エラーにする。failing に (テーブル, 操作) を
    追加するとその操作が失敗する。
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            "stores": [],
            "metric_records": [],
            "dashboard_settings": [],
        }
        self.calls: List[tuple] = []
        self.strict_ids = False
        self.failing: Set[tuple] = set()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def check_unique(self, table: str, row: Dict[str, Any], ignore_id: Any = None) -> None:
        if table != "metric_records":
            return
        for existing in self.tables[table]:
            if existing["id"] == ignore_id:
                continue
            if existing["store_id"] == row["store_id"] and existing["month"] == row["month"]:
                raise APIError({
                    "message": 'duplicate key value violates unique constraint "metric_records_store_month_key"',
                    "code": "23505",
                    "hint": None,
                    "details": None,
                })

    def check_uuid(self, value: Any) -> None:
        try:
            uuid.UUID(str(value))
        except ValueError:
            raise APIError({
                "message": f'invalid input syntax for type uuid: "{value}"',
                "code": "22P02",
                "hint": None,
                "details": None,
            })

    # テストデータ投入
    def add_store(self, name: str, store_id: Optional[str] = None) -> str:
        store_id = store_id or str(uuid.uuid4())
        self.tables["stores"].append({"id": store_id, "name": name})
        return store_id

    def add_record(
        self,
        store_id: str,
        date: str,
        revenue_score: float,
        compliance_score: float,
        record_id: Optional[str] = None,
    ) -> str:
        record_id = record_id or str(uuid.uuid4())
        self.tables["metric_records"].append({
            "id": record_id,
            "store_id": store_id,
            "date": date,
            "month": date[:8] + "01",
            "revenue_score": revenue_score,
            "compliance_score": compliance_score,
            "standardization": compliance_score,
            "layout": compliance_score,
            "culture": compliance_score,
        })
        return record_id


@pytest.fixture()
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture()
def client(fake_supabase: FakeSupabase):
    app.dependency_overrides[get_supabase_client] = lambda: fake_supabase
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
