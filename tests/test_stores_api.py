"""店舗管理APIのテスト"""

from __future__ import annotations


class TestStoreCRUD:
    def test_create_and_list_sorted_by_name(self, client, fake_supabase):
        for name in ("Norte", "  Centro  ", "Sul"):
            response = client.post("/api/v1/stores/", json={"name": name})
            assert response.status_code == 201

        response = client.get("/api/v1/stores/")
        assert response.status_code == 200
        assert [store["name"] for store in response.json()] == ["Centro", "Norte", "Sul"]

    def test_blank_name_rejected(self, client):
        response = client.post("/api/v1/stores/", json={"name": "   "})
        assert response.status_code == 422

    def test_rename(self, client, fake_supabase):
        store_id = fake_supabase.add_store("Centro")

        response = client.put(f"/api/v1/stores/{store_id}", json={"name": "Centro Novo"})

        assert response.status_code == 200
        assert response.json() == {"id": store_id, "name": "Centro Novo"}

    def test_rename_missing_store(self, client):
        response = client.put("/api/v1/stores/missing", json={"name": "X"})
        assert response.status_code == 404

    def test_delete_does_not_cascade_to_records(self, client, fake_supabase):
        store_id = fake_supabase.add_store("Centro")
        fake_supabase.add_record(store_id, "2024-05-10", 90, 90)
        fake_supabase.add_record(store_id, "2024-06-10", 80, 80)

        response = client.delete(f"/api/v1/stores/{store_id}")

        assert response.status_code == 200
        assert response.json() == {"id": store_id, "orphaned_record_count": 2}
        assert fake_supabase.tables["stores"] == []
        assert len(fake_supabase.tables["metric_records"]) == 2

    def test_delete_missing_store(self, client):
        assert client.delete("/api/v1/stores/missing").status_code == 404

    def test_orphaned_records_listed_as_unknown_store(self, client, fake_supabase):
        store_id = fake_supabase.add_store("Centro")
        fake_supabase.add_record(store_id, "2024-05-10", 90, 90)
        client.delete(f"/api/v1/stores/{store_id}")

        response = client.get("/api/v1/records/", params={"month": "2024-05"})

        assert response.json()["items"][0]["store_name"] == "Unknown Store"

    def test_name_keeps_punctuation(self, client):
        response = client.post("/api/v1/stores/", json={"name": "  Loja D'Avila; <Centro> \"2\"  "})

        assert response.status_code == 201
        assert response.json()["name"] == "Loja D'Avila; <Centro> \"2\""
        assert [store["name"] for store in client.get("/api/v1/stores/").json()] == [
            "Loja D'Avila; <Centro> \"2\""
        ]

    def test_rename_keeps_punctuation(self, client, fake_supabase):
        store_id = fake_supabase.add_store("Centro")

        response = client.put(f"/api/v1/stores/{store_id}", json={"name": "O'Brien & Filhos"})

        assert response.json()["name"] == "O'Brien & Filhos"
        assert fake_supabase.tables["stores"][0]["name"] == "O'Brien & Filhos"

    def test_failed_record_count_keeps_store(self, client, fake_supabase):
        store_id = fake_supabase.add_store("Centro")
        fake_supabase.add_record(store_id, "2024-05-10", 90, 90)
        fake_supabase.failing.add(("metric_records", "select"))

        response = client.delete(f"/api/v1/stores/{store_id}")

        assert response.status_code == 500
        assert [store["id"] for store in fake_supabase.tables["stores"]] == [store_id]
        assert ("stores", "delete") not in fake_supabase.calls


# ── 不正な形式のID ────────────────────────────────────────


class TestMalformedStoreId:
    def test_rename_unparseable_id(self, client, fake_supabase):
        fake_supabase.strict_ids = True

        response = client.put("/api/v1/stores/abc", json={"name": "X"})

        assert response.status_code == 404

    def test_delete_unparseable_id(self, client, fake_supabase):
        fake_supabase.strict_ids = True
        fake_supabase.add_store("Centro")

        assert client.delete("/api/v1/stores/abc").status_code == 404
        assert len(fake_supabase.tables["stores"]) == 1
