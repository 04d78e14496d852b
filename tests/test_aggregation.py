"""店舗別集計のユニットテスト"""

from __future__ import annotations

from datetime import date

import pytest

from app.schemas.quadrant import AggregationFilter
from app.schemas.record import MetricRecord
from app.schemas.store import Store
from app.services.aggregation import (
    UNKNOWN_STORE_NAME,
    aggregate,
    filter_records,
    resolve_store_name,
)


STORES = [Store(id="A", name="Loja Centro"), Store(id="B", name="Loja Norte")]


def make_record(record_id, store_id, day, revenue, compliance):
    return MetricRecord(
        id=record_id,
        store_id=store_id,
        date=day,
        revenue_score=revenue,
        compliance_score=compliance,
    )


def by_store(points):
    return {point.store_id: point for point in points}


# ── 平均と件数 ────────────────────────────────────────


class TestAverages:
    def test_two_records_one_store(self):
        records = [
            make_record("1", "A", date(2024, 5, 1), 95, 90),
            make_record("2", "A", date(2024, 6, 1), 60, 95),
        ]
        [point] = aggregate(records, STORES)

        assert point.store_id == "A"
        assert point.store_name == "Loja Centro"
        assert point.avg_revenue == pytest.approx(77.5)
        assert point.avg_compliance == pytest.approx(92.5)
        assert point.count == 2

    def test_average_is_per_record_mean(self):
        revenues = [10.0, 20.0, 45.0, 81.0]
        records = [
            make_record(str(i), "B", date(2024, i + 1, 1), revenue, 50)
            for i, revenue in enumerate(revenues)
        ]
        [point] = aggregate(records, STORES)

        assert point.avg_revenue == pytest.approx(sum(revenues) / len(revenues))
        assert point.count == len(revenues)

    def test_out_of_range_values_are_aggregated_as_given(self):
        records = [
            make_record("1", "A", date(2024, 5, 1), 150, 90),
            make_record("2", "A", date(2024, 6, 1), 130, 80),
        ]
        [point] = aggregate(records, STORES)
        assert point.avg_revenue == pytest.approx(140)

    def test_one_point_per_store(self):
        records = [
            make_record("1", "A", date(2024, 5, 1), 95, 90),
            make_record("2", "B", date(2024, 5, 2), 70, 60),
            make_record("3", "A", date(2024, 6, 1), 85, 80),
        ]
        points = by_store(aggregate(records, STORES))

        assert set(points) == {"A", "B"}
        assert points["A"].count == 2
        assert points["B"].count == 1


# ── 絞り込み ────────────────────────────────────────


class TestFiltering:
    RECORDS = [
        make_record("1", "A", date(2024, 4, 30), 50, 50),
        make_record("2", "A", date(2024, 5, 1), 90, 90),
        make_record("3", "B", date(2024, 5, 31), 70, 70),
        make_record("4", "B", date(2024, 6, 1), 10, 10),
    ]

    def test_date_range_is_inclusive_on_both_ends(self):
        filters = AggregationFilter(start_date=date(2024, 5, 1), end_date=date(2024, 5, 31))
        points = by_store(aggregate(self.RECORDS, STORES, filters))

        assert points["A"].count == 1
        assert points["A"].avg_revenue == 90
        assert points["B"].count == 1
        assert points["B"].avg_revenue == 70

    def test_store_subset(self):
        filters = AggregationFilter(store_ids={"B"})
        points = aggregate(self.RECORDS, STORES, filters)

        assert [point.store_id for point in points] == ["B"]
        assert points[0].count == 2

    @pytest.mark.parametrize("store_ids", [None, "all", ["all"]])
    def test_all_means_no_store_filtering(self, store_ids):
        filters = AggregationFilter(store_ids=store_ids)
        assert filters.store_ids is None
        assert len(filter_records(self.RECORDS, filters)) == 4

    @pytest.mark.parametrize("store_ids", [set(), [], frozenset()])
    def test_empty_selection_matches_nothing(self, store_ids):
        filters = AggregationFilter(store_ids=store_ids)

        assert filters.store_ids == frozenset()
        assert filter_records(self.RECORDS, filters) == []
        assert aggregate(self.RECORDS, STORES, filters) == []

    def test_empty_selection_combined_with_date_range(self):
        filters = AggregationFilter(
            start_date=date(2024, 5, 1), end_date=date(2024, 5, 31), store_ids=set()
        )
        assert aggregate(self.RECORDS, STORES, filters) == []

    def test_filters_combine_with_and(self):
        filters = AggregationFilter(
            start_date=date(2024, 5, 1), end_date=date(2024, 6, 30), store_ids={"A"}
        )
        assert [r.id for r in filter_records(self.RECORDS, filters)] == ["2"]

    def test_store_without_matching_records_is_omitted(self):
        filters = AggregationFilter(start_date=date(2024, 6, 1), end_date=date(2024, 6, 30))
        points = aggregate(self.RECORDS, STORES, filters)

        assert [point.store_id for point in points] == ["B"]
        assert all(point.count >= 1 for point in points)

    def test_empty_input_returns_empty_list(self):
        assert aggregate([], STORES) == []

    def test_no_matches_returns_empty_list(self):
        filters = AggregationFilter(start_date=date(2030, 1, 1), end_date=date(2030, 1, 31))
        assert aggregate(self.RECORDS, STORES, filters) == []

    def test_inverted_range_is_rejected(self):
        with pytest.raises(ValueError):
            AggregationFilter(start_date=date(2024, 6, 1), end_date=date(2024, 5, 1))


# ── 店舗名の解決 ────────────────────────────────────────


class TestStoreNames:
    def test_unknown_store_uses_placeholder_and_still_aggregates(self):
        records = [
            make_record("1", "ghost", date(2024, 5, 1), 80, 70),
            make_record("2", "ghost", date(2024, 5, 2), 60, 90),
        ]
        [point] = aggregate(records, STORES)

        assert point.store_id == "ghost"
        assert point.store_name == UNKNOWN_STORE_NAME
        assert point.count == 2

    def test_resolve_store_name(self):
        assert resolve_store_name("A", {"A": "Loja Centro"}) == "Loja Centro"
        assert resolve_store_name("Z", {"A": "Loja Centro"}) == UNKNOWN_STORE_NAME


# ── 副作用なし ────────────────────────────────────────


class TestPurity:
    def test_inputs_are_not_mutated(self):
        records = [make_record("1", "A", date(2024, 5, 1), 95, 90)]
        snapshot = [record.model_copy() for record in records]

        aggregate(records, STORES)
        aggregate(records, STORES)

        assert records == snapshot

    def test_each_call_returns_fresh_objects(self):
        records = [make_record("1", "A", date(2024, 5, 1), 95, 90)]
        first = aggregate(records, STORES)
        second = aggregate(records, STORES)

        assert first == second
        assert first[0] is not second[0]

