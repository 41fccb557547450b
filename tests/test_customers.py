"""Tests for month bucketing, the customer index and the selection layer."""

from __future__ import annotations

import pytest

from analytics.customers import build_customer_index
from analytics.dates import (
    MALFORMED_DATE_LABEL,
    OTHER_DATE_LABEL,
    UNKNOWN_LABEL,
    UNKNOWN_MONTH_KEY,
    bucket_sort_key,
    format_year_month,
    month_bucket_label,
    normalize_month_key,
)
from analytics.selection import customer_months, customer_types, default_month, filtered_customers
from analytics.summary import build_product_summary, summarize


@pytest.mark.parametrize(
    ("raw", "label"),
    [
        ("2024-03-05", "2024年3月"),
        ("2024/03/05", "2024年3月"),
        ("2024-11-30 08:15:00", "2024年11月"),
        ("2024-3", "2024年3月"),
        ("not-a-date", OTHER_DATE_LABEL),
        ("2024-xx-01", OTHER_DATE_LABEL),
        (45000, MALFORMED_DATE_LABEL),
        ("2024年3月5日", OTHER_DATE_LABEL),
        ("", OTHER_DATE_LABEL),
        (None, UNKNOWN_LABEL),
    ],
)
def test_month_bucket_label(raw, label):
    assert month_bucket_label(raw) == label


def test_unhashable_dates_do_not_raise():
    assert month_bucket_label(["2024", "03"]) == MALFORMED_DATE_LABEL
    assert normalize_month_key({"date": "2024-03-05"}) == UNKNOWN_MONTH_KEY


def test_date_without_separators_lands_in_other_bucket():
    assert month_bucket_label("20240305") == OTHER_DATE_LABEL
    assert normalize_month_key("20240305") == UNKNOWN_MONTH_KEY


def test_not_a_date_scenario():
    assert month_bucket_label("not-a-date") == OTHER_DATE_LABEL
    assert normalize_month_key("not-a-date") == UNKNOWN_MONTH_KEY


@pytest.mark.parametrize(
    ("raw", "key"),
    [
        ("2024-03-05", "2024-03"),
        ("2024/3/5", "2024-03"),
        ("2024.12.01", "2024-12"),
        ("2024年3月5日", "2024-03"),
        ("2024-03", UNKNOWN_MONTH_KEY),
        ("March 2024", UNKNOWN_MONTH_KEY),
    ],
)
def test_normalize_month_key(raw, key):
    assert normalize_month_key(raw) == key


def test_month_parsers_are_pure():
    for raw in ("2024-03-05", "2024年3月5日", "garbage", ""):
        assert month_bucket_label(raw) == month_bucket_label(raw)
        assert normalize_month_key(raw) == normalize_month_key(raw)


def test_bucket_sort_key_and_year_month_format():
    assert bucket_sort_key("2024年3月") == 202403
    assert bucket_sort_key(OTHER_DATE_LABEL) == 0
    assert format_year_month("2024-01") == "2024年1月"
    assert format_year_month("Unknown") == "Unknown"


def test_index_orders_customers_by_last_activity(sample_records):
    index = build_customer_index(sample_records)

    assert index.customers == ("A", "B")
    assert index.last_activity["A"] == "2024-03-20"
    assert index.last_activity["B"] == "2024-01-10"
    assert summarize(index.bucket("A", "2024年3月")) == {"quantity": 3.0, "amount": 150.0}


def test_index_keeps_every_record_exactly_once(record_factory):
    records = [
        record_factory("A", "2024-01-02"),
        record_factory("", "2024-01-03"),
        record_factory("B", "2024/02/01"),
        record_factory("A", "bad"),
        record_factory("A", "2024-01-09"),
        record_factory("C", "2023-12-31"),
    ]

    index = build_customer_index(records)

    assert index.record_count() == 5
    assert "" not in index
    assert [r.date for r in index.bucket("A", "2024年1月")] == ["2024-01-02", "2024-01-09"]
    assert index.bucket("A", OTHER_DATE_LABEL)[0].date == "bad"
    assert len(index.records) == len(records)


def test_first_seen_customer_type_wins(record_factory):
    records = [
        record_factory("A", "2024-01-02", customer_type="现金客户"),
        record_factory("A", "2024-02-02", customer_type="月结客户"),
    ]

    index = build_customer_index(records)

    assert index.customer_types["A"] == "现金客户"


def test_ties_keep_encounter_order(record_factory):
    records = [
        record_factory("Zed", "2024-01-02"),
        record_factory("Amy", "2024-01-02"),
        record_factory("Bob", "2024-05-01"),
    ]

    index = build_customer_index(records)

    assert index.customers == ("Bob", "Zed", "Amy")


def test_filtered_customers_by_type_and_search(record_factory):
    records = [
        record_factory("Acme Trading", "2024-03-01", customer_type="月结客户"),
        record_factory("Beta Plastics", "2024-02-01", customer_type="现金客户"),
        record_factory("acme outlet", "2024-01-01", customer_type="现金客户"),
    ]
    index = build_customer_index(records)

    assert filtered_customers(index) == ["Acme Trading", "Beta Plastics", "acme outlet"]
    assert filtered_customers(index, "现金客户") == ["Beta Plastics", "acme outlet"]
    assert filtered_customers(index, search_term="ACME") == ["Acme Trading", "acme outlet"]
    assert filtered_customers(index, "现金客户", "acme") == ["acme outlet"]
    assert customer_types(index) == ["月结客户", "现金客户"]


def test_customer_months_newest_first_with_sentinels_last(record_factory):
    records = [
        record_factory("A", "odd"),
        record_factory("A", "2023-12-01"),
        record_factory("A", "2024-02-01"),
        record_factory("A", "2024-10-01"),
    ]
    index = build_customer_index(records)

    assert customer_months(index, "A") == ["2024年10月", "2024年2月", "2023年12月", OTHER_DATE_LABEL]
    assert default_month(index, "A") == "2024年10月"
    assert customer_months(index, "missing") == []
    assert default_month(index, None) is None


def test_summarize_is_additive(record_factory):
    left = [record_factory("A", "2024-01-01", quantity=1.5, amount=12.25)]
    right = [record_factory("A", "2024-01-02", quantity=2.0, amount=7.75)]

    combined = summarize(left + right)

    assert combined["quantity"] == pytest.approx(summarize(left)["quantity"] + summarize(right)["quantity"])
    assert combined["amount"] == pytest.approx(summarize(left)["amount"] + summarize(right)["amount"])
    assert summarize([]) == {"quantity": 0.0, "amount": 0.0}


def test_product_summary_groups_by_product_spec_unit(record_factory):
    records = [
        record_factory("A", "2024-01-01", product_name="Pipe", spec="20mm", quantity=3, amount=30.0),
        record_factory("B", "2024-01-02", product_name="Pipe", spec="20mm", quantity=1, amount=12.0),
        record_factory("A", "2024-01-03", product_name="Valve", spec="1in", quantity=2, amount=100.0),
        record_factory("A", "2024-01-04", product_name="Bolt", spec="M6", quantity=0, amount=0.0),
    ]

    rows = build_product_summary(records)

    assert [row["product_name"] for row in rows] == ["Valve", "Pipe", "Bolt"]
    pipe = rows[1]
    assert pipe["quantity"] == pytest.approx(4.0)
    assert pipe["amount"] == pytest.approx(42.0)
    assert pipe["average_price"] == pytest.approx(10.5)
    assert pipe["customers"] == "A, B"
    assert rows[2]["average_price"] == 0.0
