"""Unit tests for AR/AP aging"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal
from finrisk_engine.domain.aging import (
    calculate_aging_bucket,
    calculate_aging_days,
    classify_aging_record,
    classify_aging_records,
    determine_risk_level,
    determine_status,
    summarize_aging,
)
from finrisk_engine.domain.exceptions import InvalidAgingRecord

MATERIALITY = Decimal("50000")


def test_calculate_aging_days(as_of):
    assert calculate_aging_days(date(2025, 3, 10), as_of) == 5
    assert calculate_aging_days(as_of, as_of) == 0
    assert calculate_aging_days(date(2025, 3, 20), as_of) == -5


def test_aging_days_across_year_boundary():
    """December invoice checked in January is 21 days late, not negative"""
    assert calculate_aging_days(date(2024, 12, 20), date(2025, 1, 10)) == 21


@pytest.mark.parametrize(
    "days, bucket",
    [
        (-10, "0-30"),
        (0, "0-30"),
        (30, "0-30"),
        (31, "30-60"),
        (60, "30-60"),
        (61, "60-90"),
        (90, "60-90"),
        (91, "90+"),
        (400, "90+"),
    ],
)
def test_calculate_aging_bucket(days, bucket):
    assert calculate_aging_bucket(days) == bucket


def test_determine_status():
    assert determine_status(45, settled=True) == "paid"
    assert determine_status(5, settled=False) == "overdue"
    assert determine_status(0, settled=False) == "outstanding"
    assert determine_status(-3, settled=False) == "outstanding"


@pytest.mark.parametrize(
    "bucket, amount, days, settled, level",
    [
        ("0-30", "1000", 10, False, "low"),
        ("0-30", "50000", 10, False, "medium"),
        ("0-30", "100000", 10, False, "high"),
        ("30-60", "1000", 45, False, "medium"),
        ("60-90", "1000", 75, False, "high"),
        ("60-90", "100000", 75, False, "critical"),
        ("90+", "10", 120, False, "critical"),
        ("0-30", "500000", -5, False, "low"),
        ("90+", "500000", 200, True, "low"),
    ],
)
def test_determine_risk_level(bucket, amount, days, settled, level):
    """Age sets the base tier, size escalates only overdue balances"""
    assert determine_risk_level(bucket, Decimal(amount), days, settled, MATERIALITY) == level


def test_classify_aging_record(make_item, as_of):
    item = make_item("1000", date(2025, 1, 1))
    record = classify_aging_record(item, as_of, MATERIALITY)

    assert record.item_id == item.item_id
    assert record.aging_days == 73
    assert record.aging_bucket == "60-90"
    assert record.status == "overdue"
    assert record.risk_level == "high"
    assert record.current_amount == Decimal("1000")
    # Source item untouched
    assert item.due_date == date(2025, 1, 1)


def test_classify_aging_record_settled(make_item, as_of):
    record = classify_aging_record(make_item("90000", date(2024, 10, 1), settled=True), as_of, MATERIALITY)
    assert record.status == "paid"
    assert record.aging_bucket == "90+"
    assert record.risk_level == "low"


def test_classify_aging_record_missing_fields(make_item, as_of):
    with pytest.raises(InvalidAgingRecord):
        classify_aging_record(make_item("10", None), as_of, MATERIALITY)

    item = replace(make_item("10", date(2025, 3, 1)), current_amount=None)
    with pytest.raises(InvalidAgingRecord):
        classify_aging_record(item, as_of, MATERIALITY)


def test_classify_aging_records_oldest_first(make_item, as_of):
    items = [
        make_item("100", date(2025, 3, 10)),
        make_item("200", date(2024, 12, 1)),
        make_item("300", date(2025, 4, 30)),
        make_item("400", date(2025, 3, 10)),
    ]
    records = classify_aging_records(items, as_of, MATERIALITY)

    assert [r.current_amount for r in records] == [
        Decimal("200"),
        Decimal("100"),
        Decimal("400"),
        Decimal("300"),
    ]


def test_classify_aging_records_rejects_batch_with_missing_due_date(make_item, as_of):
    items = [make_item("100", date(2025, 3, 10)), make_item("200", None)]
    with pytest.raises(InvalidAgingRecord):
        classify_aging_records(items, as_of, MATERIALITY)


def test_summarize_aging(make_item, as_of):
    items = [
        make_item("100", date(2025, 3, 10)),   # 5 days
        make_item("300", date(2025, 1, 29)),   # 45 days
        make_item("600", date(2024, 11, 15)),  # 120 days
    ]
    summary = summarize_aging(classify_aging_records(items, as_of, MATERIALITY), "ar")

    assert summary.report_type == "ar"
    assert summary.total_amount == Decimal("1000")
    assert summary.total_count == 3
    assert [b.bucket for b in summary.buckets] == ["0-30", "30-60", "60-90", "90+"]
    assert [b.amount for b in summary.buckets] == [Decimal("100"), Decimal("300"), 0, Decimal("600")]
    assert [b.count for b in summary.buckets] == [1, 1, 0, 1]
    assert [b.percentage for b in summary.buckets] == [
        Decimal("10.00"),
        Decimal("30.00"),
        Decimal("0.00"),
        Decimal("60.00"),
    ]
    assert summary.overdue_amount == Decimal("1000")
    assert summary.overdue_count == 3
    assert summary.overdue_percentage == Decimal("100.00")
    assert summary.average_aging_days == 57


def test_summarize_aging_excludes_paid_and_current_from_overdue(make_item, as_of):
    items = [
        make_item("250", date(2025, 2, 1)),
        make_item("250", date(2025, 2, 1), settled=True),
        make_item("500", date(2025, 4, 1)),
    ]
    summary = summarize_aging(classify_aging_records(items, as_of, MATERIALITY), "ap")

    assert summary.overdue_amount == Decimal("250")
    assert summary.overdue_count == 1
    assert summary.overdue_percentage == Decimal("25.00")


def test_summarize_aging_empty():
    summary = summarize_aging([], "ap")

    assert summary.total_amount == 0
    assert summary.total_count == 0
    assert summary.average_aging_days == 0
    assert summary.overdue_percentage == Decimal("0.00")
    assert all(b.percentage == 0 for b in summary.buckets)
