"""Search and month filtering over record frames."""

import pytest

from maintenance_dashboard.data import Record, records_frame
from maintenance_dashboard.filters import (
    ALL_MONTHS,
    MONTHS,
    FilterCriteria,
    filter_by_month,
    filter_records,
    month_label,
    normalize_filters,
    record_month,
)


# ── Worked examples ───────────────────────────────────────────────────────────

def test_matching_month_keeps_all_rows(may_records):
    out = filter_records(may_records, FilterCriteria(search_text="", month="05"))
    assert out["id"].tolist() == ["REQ-1001", "REQ-1002", "REQ-1003"]


def test_search_is_case_insensitive_on_office(may_records):
    out = filter_records(may_records, FilterCriteria(search_text="sandakan", month=ALL_MONTHS))
    assert out["id"].tolist() == ["REQ-1002"]
    assert out["office"].tolist() == ["Sandakan"]


def test_other_month_returns_empty(may_records):
    out = filter_records(may_records, FilterCriteria(search_text="", month="07"))
    assert out.empty
    assert list(out.columns) == list(may_records.columns)


def test_invalid_month_date_only_passes_under_all():
    records = records_frame([Record("REQ-9", "SK Muhibbah", "Tawau", "MP", "Completed", "2024-13-40")])
    assert filter_records(records, FilterCriteria(month="13")).empty
    assert filter_records(records, FilterCriteria(month=ALL_MONTHS))["id"].tolist() == ["REQ-9"]


# ── Search predicate ──────────────────────────────────────────────────────────

def test_search_matches_institution_substring(may_records):
    out = filter_records(may_records, FilterCriteria(search_text="smk"))
    assert out["id"].tolist() == ["REQ-1002", "REQ-1003"]


def test_search_is_literal_not_regex(mock_records):
    # Every fifth mock school carries a "(P)" suffix.
    out = filter_records(mock_records, FilterCriteria(search_text="(p)"))
    assert len(out) == 40
    assert out["institution"].str.endswith("(P)").all()


def test_search_and_month_combine(mixed_records):
    out = filter_records(mixed_records, FilterCriteria(search_text="tawau", month="02"))
    assert out["id"].tolist() == ["REQ-2", "REQ-5"]
    out = filter_records(mixed_records, FilterCriteria(search_text="tawau", month="01"))
    assert out.empty


def test_search_with_no_hits(mixed_records):
    assert filter_records(mixed_records, FilterCriteria(search_text="keningau")).empty


# ── Properties ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "criteria",
    [
        FilterCriteria(),
        FilterCriteria(search_text="sk"),
        FilterCriteria(month="02"),
        FilterCriteria(search_text="a", month="01"),
        FilterCriteria(month="13"),
    ],
)
def test_filter_is_idempotent_and_order_preserving(mixed_records, criteria):
    once = filter_records(mixed_records, criteria)
    twice = filter_records(once, criteria)
    assert once.equals(twice)
    positions = [mixed_records.index.get_loc(i) for i in once.index]
    assert positions == sorted(positions)


def test_filter_does_not_mutate_input(mixed_records):
    before = mixed_records.copy()
    filter_records(mixed_records, FilterCriteria(search_text="ranau", month="01"))
    assert mixed_records.equals(before)


def test_filter_empty_collection():
    empty = records_frame([])
    assert filter_records(empty, FilterCriteria(search_text="x", month="05")).empty
    assert filter_records(empty, FilterCriteria()).empty


def test_filter_by_month_ignores_search(mixed_records):
    out = filter_by_month(mixed_records, "01")
    assert out["id"].tolist() == ["REQ-1", "REQ-3"]
    assert len(filter_by_month(mixed_records, ALL_MONTHS)) == len(mixed_records)


# ── Helpers ───────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "date, expected",
    [
        ("2024-05-03", "05"),
        ("2024-12-31", "12"),
        ("2024-13-40", None),
        ("2024-00-01", None),
        ("2024/05/03", None),
        ("05-03-2024", None),
        ("", None),
        (None, None),
    ],
)
def test_record_month(date, expected):
    assert record_month(date) == expected


def test_normalize_filters_defaults():
    assert normalize_filters({}) == FilterCriteria(search_text="", month=ALL_MONTHS)
    assert normalize_filters(None) == FilterCriteria()


def test_normalize_filters_cleans_month():
    f = normalize_filters({"search_text": "Sandakan", "month": "5"})
    assert f == FilterCriteria(search_text="Sandakan", month="05")
    assert normalize_filters({"month": "ALL"}).month == ALL_MONTHS
    assert normalize_filters({"month": ""}).month == ALL_MONTHS


def test_whitespace_search_is_literal(may_records):
    f = normalize_filters({"search_text": " "})
    assert f.search_text == " "
    # "SK St Francis", "SMK Elopura", "SMK Likas" and "Kota Kinabalu" all contain a space.
    assert filter_records(may_records, f)["id"].tolist() == ["REQ-1001", "REQ-1002", "REQ-1003"]
    padded = normalize_filters({"search_text": " Sandakan"})
    assert filter_records(may_records, padded).empty


def test_normalize_filters_keeps_unknown_month():
    assert normalize_filters({"month": "13"}).month == "13"


def test_month_options():
    assert len(MONTHS) == 13
    assert MONTHS[0] == {"id": ALL_MONTHS, "name": "Semua Bulan"}
    assert [m["id"] for m in MONTHS[1:]] == [f"{i:02d}" for i in range(1, 13)]
    assert month_label("03") == "Mac"
    assert month_label("13") is None
