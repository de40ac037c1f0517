from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd


ALL_MONTHS = "all"

MONTHS: List[dict] = [
    {"id": ALL_MONTHS, "name": "Semua Bulan"},
    {"id": "01", "name": "Januari"},
    {"id": "02", "name": "Februari"},
    {"id": "03", "name": "Mac"},
    {"id": "04", "name": "April"},
    {"id": "05", "name": "Mei"},
    {"id": "06", "name": "Jun"},
    {"id": "07", "name": "Julai"},
    {"id": "08", "name": "Ogos"},
    {"id": "09", "name": "September"},
    {"id": "10", "name": "Oktober"},
    {"id": "11", "name": "November"},
    {"id": "12", "name": "Disember"},
]
MONTH_CODES = frozenset(m["id"] for m in MONTHS if m["id"] != ALL_MONTHS)

_DATE_RE = re.compile(r"^\d{4}-(\d{2})-\d{2}$")


@dataclass(frozen=True)
class FilterCriteria:
    search_text: str = ""
    month: str = ALL_MONTHS


def month_label(month: str) -> Optional[str]:
    for m in MONTHS:
        if m["id"] == month:
            return m["name"]
    return None


def normalize_filters(raw: Optional[dict]) -> FilterCriteria:
    """Build criteria from untrusted input.

    Search text is kept verbatim, so a lone space still only matches names
    that contain one. A blank or missing month means all months.
    """
    raw = raw or {}
    search_text = str(raw.get("search_text") or "")

    month = str(raw.get("month") or "").strip().lower()
    if not month:
        month = ALL_MONTHS
    elif month.isdigit() and len(month) == 1:
        month = month.zfill(2)
    return FilterCriteria(search_text=search_text, month=month)


def record_month(date: object) -> Optional[str]:
    """Month code ("01".."12") of a YYYY-MM-DD date, or None when the date is malformed."""
    if date is None or not isinstance(date, str):
        return None
    match = _DATE_RE.match(date)
    if not match or match.group(1) not in MONTH_CODES:
        return None
    return match.group(1)


def month_mask(records: pd.DataFrame, month: str) -> pd.Series:
    if month == ALL_MONTHS:
        return pd.Series(True, index=records.index, dtype=bool)
    if records.empty:
        return pd.Series(False, index=records.index, dtype=bool)
    months = records["date"].map(record_month)
    return months == month


def search_mask(records: pd.DataFrame, search_text: str) -> pd.Series:
    if not search_text:
        return pd.Series(True, index=records.index, dtype=bool)
    if records.empty:
        return pd.Series(False, index=records.index, dtype=bool)
    q = search_text.lower()
    return (
        records["institution"].astype(str).str.lower().str.contains(q, regex=False, na=False)
        | records["office"].astype(str).str.lower().str.contains(q, regex=False, na=False)
    )


def filter_by_month(records: pd.DataFrame, month: str) -> pd.DataFrame:
    return records[month_mask(records, month)]


def filter_records(records: pd.DataFrame, criteria: FilterCriteria) -> pd.DataFrame:
    """Rows matching both the search text and the month, in their original order."""
    mask = search_mask(records, criteria.search_text) & month_mask(records, criteria.month)
    return records[mask]
