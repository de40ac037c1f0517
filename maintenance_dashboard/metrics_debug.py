from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from maintenance_dashboard.filters import FilterCriteria, record_month
from maintenance_dashboard.summary import CANONICAL_CATEGORIES


def compute_debug(filters: FilterCriteria, ctx: Dict[str, Any], store_info: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    records: pd.DataFrame = ctx.get("records", pd.DataFrame())
    payload: Dict[str, Any] = {
        "filters": asdict(filters),
        "store": store_info or {},
        "row_counts": {
            "records": int(len(records)),
            "month_records": int(len(ctx.get("month_records", pd.DataFrame()))),
            "filtered_records": int(len(ctx.get("filtered_records", pd.DataFrame()))),
        },
        "malformed_dates": [],
        "duplicate_ids": [],
        "non_canonical_categories": {},
        "month_coverage": {},
    }
    if records.empty:
        return payload

    months = records["date"].map(record_month)
    bad = records[months.isna()]
    payload["malformed_dates"] = bad[["id", "date"]].to_dict(orient="records")
    payload["month_coverage"] = {str(k): int(v) for k, v in months.dropna().value_counts().sort_index().items()}

    dupes = records["id"][records["id"].duplicated(keep=False)]
    payload["duplicate_ids"] = sorted(dupes.unique().tolist())

    odd = records[~records["category"].isin(CANONICAL_CATEGORIES)]
    if not odd.empty:
        payload["non_canonical_categories"] = {str(k): int(v) for k, v in odd["category"].value_counts().items()}
    return payload
