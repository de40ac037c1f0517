from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from maintenance_dashboard.charts import category_donut, office_bar, to_vega_spec
from maintenance_dashboard.data import RECORD_COLUMNS, DashboardSettings
from maintenance_dashboard.filters import ALL_MONTHS, FilterCriteria, month_label
from maintenance_dashboard.summary import CANONICAL_CATEGORIES, SummaryStats, summarize, top_office


def _total_caption(month: str) -> str:
    if month == ALL_MONTHS:
        return "Permohonan setakat ini"
    label = month_label(month)
    return f"Permohonan bagi {label}" if label else "Permohonan"


def record_rows(records: pd.DataFrame) -> List[Dict[str, Any]]:
    if records.empty:
        return []
    return records[RECORD_COLUMNS].to_dict(orient="records")


def compute_overview(
    filters: FilterCriteria,
    ctx: Dict[str, Any],
    settings: Optional[DashboardSettings] = None,
) -> Dict[str, Any]:
    settings = settings or DashboardSettings()
    filtered: pd.DataFrame = ctx.get("filtered_records", pd.DataFrame())
    stats: Optional[SummaryStats] = ctx.get("summary")
    if stats is None:
        stats = summarize(ctx.get("month_records", pd.DataFrame(columns=RECORD_COLUMNS)))

    busiest = top_office(stats)
    cards = {
        "total": {"value": stats.total, "caption": _total_caption(filters.month)},
        "top_office": {"name": busiest.name, "count": busiest.count} if busiest else None,
        "filtered_count": int(len(filtered)),
        "category_count": len(CANONICAL_CATEGORIES),
    }

    charts = {
        "by_category": to_vega_spec(category_donut(stats)),
        "by_office": to_vega_spec(office_bar(stats, top_n=settings.top_offices)),
    }

    return {
        "filters": asdict(filters),
        "cards": cards,
        "by_category": [asdict(c) for c in stats.by_category],
        "by_office": [asdict(o) for o in stats.by_office[: settings.top_offices]],
        "charts": charts,
        "records": record_rows(filtered),
    }
