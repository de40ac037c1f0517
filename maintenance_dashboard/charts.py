from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

from maintenance_dashboard.summary import SummaryStats

alt.data_transformers.disable_max_rows()

CATEGORY_COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042"]


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def category_donut(stats: SummaryStats) -> alt.Chart:
    df = pd.DataFrame([{"label": c.label, "count": c.count} for c in stats.by_category], columns=["label", "count"])
    total = int(df["count"].sum()) if not df.empty else 0
    df["share"] = df["count"] / total if total else 0.0
    labels: List[str] = df["label"].tolist()
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=70, outerRadius=100, padAngle=0.05)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color(
                "label:N",
                title="Kategori",
                sort=labels,
                scale=alt.Scale(domain=labels, range=CATEGORY_COLORS),
                legend=alt.Legend(orient="bottom"),
            ),
            tooltip=["label", "count", alt.Tooltip("share:Q", format=".0%")],
        )
        .properties(height=300)
    )


def office_bar(stats: SummaryStats, top_n: int = 8) -> alt.Chart:
    df = pd.DataFrame([{"name": o.name, "count": o.count} for o in stats.by_office[:top_n]], columns=["name", "count"])
    return (
        alt.Chart(df)
        .mark_bar(color="#3b82f6", cornerRadiusEnd=6, size=18)
        .encode(
            y=alt.Y("name:N", title=None, sort=df["name"].tolist() or None, axis=alt.Axis(labelLimit=110)),
            x=alt.X("count:Q", title="Permohonan", axis=alt.Axis(format="d", gridDash=[3, 3])),
            tooltip=["name", "count"],
        )
        .properties(height=300)
    )
