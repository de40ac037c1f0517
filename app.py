import asyncio
from contextlib import contextmanager
from functools import partial
from typing import Optional

import altair as alt
import pandas as pd
import streamlit as st

from maintenance_dashboard.charts import category_donut, office_bar
from maintenance_dashboard.data import DashboardSettings, fetch_records, prepare_context
from maintenance_dashboard.filters import MONTHS, FilterCriteria, normalize_filters
from maintenance_dashboard.metrics_overview import compute_overview
from maintenance_dashboard.store import LoadStatus, RecordStore

alt.data_transformers.disable_max_rows()

SETTINGS = DashboardSettings()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #2563eb;font-size: 0.75rem;font-weight: 700;letter-spacing: 0.2em;text-transform: uppercase;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .card-actions {font-size: 0.9rem;color: #2563eb;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
            <div class="card-actions">{actions or ""}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def get_store() -> RecordStore:
    # One load per browser session; a failure only sticks to the session that saw it.
    if "record_store" not in st.session_state:
        store = RecordStore(partial(fetch_records, SETTINGS))
        asyncio.run(store.load())
        st.session_state["record_store"] = store
    return st.session_state["record_store"]


# ---------- UI setup ----------
st.set_page_config(page_title="Dashboard Permohonan Penyelenggaraan", layout="wide")
inject_base_styles()
st.markdown(
    "<div class='app-top-bar'><div class='page-title'>Jabatan Pendidikan Negeri Sabah</div>"
    "<div class='breadcrumb'>Dashboard Permohonan Penyelenggaraan</div></div>",
    unsafe_allow_html=True,
)

with st.spinner("Memuatkan data dashboard..."):
    store = get_store()

if store.status is LoadStatus.FAILED:
    st.error(f"Data gagal dimuatkan: {store.error}")
    st.stop()

records = store.records()

# ----- Sidebar: filters -----
month_names = {m["id"]: m["name"] for m in MONTHS}
with st.sidebar:
    st.markdown("### Penapis")
    selected_month = st.selectbox("Bulan", options=list(month_names), format_func=month_names.get, index=0)
    search_text = st.text_input("Cari sekolah atau PPD...", "")

filters: FilterCriteria = normalize_filters({"search_text": search_text, "month": selected_month})
ctx = prepare_context(filters, records)
overview = compute_overview(filters, ctx, SETTINGS)
cards = overview["cards"]

# ----- Stat cards -----
cols = st.columns(4)
cols[0].metric("Bilangan Keseluruhan", cards["total"]["value"], help=cards["total"]["caption"])
top = cards["top_office"]
cols[1].metric("PPD Paling Aktif", top["name"] if top else "Tiada", help=f"{top['count'] if top else 0} permohonan aktif")
cols[2].metric("Hasil Carian", cards["filtered_count"])
cols[3].metric("Kategori", cards["category_count"])

# ----- Charts -----
summary = ctx["summary"]
left, right = st.columns(2)
with left:
    with card("Pecahan Mengikut Kategori"):
        st.altair_chart(category_donut(summary), use_container_width=True)
with right:
    with card(f"Top {SETTINGS.top_offices} PPD"):
        st.altair_chart(office_bar(summary, top_n=SETTINGS.top_offices), use_container_width=True)

# ----- Results table -----
filtered: pd.DataFrame = ctx["filtered_records"]
with card("Senarai Permohonan", actions=f"{len(filtered)} Keputusan"):
    if filtered.empty:
        st.info("Tiada rekod ditemui untuk filter atau carian ini")
    else:
        display = filtered.rename(
            columns={
                "id": "ID",
                "institution": "Sekolah",
                "office": "PPD",
                "category": "Kategori",
                "date": "Tarikh",
                "status": "Status",
            }
        )[["Sekolah", "ID", "PPD", "Kategori", "Tarikh", "Status"]]
        st.dataframe(display, use_container_width=True, hide_index=True)
        st.download_button(
            "Export CSV",
            data=filtered.to_csv(index=False).encode("utf-8"),
            file_name="permohonan.csv",
            mime="text/csv",
        )
