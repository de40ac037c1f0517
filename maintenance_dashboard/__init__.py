"""Core (UI-agnostic) logic for the school maintenance-request dashboard.

This package contains:
- record loading (CSV/XLSX or mock data -> pandas) and the one-shot record store
- filter normalization and the search/month filter engine
- the summary aggregator (totals, per-category and per-office counts)
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
