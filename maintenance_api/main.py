from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import asdict
from functools import partial
import logging
import math
from typing import Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from fastapi.encoders import jsonable_encoder

from maintenance_api.schemas import FilterCriteriaModel, MetaListResponse, MetaMonthsResponse, StoreStatusResponse
from maintenance_dashboard.data import DashboardSettings, fetch_records, prepare_context
from maintenance_dashboard.filters import MONTHS, FilterCriteria, normalize_filters
from maintenance_dashboard.metrics_debug import compute_debug
from maintenance_dashboard.metrics_overview import compute_overview, record_rows
from maintenance_dashboard.store import Fetcher, RecordStore, RecordsUnavailable
from maintenance_dashboard.summary import CANONICAL_CATEGORIES


logger = logging.getLogger(__name__)


def _filters_from_model(model: FilterCriteriaModel) -> FilterCriteria:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _unavailable(exc: RecordsUnavailable) -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": str(exc), "status": exc.status.value})


def _failed(name: str, exc: Exception) -> JSONResponse:
    logger.exception("%s failed", name)
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _store(request: Request) -> RecordStore:
    return request.app.state.store


def create_app(
    fetch: Optional[Fetcher] = None,
    settings: Optional[DashboardSettings] = None,
    background_load: bool = True,
) -> FastAPI:
    settings = settings or DashboardSettings()
    store = RecordStore(fetch or partial(fetch_records, settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = None
        if background_load:
            task = asyncio.create_task(store.load())
        else:
            await store.load()
        yield
        if task is not None and not task.done():
            task.cancel()

    app = FastAPI(title="Maintenance Request Dashboard API", version="0.1.0", lifespan=lifespan)
    app.state.store = store
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/meta/months", response_model=MetaMonthsResponse)
    def meta_months():
        return {"months": MONTHS}

    @app.get("/meta/categories", response_model=MetaListResponse)
    def meta_categories():
        return {"values": list(CANONICAL_CATEGORIES)}

    @app.get("/meta/status", response_model=StoreStatusResponse)
    def meta_status(request: Request):
        return _store(request).describe()

    @app.post("/overview")
    def overview(filters: FilterCriteriaModel, request: Request):
        try:
            f = _filters_from_model(filters)
            ctx = prepare_context(f, _store(request).records())
            return _json(compute_overview(f, ctx, request.app.state.settings))
        except RecordsUnavailable as exc:
            return _unavailable(exc)
        except Exception as exc:
            return _failed("overview", exc)

    @app.post("/records")
    def records(filters: FilterCriteriaModel, request: Request):
        try:
            f = _filters_from_model(filters)
            ctx = prepare_context(f, _store(request).records())
            rows = record_rows(ctx["filtered_records"])
            return _json({"filters": asdict(f), "count": len(rows), "records": rows})
        except RecordsUnavailable as exc:
            return _unavailable(exc)
        except Exception as exc:
            return _failed("records", exc)

    @app.post("/summary")
    def summary(filters: FilterCriteriaModel, request: Request):
        try:
            f = _filters_from_model(filters)
            ctx = prepare_context(f, _store(request).records())
            return _json({"filters": asdict(f), **asdict(ctx["summary"])})
        except RecordsUnavailable as exc:
            return _unavailable(exc)
        except Exception as exc:
            return _failed("summary", exc)

    @app.post("/debug")
    def debug(filters: FilterCriteriaModel, request: Request):
        store = _store(request)
        try:
            f = _filters_from_model(filters)
            ctx = prepare_context(f, store.records())
            return _json(compute_debug(f, ctx, store.describe()))
        except RecordsUnavailable as exc:
            return _unavailable(exc)
        except Exception as exc:
            return _failed("debug", exc)

    @app.post("/export/records")
    def export_records(filters: FilterCriteriaModel, request: Request):
        try:
            f = _filters_from_model(filters)
            ctx = prepare_context(f, _store(request).records())
        except RecordsUnavailable as exc:
            return _unavailable(exc)
        export_df: pd.DataFrame = ctx["filtered_records"]
        csv_bytes = export_df.to_csv(index=False).encode("utf-8")
        return Response(
            content=csv_bytes,
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=permohonan.csv"},
        )

    return app


app = create_app()
