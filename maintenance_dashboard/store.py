from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import pandas as pd


logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[pd.DataFrame]]


class LoadStatus(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class RecordsUnavailable(RuntimeError):
    """Raised when records are requested before a successful load."""

    def __init__(self, status: LoadStatus, error: Optional[str] = None):
        self.status = status
        self.error = error
        msg = f"records are {status.value}"
        if error:
            msg = f"{msg}: {error}"
        super().__init__(msg)


class RecordStore:
    """Holds the full record collection, loaded once per session.

    Consumers either get the complete frame or a RecordsUnavailable telling
    them whether the load is still pending or has failed. A failed load is
    final; there is no retry.
    """

    def __init__(self, fetch: Fetcher):
        self._fetch = fetch
        self._records: Optional[pd.DataFrame] = None
        self.status = LoadStatus.UNLOADED
        self.error: Optional[str] = None

    async def load(self) -> LoadStatus:
        if self.status is not LoadStatus.UNLOADED:
            return self.status
        self.status = LoadStatus.LOADING
        try:
            records = await self._fetch()
        except Exception as exc:
            logger.exception("record load failed")
            self.error = str(exc) or type(exc).__name__
            self.status = LoadStatus.FAILED
            return self.status
        self._records = records
        self.status = LoadStatus.LOADED
        logger.info("loaded %d records", len(records))
        return self.status

    @property
    def ready(self) -> bool:
        return self.status is LoadStatus.LOADED

    def records(self) -> pd.DataFrame:
        if self._records is None or self.status is not LoadStatus.LOADED:
            raise RecordsUnavailable(self.status, self.error)
        return self._records

    def describe(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "count": int(len(self._records)) if self.ready and self._records is not None else None,
            "error": self.error,
        }
