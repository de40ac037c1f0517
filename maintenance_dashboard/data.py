from __future__ import annotations

import asyncio
import datetime
import logging
from dataclasses import asdict, dataclass, is_dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from maintenance_dashboard.filters import FilterCriteria, filter_by_month, filter_records, normalize_filters
from maintenance_dashboard.summary import summarize


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
FILE_GLOB = "permohonan*.*"
SOURCE_SUFFIXES = {".csv", ".xlsx", ".xls"}

RECORD_COLUMNS = ["id", "institution", "office", "category", "status", "date"]

STATUS_COMPLETED = "Completed"
STATUS_IN_PROGRESS = "In Progress"

# Headers seen in exported spreadsheets, English and Malay.
SOURCE_COLUMNS = {
    "id": "id",
    "ID": "id",
    "No. Rujukan": "id",
    "institution": "institution",
    "sekolah": "institution",
    "Sekolah": "institution",
    "office": "office",
    "ppd": "office",
    "PPD": "office",
    "category": "category",
    "kategori": "category",
    "Kategori": "category",
    "status": "status",
    "Status": "status",
    "date": "date",
    "tarikh": "date",
    "Tarikh": "date",
}

CATEGORY_ALIASES = {
    "Ahli Parlimen": "MP",
    "ADUN & Ahli Parlimen": "MP & ADUN",
    "Ahli Parlimen & ADUN": "MP & ADUN",
    "Lain-lain": "Other",
    "State Assembly Member": "ADUN",
    "MP & State Assembly Member": "MP & ADUN",
}

STATUS_ALIASES = {
    "Selesai": STATUS_COMPLETED,
    "Dalam Proses": STATUS_IN_PROGRESS,
}

MOCK_OFFICES = [
    "Kota Kinabalu", "Sandakan", "Tawau", "Lahad Datu", "Keningau",
    "Beaufort", "Kudat", "Ranau", "Tuaran", "Penampang",
]
MOCK_CATEGORIES = ["Ahli Parlimen", "ADUN", "Lain-lain", "ADUN & Ahli Parlimen"]
MOCK_SCHOOLS = [
    "SK St Francis", "SMK Sanzac", "SK Stella Maris", "SMK Likas", "SK Tanjung Aru",
    "SJKC Chung Hwa", "SMK Elopura", "SK Muhibbah", "SMK Tawau", "SK Pekan Keningau",
    "SMK Beaufort", "SK Kudat II", "SMK Mat Salleh", "SK Pekan Ranau", "SMK Badin",
]


@dataclass(frozen=True)
class DashboardSettings:
    top_offices: int = 8
    load_delay: float = 0.8
    mock_count: int = 200
    seed: Optional[int] = None


@dataclass(frozen=True)
class Record:
    id: str
    institution: str
    office: str
    category: str
    status: str
    date: str


def empty_records() -> pd.DataFrame:
    return pd.DataFrame({c: pd.Series(dtype=object) for c in RECORD_COLUMNS})


def records_frame(rows: Iterable[object]) -> pd.DataFrame:
    """Build a record frame from Record instances or plain mappings."""
    dicts: List[Dict[str, object]] = []
    for row in rows:
        if is_dataclass(row):
            dicts.append(asdict(row))
        else:
            dicts.append(dict(row))  # type: ignore[arg-type]
    if not dicts:
        return empty_records()
    df = pd.DataFrame(dicts)
    for col in RECORD_COLUMNS:
        if col not in df.columns:
            df[col] = ""
    df = df[RECORD_COLUMNS]
    return coerce_record_strings(df)


def coerce_record_strings(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    for col in RECORD_COLUMNS:
        df[col] = df[col].apply(lambda v: "" if v is None or (not isinstance(v, str) and pd.isna(v)) else str(v).strip())
    return df


def normalize_labels(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["category"] = df["category"].replace(CATEGORY_ALIASES)
    df["status"] = df["status"].replace(STATUS_ALIASES)
    return df


def normalize_dates(df: pd.DataFrame) -> pd.DataFrame:
    # Spreadsheet readers return Timestamps for all-date columns and datetimes for mixed ones.
    df = df.copy()
    df["date"] = df["date"].apply(
        lambda v: v.strftime("%Y-%m-%d") if isinstance(v, (datetime.date, pd.Timestamp)) and not pd.isna(v) else v
    )
    return df


# ---------------- Loaders ----------------
def get_source_files(data_dir: Path = DATA_DIR) -> List[Path]:
    if not data_dir.is_dir():
        return []
    return sorted(p for p in data_dir.glob(FILE_GLOB) if p.suffix.lower() in SOURCE_SUFFIXES)


def load_source_file(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        raw = pd.read_csv(path, dtype=str, keep_default_na=False)
    else:
        raw = pd.read_excel(path)
    df = raw.rename(columns=SOURCE_COLUMNS)
    df = df.loc[:, ~df.columns.duplicated()]
    missing = [c for c in RECORD_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name}: missing columns {', '.join(missing)}")
    df = normalize_dates(df[RECORD_COLUMNS])
    df = coerce_record_strings(df)
    return normalize_labels(df).reset_index(drop=True)


def generate_mock_records(n: int = 200, seed: Optional[int] = None) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    rows = []
    for i in range(n):
        month = int(rng.integers(1, 13))
        day = int(rng.integers(1, 29))
        school = MOCK_SCHOOLS[int(rng.integers(len(MOCK_SCHOOLS)))]
        rows.append(
            {
                "id": f"REQ-{1000 + i}",
                "institution": f"{school} (P)" if i % 5 == 0 else school,
                "office": MOCK_OFFICES[int(rng.integers(len(MOCK_OFFICES)))],
                "category": MOCK_CATEGORIES[int(rng.integers(len(MOCK_CATEGORIES)))],
                "status": "Selesai" if rng.random() > 0.3 else "Dalam Proses",
                "date": f"2024-{month:02d}-{day:02d}",
            }
        )
    return normalize_labels(records_frame(rows))


async def fetch_records(settings: DashboardSettings = DashboardSettings()) -> pd.DataFrame:
    """Fetch the whole collection: the newest source file if present, else mock data."""
    if settings.load_delay > 0:
        await asyncio.sleep(settings.load_delay)
    files = get_source_files()
    if files:
        logger.info("Loading records from %s", files[-1].name)
        return await asyncio.to_thread(load_source_file, files[-1])
    return generate_mock_records(settings.mock_count, seed=settings.seed)


def prepare_context(filters: dict | FilterCriteria, records: pd.DataFrame) -> Dict[str, object]:
    filt = filters if isinstance(filters, FilterCriteria) else normalize_filters(filters)

    # Charts follow the month only; the detail list follows both filters.
    month_records = filter_by_month(records, filt.month)
    filtered_records = filter_records(records, filt)

    return {
        "filters": filt,
        "records": records,
        "month_records": month_records,
        "filtered_records": filtered_records,
        "summary": summarize(month_records),
    }
