from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pandas as pd


# Fixed display order of the four canonical labels.
CANONICAL_CATEGORIES: Tuple[str, ...] = ("MP", "ADUN", "MP & ADUN", "Other")


@dataclass(frozen=True)
class CategoryCount:
    label: str
    count: int


@dataclass(frozen=True)
class OfficeCount:
    name: str
    count: int


@dataclass(frozen=True)
class SummaryStats:
    total: int = 0
    by_category: List[CategoryCount] = field(default_factory=list)
    by_office: List[OfficeCount] = field(default_factory=list)

    def category_counts(self) -> Dict[str, int]:
        return {c.label: c.count for c in self.by_category}


def _tally(values: pd.Series) -> pd.Series:
    # groupby(sort=False) keeps first-seen order of the keys.
    return values.groupby(values, sort=False, dropna=False).size()


def summarize(records: pd.DataFrame) -> SummaryStats:
    """Totals for whatever collection it is handed.

    Categories come out in first-seen order, followed by any canonical label
    the data lacks (count 0). Offices are sorted by count, descending; the
    sort is stable so ties keep the order the offices were first seen in.
    """
    if records.empty:
        return SummaryStats(
            total=0,
            by_category=[CategoryCount(label, 0) for label in CANONICAL_CATEGORIES],
            by_office=[],
        )

    categories: Dict[str, int] = {str(k): int(v) for k, v in _tally(records["category"]).items()}
    for label in CANONICAL_CATEGORIES:
        categories.setdefault(label, 0)

    offices = _tally(records["office"]).sort_values(ascending=False, kind="stable")

    return SummaryStats(
        total=int(len(records)),
        by_category=[CategoryCount(label, count) for label, count in categories.items()],
        by_office=[OfficeCount(str(name), int(count)) for name, count in offices.items()],
    )


def top_office(stats: SummaryStats) -> Optional[OfficeCount]:
    return stats.by_office[0] if stats.by_office else None
