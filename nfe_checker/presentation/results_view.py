"""Filtering, sorting and pagination of reconciliation results for display."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Sequence

from nfe_checker.config import SETTINGS
from nfe_checker.domain.models import ComparisonResult, ReconciliationStatus

_FULL_DATE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})")
_MONTH_YEAR = re.compile(r"^\s*(\d{1,2})/(\d{4})\s*$")

SORTABLE_FIELDS = {
    "key": "key",
    "number": "number",
    "series": "series",
    "date": "issue_date",
    "value": "value",
    "authority_status": "authority_status",
    "status": "status",
}


@dataclass(frozen=True)
class Page:
    page: int
    page_size: int
    total_pages: int
    total_items: int
    items: Sequence[ComparisonResult]

    @property
    def first_index(self) -> int:
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        return min(self.page * self.page_size, self.total_items)


def filter_results(
    results: Sequence[ComparisonResult],
    text: str = "",
    status: ReconciliationStatus | None = None,
) -> list[ComparisonResult]:
    needle = (text or "").lower()
    filtered: list[ComparisonResult] = []
    for r in results:
        matches_text = (
            needle in (r.number or "").lower()
            or (text or "") in (r.key or "")
            or needle in (r.authority_status or "").lower()
        )
        matches_status = status is None or r.status == status
        if matches_text and matches_status:
            filtered.append(r)
    return filtered


def date_sort_value(value: str) -> int:
    """Order key for ``dd/mm/yyyy`` or ``MM/YYYY`` text; 0 when unreadable."""
    if not value:
        return 0
    full = _FULL_DATE.match(value)
    if full:
        day, month, year = (int(part) for part in full.groups())
        return year * 10000 + month * 100 + day
    partial = _MONTH_YEAR.match(value)
    if partial:
        month, year = (int(part) for part in partial.groups())
        return year * 10000 + month * 100 + 1
    return 0


def sort_results(
    results: Sequence[ComparisonResult],
    field: str,
    descending: bool = False,
) -> list[ComparisonResult]:
    try:
        attribute = SORTABLE_FIELDS[field]
    except KeyError:
        raise ValueError(f"Unknown sort field: {field!r}") from None

    def value_of(result: ComparisonResult) -> object:
        value = getattr(result, attribute)
        if attribute == "issue_date":
            return date_sort_value(value)
        if isinstance(value, ReconciliationStatus):
            return value.value
        return value

    present = [r for r in results if value_of(r) not in (None, "")]
    missing = [r for r in results if value_of(r) in (None, "")]
    return sorted(present, key=value_of, reverse=descending) + missing


def paginate(
    results: Sequence[ComparisonResult],
    page: int = 1,
    page_size: int | None = None,
) -> Page:
    page_size = page_size or SETTINGS.page_size
    total_pages = max(1, math.ceil(len(results) / page_size))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return Page(
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        total_items=len(results),
        items=tuple(results[start:start + page_size]),
    )
