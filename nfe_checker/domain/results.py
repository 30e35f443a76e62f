"""Domain-level results for invoice reconciliation."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Sequence

from .models import ComparisonResult, ReconciliationStatus


@dataclass(frozen=True)
class ReconciliationSummary:
    total: int
    matched: int
    not_booked: int
    cancelled: int
    not_found_at_authority: int
    others: int
    generated_at: datetime

    @classmethod
    def from_results(cls, results: Sequence[ComparisonResult]) -> "ReconciliationSummary":
        counts = Counter(result.status for result in results)
        matched = counts[ReconciliationStatus.MATCHED]
        not_booked = counts[ReconciliationStatus.NOT_BOOKED_IN_LEDGER]
        cancelled = counts[ReconciliationStatus.CANCELLED]
        return cls(
            total=len(results),
            matched=matched,
            not_booked=not_booked,
            cancelled=cancelled,
            not_found_at_authority=counts[ReconciliationStatus.NOT_FOUND_AT_AUTHORITY],
            others=len(results) - matched - not_booked - cancelled,
            generated_at=datetime.utcnow(),
        )


@dataclass(frozen=True)
class ReconciliationReport:
    summary: ReconciliationSummary
    results: Sequence[ComparisonResult] = field(default_factory=tuple)

    def has_issues(self) -> bool:
        return any(
            [
                self.summary.not_booked,
                self.summary.not_found_at_authority,
            ]
        )

    def iter_discrepancies(self) -> Iterable[ComparisonResult]:
        for result in self.results:
            if result.status in (
                ReconciliationStatus.NOT_BOOKED_IN_LEDGER,
                ReconciliationStatus.NOT_FOUND_AT_AUTHORITY,
            ):
                yield result
