"""Domain services implementing the reconciliation rules."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from .keys import extract_date_from_key
from .models import AuthorityRecord, ComparisonResult, LedgerRecord, ReconciliationStatus
from .results import ReconciliationReport, ReconciliationSummary

logger = logging.getLogger(__name__)

NOT_IN_AUTHORITY_TEXT = "Não encontrada no arquivo"


class InvoiceReconciler:
    """Classifies authority invoices against the ledger.

    The authority export drives the result set: every authority record yields
    exactly one result, in input order. A cancelled status wins over a ledger
    match. With ``include_unmatched_ledger`` the ledger invoices not matched
    by a non-cancelled authority record follow as ``NOT_FOUND_AT_AUTHORITY``
    results.
    """

    def __init__(self, include_unmatched_ledger: bool = True) -> None:
        self._include_unmatched_ledger = include_unmatched_ledger

    def reconcile(
        self,
        ledger: Sequence[LedgerRecord],
        authority: Sequence[AuthorityRecord],
    ) -> list[ComparisonResult]:
        ledger_map = self._to_map(ledger)
        consumed: set[str] = set()
        results: list[ComparisonResult] = []

        for auth_record in authority:
            match = ledger_map.get(auth_record.key)
            if auth_record.is_cancelled:
                status = ReconciliationStatus.CANCELLED
            elif match is not None:
                status = ReconciliationStatus.MATCHED
                # Cancelled invoices leave their ledger row unconsumed so a
                # booking of a cancelled invoice surfaces below.
                consumed.add(auth_record.key)
            else:
                status = ReconciliationStatus.NOT_BOOKED_IN_LEDGER

            results.append(
                ComparisonResult(
                    key=auth_record.key,
                    number=auth_record.number,
                    series=auth_record.series,
                    issue_date=auth_record.issue_date or extract_date_from_key(auth_record.key),
                    value=match.value if match is not None else Decimal("0"),
                    authority_status=auth_record.status_text,
                    status=status,
                    authority_record=auth_record,
                    ledger_record=match,
                )
            )

        if self._include_unmatched_ledger:
            for key, ledger_record in ledger_map.items():
                if key in consumed:
                    continue
                results.append(
                    ComparisonResult(
                        key=key,
                        number=ledger_record.number,
                        series="",
                        issue_date=ledger_record.issue_date or extract_date_from_key(key),
                        value=ledger_record.value,
                        authority_status=NOT_IN_AUTHORITY_TEXT,
                        status=ReconciliationStatus.NOT_FOUND_AT_AUTHORITY,
                        authority_record=None,
                        ledger_record=ledger_record,
                    )
                )

        logger.info(
            "Reconciled %d authority and %d ledger records into %d results",
            len(authority),
            len(ledger),
            len(results),
        )
        return results

    def build_report(
        self,
        ledger: Sequence[LedgerRecord],
        authority: Sequence[AuthorityRecord],
    ) -> ReconciliationReport:
        results = self.reconcile(ledger, authority)
        return ReconciliationReport(
            summary=ReconciliationSummary.from_results(results),
            results=tuple(results),
        )

    @staticmethod
    def _to_map(records: Sequence[LedgerRecord]) -> dict[str, LedgerRecord]:
        # Later rows overwrite earlier ones sharing a key; the key keeps its
        # first insertion position.
        ledger_map: dict[str, LedgerRecord] = {}
        for record in records:
            if record.key in ledger_map:
                logger.debug("Ledger key %s repeated; keeping the later row", record.key)
            ledger_map[record.key] = record
        return ledger_map


def reconcile(
    ledger: Sequence[LedgerRecord],
    authority: Sequence[AuthorityRecord],
    include_unmatched_ledger: bool = True,
) -> list[ComparisonResult]:
    return InvoiceReconciler(include_unmatched_ledger=include_unmatched_ledger).reconcile(ledger, authority)
