"""Application services orchestrating the invoice reconciliation workflow."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from nfe_checker.domain.models import AuthorityRecord, LedgerRecord
from nfe_checker.domain.repositories import AuthorityRepository, LedgerRepository
from nfe_checker.domain.results import ReconciliationReport
from nfe_checker.domain.services import InvoiceReconciler


@dataclass(slots=True)
class ReconciliationContext:
    ledger_repository: LedgerRepository
    authority_repository: AuthorityRepository
    reconciler: InvoiceReconciler


class ReconcileInvoicesUseCase:
    def __init__(self, context: ReconciliationContext) -> None:
        self._context = context

    def execute(self) -> tuple[ReconciliationReport, Sequence[LedgerRecord], Sequence[AuthorityRecord]]:
        ledger_records = self._context.ledger_repository.list_ledger_records()
        authority_records = self._context.authority_repository.list_authority_records()
        report = self._context.reconciler.build_report(ledger_records, authority_records)
        return report, ledger_records, authority_records
