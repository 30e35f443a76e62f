"""Reconciliation of accounting ledger invoices against SEFAZ portal exports."""
from nfe_checker.application.use_cases import ReconcileInvoicesUseCase, ReconciliationContext
from nfe_checker.domain.errors import FormatError
from nfe_checker.domain.services import InvoiceReconciler, reconcile
from nfe_checker.infrastructure.parsing.authority import extract_authority
from nfe_checker.infrastructure.parsing.ledger import extract_ledger
from nfe_checker.infrastructure.repositories.file_repositories import (
    HtmlAuthorityRepository,
    SpreadsheetLedgerRepository,
)

__all__ = [
    "FormatError",
    "InvoiceReconciler",
    "ReconcileInvoicesUseCase",
    "ReconciliationContext",
    "HtmlAuthorityRepository",
    "SpreadsheetLedgerRepository",
    "extract_authority",
    "extract_ledger",
    "reconcile",
]
