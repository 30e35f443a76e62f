"""Domain models for invoice reconciliation.

These dataclasses capture the canonical schema for invoices read from the
accounting ledger export and from the tax-authority (SEFAZ) portal export.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

# Display text of every cell of the row a record was read from.
SourceRow = tuple[str, ...]


class ReconciliationStatus(str, Enum):
    """Classification of an invoice after comparing both datasets."""

    MATCHED = "Lançada"
    NOT_BOOKED_IN_LEDGER = "Não Lançada"
    NOT_FOUND_AT_AUTHORITY = "Não encontrada na SEFAZ"
    CANCELLED = "Cancelada"


@dataclass(frozen=True)
class LedgerRecord:
    """Invoice as booked in the accounting system."""

    key: str
    number: str
    value: Decimal
    issue_date: str
    source_row: SourceRow = ()


@dataclass(frozen=True)
class AuthorityRecord:
    """Invoice as known to the tax authority."""

    key: str
    number: str
    series: str
    status_text: str
    issuer: str
    issue_date: str
    source_row: SourceRow = ()

    @property
    def is_cancelled(self) -> bool:
        return "cancelada" in self.status_text.lower()


@dataclass(frozen=True)
class ComparisonResult:
    key: str
    number: str
    series: str
    issue_date: str
    value: Decimal
    authority_status: str
    status: ReconciliationStatus
    authority_record: AuthorityRecord | None = None
    ledger_record: LedgerRecord | None = None
