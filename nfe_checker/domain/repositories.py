"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from .models import AuthorityRecord, LedgerRecord


class LedgerRepository(Protocol):
    """Provides invoices booked in the accounting ledger."""

    def list_ledger_records(self) -> Sequence[LedgerRecord]:
        ...


class AuthorityRepository(Protocol):
    """Provides invoices known to the tax authority."""

    def list_authority_records(self) -> Sequence[AuthorityRecord]:
        ...
