"""File-backed repositories for ledger and authority data."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Sequence

from nfe_checker.application.aggregation import MergePolicy, merge_authority_records
from nfe_checker.config import SETTINGS
from nfe_checker.domain.models import AuthorityRecord, LedgerRecord
from nfe_checker.domain.repositories import AuthorityRepository, LedgerRepository
from nfe_checker.infrastructure.parsing.authority import extract_authority
from nfe_checker.infrastructure.parsing.ledger import extract_ledger
from nfe_checker.infrastructure.parsing.utils import ensure_bytes


class SpreadsheetLedgerRepository(LedgerRepository):
    def __init__(self, source: BytesIO | Path | bytes) -> None:
        self._source = ensure_bytes(source)

    def list_ledger_records(self) -> Sequence[LedgerRecord]:
        return extract_ledger(self._source)


class HtmlAuthorityRepository(AuthorityRepository):
    """One or more saved portal pages, merged per ``merge_policy``."""

    def __init__(
        self,
        sources: Sequence[str | BytesIO | Path | bytes] | str | BytesIO | Path | bytes,
        merge_policy: MergePolicy | None = None,
        encoding: str | None = None,
    ) -> None:
        if isinstance(sources, (str, bytes, BytesIO, Path)):
            sources = [sources]
        self._sources = [s if isinstance(s, str) else ensure_bytes(s) for s in sources]
        self._merge_policy = merge_policy or SETTINGS.merge_policy
        self._encoding = encoding or SETTINGS.authority_encoding

    def list_authority_records(self) -> Sequence[AuthorityRecord]:
        batches = [extract_authority(source, encoding=self._encoding) for source in self._sources]
        if len(batches) == 1:
            return batches[0]
        return merge_authority_records(batches, self._merge_policy)
