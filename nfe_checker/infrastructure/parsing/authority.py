"""SEFAZ portal HTML parser producing canonical authority records.

Portal exports differ in banner rows and header wording between system
versions, so the invoice table is located heuristically: the first table
with a row (among its first few) naming both the access key and the status
columns.
"""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Mapping, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from nfe_checker.config import SETTINGS
from nfe_checker.domain.errors import FormatError
from nfe_checker.domain.keys import extract_date_from_key, normalize_key
from nfe_checker.domain.models import AuthorityRecord
from nfe_checker.infrastructure.parsing.columns import (
    AuthorityColumn,
    is_authority_header,
    resolve_authority_columns,
)
from nfe_checker.infrastructure.parsing.utils import collapse_whitespace, ensure_text, normalize_header

logger = logging.getLogger(__name__)

MIN_CELLS = 3


def table_rows(table: Tag) -> list[list[Tag]]:
    """Rows owned by ``table`` itself, excluding rows of nested tables."""
    rows: list[list[Tag]] = []
    for tr in table.find_all("tr"):
        if tr.find_parent("table") is not table:
            continue
        rows.append(tr.find_all(["td", "th"], recursive=False))
    return rows


def find_invoice_table(
    soup: BeautifulSoup,
    search_rows: int | None = None,
) -> tuple[list[list[Tag]], Mapping[AuthorityColumn, int]]:
    search_rows = SETTINGS.header_search_rows if search_rows is None else search_rows
    for table_idx, table in enumerate(soup.find_all("table")):
        rows = table_rows(table)
        for row_idx, cells in enumerate(rows[:search_rows]):
            headers = [normalize_header(cell.get_text()) for cell in cells]
            if is_authority_header(headers):
                columns = resolve_authority_columns(headers)
                logger.debug(
                    "Invoice table found at table %d, header row %d: %s",
                    table_idx,
                    row_idx,
                    {role.value: idx for role, idx in columns.items()},
                )
                return rows, columns
    raise FormatError("target table not found")


def rows_to_authority_records(
    rows: Sequence[Sequence[Tag]],
    columns: Mapping[AuthorityColumn, int],
    min_key_length: int | None = None,
) -> list[AuthorityRecord]:
    min_key_length = SETTINGS.min_authority_key_length if min_key_length is None else min_key_length
    key_idx = columns.get(AuthorityColumn.KEY)

    def value_of(cells: Sequence[Tag], role: AuthorityColumn) -> str:
        idx = columns.get(role)
        if idx is None or idx >= len(cells):
            return ""
        return cells[idx].get_text().strip()

    records: list[AuthorityRecord] = []
    skipped = 0
    for cells in rows:
        if len(cells) < MIN_CELLS:
            skipped += 1
            continue
        # The header row is still part of ``rows``.
        if key_idx is not None and key_idx < len(cells) and "chave" in cells[key_idx].get_text().lower():
            skipped += 1
            continue

        key = normalize_key(value_of(cells, AuthorityColumn.KEY))
        if not key or len(key) <= min_key_length:
            skipped += 1
            continue

        records.append(
            AuthorityRecord(
                key=key,
                number=value_of(cells, AuthorityColumn.NUMBER),
                series=value_of(cells, AuthorityColumn.SERIES),
                status_text=value_of(cells, AuthorityColumn.STATUS),
                issuer=value_of(cells, AuthorityColumn.ISSUER),
                issue_date=value_of(cells, AuthorityColumn.DATE) or extract_date_from_key(key),
                source_row=tuple(collapse_whitespace(cell.get_text(" ")) for cell in cells),
            )
        )

    logger.debug("Skipped %d authority rows", skipped)
    logger.info("Read %d authority records", len(records))
    return records


def extract_authority(
    source: str | BytesIO | Path | bytes,
    encoding: str | None = None,
) -> list[AuthorityRecord]:
    html = ensure_text(source, encoding or SETTINGS.authority_encoding)
    soup = BeautifulSoup(html, "lxml")
    rows, columns = find_invoice_table(soup)
    return rows_to_authority_records(rows, columns)
