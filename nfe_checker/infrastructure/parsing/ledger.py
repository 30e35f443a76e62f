"""Accounting ledger spreadsheet parser producing canonical ledger records."""
from __future__ import annotations

import csv
import logging
from io import BytesIO, StringIO
from pathlib import Path
from typing import Sequence

import pandas as pd

from nfe_checker.domain.errors import FormatError
from nfe_checker.domain.keys import extract_date_from_key, normalize_key
from nfe_checker.domain.models import LedgerRecord, SourceRow
from nfe_checker.infrastructure.parsing.columns import LedgerColumn, resolve_ledger_columns
from nfe_checker.infrastructure.parsing.utils import (
    cell_to_text,
    ensure_bytes,
    normalize_header,
    parse_currency,
)

logger = logging.getLogger(__name__)

_XLSX_MAGIC = b"PK\x03\x04"
_XLS_MAGIC = b"\xd0\xcf\x11\xe0"


def _read_delimited(raw_bytes: bytes) -> pd.DataFrame:
    try:
        text = raw_bytes.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = raw_bytes.decode("latin-1")
    if not text.strip():
        return pd.DataFrame()
    options = dict(header=None, dtype=str, keep_default_na=False, skip_blank_lines=False)
    try:
        return pd.read_csv(StringIO(text), sep=None, engine="python", **options)
    except csv.Error:
        # Single-column files give the sniffer nothing to work with.
        return pd.read_csv(StringIO(text), **options)


def read_ledger_raw(raw_bytes: bytes) -> pd.DataFrame:
    """Read the first sheet as a header-less grid."""
    if raw_bytes.startswith(_XLSX_MAGIC):
        engine = "openpyxl"
    elif raw_bytes.startswith(_XLS_MAGIC):
        engine = "xlrd"
    else:
        return _read_delimited(raw_bytes)
    return pd.read_excel(
        BytesIO(raw_bytes),
        sheet_name=0,
        engine=engine,
        header=None,
        keep_default_na=False,
    )


def to_text_grid(df: pd.DataFrame) -> list[SourceRow]:
    return [tuple(cell_to_text(value) for value in row) for row in df.itertuples(index=False, name=None)]


def _cell(row: SourceRow, idx: int | None) -> str:
    if idx is None or idx >= len(row):
        return ""
    return row[idx]


def rows_to_ledger_records(grid: Sequence[SourceRow]) -> list[LedgerRecord]:
    if not grid:
        raise FormatError("empty ledger document")

    headers = [normalize_header(cell) for cell in grid[0]]
    columns = resolve_ledger_columns(headers)
    if LedgerColumn.KEY not in columns:
        raise FormatError("missing key column")
    logger.debug("Ledger columns resolved: %s", {role.value: idx for role, idx in columns.items()})

    key_idx = columns[LedgerColumn.KEY]
    number_idx = columns.get(LedgerColumn.NUMBER)
    value_idx = columns.get(LedgerColumn.VALUE)
    date_idx = columns.get(LedgerColumn.DATE)

    records: list[LedgerRecord] = []
    skipped = 0
    for row in grid[1:]:
        raw_key = _cell(row, key_idx)
        if not row or not raw_key:
            skipped += 1
            continue
        key = normalize_key(raw_key)
        if not key:
            skipped += 1
            continue

        value = parse_currency(_cell(row, value_idx))
        issue_date = _cell(row, date_idx) or extract_date_from_key(key)
        records.append(
            LedgerRecord(
                key=key,
                number=_cell(row, number_idx),
                value=value,
                issue_date=issue_date,
                source_row=row,
            )
        )

    logger.debug("Skipped %d ledger rows without a usable key", skipped)
    logger.info("Read %d ledger records", len(records))
    return records


def extract_ledger(source: BytesIO | Path | bytes) -> list[LedgerRecord]:
    raw_bytes = ensure_bytes(source)
    dataframe = read_ledger_raw(raw_bytes)
    return rows_to_ledger_records(to_text_grid(dataframe))
