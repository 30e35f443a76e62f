"""Shared parsing utilities for ledger and authority ingestion."""
from __future__ import annotations

import math
import re
import unicodedata
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from io import BytesIO
from pathlib import Path

import pandas as pd

_NON_TOKEN = re.compile(r"[^a-z0-9]+")
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_WHITESPACE = re.compile(r"\s+")


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def ensure_text(source: str | BytesIO | Path | bytes, encoding: str) -> str:
    if isinstance(source, str):
        return source
    return ensure_bytes(source).decode(encoding, errors="replace")


def normalize_header(text: object) -> str:
    """Lowercase, strip accents and collapse non-alphanumerics into ``_``.

    Only used to match header labels, never for display.
    """
    if text is None:
        return ""
    value = str(text).strip().lower()
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_TOKEN.sub("_", stripped)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def parse_currency(value: object) -> Decimal:
    """Parse a pt-BR currency string such as ``R$ 1.234,56``.

    Thousands separators are dropped and the decimal comma becomes a point;
    the longest leading number is kept. Anything unreadable is zero.
    """
    if value is None:
        return Decimal("0")
    s = str(value).replace("R$", "").replace(".", "").replace(",", ".", 1).strip()
    match = _LEADING_NUMBER.match(s)
    if not match:
        return Decimal("0")
    try:
        result = Decimal(match.group(0))
    except InvalidOperation:
        return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    return result


def cell_to_text(value: object) -> str:
    """Render a spreadsheet cell the way it is displayed to a pt-BR user."""
    if value is None:
        return ""
    if isinstance(value, (datetime, date, pd.Timestamp)):
        if pd.isna(value):
            return ""
        return value.strftime("%d/%m/%Y")
    if isinstance(value, bool):
        return "VERDADEIRO" if value else "FALSO"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value).replace(".", ",")
    text = str(value)
    if text.upper() == "NAN":
        return ""
    return text
