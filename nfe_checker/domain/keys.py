"""Fiscal access key (chave de acesso) helpers."""
from __future__ import annotations

import re

KEY_LENGTH = 44

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_key(raw: object) -> str:
    """Strip everything but digits. Length is not validated here."""
    if raw is None:
        return ""
    text = str(raw)
    if not text:
        return ""
    return _NON_DIGITS.sub("", text)


def extract_date_from_key(raw: object) -> str:
    """Return the ``MM/YYYY`` issue month encoded in a 44-digit key.

    Positions 2-3 hold the two-digit year and 4-5 the month. Keys of any
    other length give an empty string. The key carries no day, so the result
    is a partial date.
    """
    key = normalize_key(raw)
    if len(key) != KEY_LENGTH:
        return ""
    year = key[2:4]
    month = key[4:6]
    return f"{month}/20{year}"
