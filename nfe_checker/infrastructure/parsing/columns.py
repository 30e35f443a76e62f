"""Column role resolution for loosely formatted invoice tables.

Each table kind has an ordered list of ``(predicate, role)`` rules evaluated
against normalized header tokens (see ``normalize_header``).
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Mapping, Sequence

HeaderPredicate = Callable[[str], bool]


class LedgerColumn(str, Enum):
    KEY = "key"
    NUMBER = "number"
    VALUE = "value"
    DATE = "date"


class AuthorityColumn(str, Enum):
    KEY = "key"
    STATUS = "status"
    NUMBER = "number"
    SERIES = "series"
    ISSUER = "issuer"
    DATE = "date"


def _contains(*needles: str) -> HeaderPredicate:
    return lambda token: any(needle in token for needle in needles)


LEDGER_RULES: Sequence[tuple[HeaderPredicate, LedgerColumn]] = (
    (_contains("chave", "chavenfe"), LedgerColumn.KEY),
    (lambda t: t in ("numero", "numero_nota") or "nota" in t, LedgerColumn.NUMBER),
    (_contains("valor", "contabil"), LedgerColumn.VALUE),
    (_contains("emissao", "data"), LedgerColumn.DATE),
)

AUTHORITY_RULES: Sequence[tuple[HeaderPredicate, AuthorityColumn]] = (
    (_contains("chave"), AuthorityColumn.KEY),
    (_contains("situacao"), AuthorityColumn.STATUS),
    (lambda t: "numero" in t or t == "nota", AuthorityColumn.NUMBER),
    (_contains("serie"), AuthorityColumn.SERIES),
    (lambda t: "emitente" in t and "cnpj" not in t, AuthorityColumn.ISSUER),
    (_contains("data", "emissao"), AuthorityColumn.DATE),
)

# Both must appear in the same row for it to be the authority header.
AUTHORITY_ANCHORS = ("chave", "situacao")


def resolve_ledger_columns(headers: Sequence[str]) -> Mapping[LedgerColumn, int]:
    """Bind every role to the first header satisfying its predicate.

    Roles are tried in rule order and a column already bound to an earlier
    role is not offered to later ones.
    """
    mapping: dict[LedgerColumn, int] = {}
    for predicate, role in LEDGER_RULES:
        for idx, token in enumerate(headers):
            if idx in mapping.values():
                continue
            if predicate(token):
                mapping[role] = idx
                break
    return mapping


def resolve_authority_columns(headers: Sequence[str]) -> Mapping[AuthorityColumn, int]:
    """Give each header cell the first role it satisfies.

    When several cells carry the same role the right-most one is kept.
    """
    mapping: dict[AuthorityColumn, int] = {}
    for idx, token in enumerate(headers):
        for predicate, role in AUTHORITY_RULES:
            if predicate(token):
                mapping[role] = idx
                break
    return mapping


def is_authority_header(headers: Sequence[str]) -> bool:
    return all(any(anchor in token for token in headers) for anchor in AUTHORITY_ANCHORS)
