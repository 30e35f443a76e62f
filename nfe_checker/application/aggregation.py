"""Merging of several authority exports into one record list."""
from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from nfe_checker.domain.models import AuthorityRecord


class MergePolicy(str, Enum):
    FIRST_WINS = "first"
    LAST_WINS = "last"
    UNION = "union"


def merge_authority_records(
    batches: Iterable[Sequence[AuthorityRecord]],
    policy: MergePolicy = MergePolicy.FIRST_WINS,
) -> list[AuthorityRecord]:
    """Concatenate authority batches, resolving repeated keys per ``policy``.

    ``FIRST_WINS`` keeps the earliest record for a key, ``LAST_WINS`` lets a
    later record replace it at the position the key first appeared, and
    ``UNION`` keeps every record.
    """
    policy = MergePolicy(policy)
    if policy is MergePolicy.UNION:
        return [record for batch in batches for record in batch]

    merged: dict[str, AuthorityRecord] = {}
    for batch in batches:
        for record in batch:
            if record.key in merged and policy is MergePolicy.FIRST_WINS:
                continue
            merged[record.key] = record
    return list(merged.values())
