"""Central configuration for the NF-e checker package."""
from __future__ import annotations

from dataclasses import dataclass

from nfe_checker.application.aggregation import MergePolicy

# Portal exports are saved by the browser in ISO-8859-1.
AUTHORITY_ENCODING = "latin-1"

# Banner rows can precede the real header in authority exports.
HEADER_SEARCH_ROWS = 5

# Authority keys must be strictly longer than this to count as invoices.
MIN_AUTHORITY_KEY_LENGTH = 20

PAGE_SIZE = 100


@dataclass(slots=True, frozen=True)
class Settings:
    authority_encoding: str
    header_search_rows: int
    min_authority_key_length: int
    include_unmatched_ledger: bool
    page_size: int
    merge_policy: MergePolicy


SETTINGS = Settings(
    authority_encoding=AUTHORITY_ENCODING,
    header_search_rows=HEADER_SEARCH_ROWS,
    min_authority_key_length=MIN_AUTHORITY_KEY_LENGTH,
    include_unmatched_ledger=True,
    page_size=PAGE_SIZE,
    merge_policy=MergePolicy.FIRST_WINS,
)
