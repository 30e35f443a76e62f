"""Errors raised at the extraction boundary."""
from __future__ import annotations


class FormatError(ValueError):
    """A document lacks the structural anchor needed to read it.

    Extraction never returns partial results: either every qualifying row is
    read or this error is raised and the caller asks for a corrected upload.
    """
