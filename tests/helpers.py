from decimal import Decimal
from io import BytesIO

import pandas as pd

from nfe_checker.domain.models import AuthorityRecord, LedgerRecord


def make_key(year: str = "24", month: str = "03", tail: str = "1") -> str:
    return "35" + year + month + tail * 38


def make_ledger(key: str, value: str = "10.00", number: str = "100", issue_date: str = "") -> LedgerRecord:
    return LedgerRecord(key=key, number=number, value=Decimal(value), issue_date=issue_date)


def make_authority(key: str, status_text: str = "Autorizada", number: str = "100") -> AuthorityRecord:
    return AuthorityRecord(
        key=key,
        number=number,
        series="1",
        status_text=status_text,
        issuer="ACME LTDA",
        issue_date="",
    )


def make_workbook(rows: list[list[object]]) -> bytes:
    buffer = BytesIO()
    pd.DataFrame(rows).to_excel(buffer, header=False, index=False, engine="openpyxl")
    return buffer.getvalue()


def make_portal_page(header: list[str], rows: list[list[str]], banner: bool = True) -> str:
    def tr(cells: list[str], tag: str = "td") -> str:
        return "<tr>" + "".join(f"<{tag}>{cell}</{tag}>" for cell in cells) + "</tr>"

    parts = ["<html><body>"]
    parts.append("<table><tr><td>Portal da Nota Fiscal Eletrônica</td></tr></table>")
    parts.append("<table>")
    if banner:
        parts.append(tr(["Consulta de NF-e emitidas"]))
    parts.append(tr(header, "th"))
    parts.extend(tr(row) for row in rows)
    parts.append("</table></body></html>")
    return "".join(parts)
