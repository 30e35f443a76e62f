"""Report generators for reconciliation results."""
from __future__ import annotations

import csv
import html
import io
from datetime import datetime
from typing import Sequence

from nfe_checker.domain.models import ComparisonResult, ReconciliationStatus

REPORT_COLUMNS = ("Número", "Série", "Chave de Acesso", "Data", "Situação SEFAZ", "Status Confronto")

STATUS_COLORS = {
    ReconciliationStatus.MATCHED: "#2e7d32",
    ReconciliationStatus.NOT_BOOKED_IN_LEDGER: "#c62828",
    ReconciliationStatus.CANCELLED: "#ef6c00",
}


def pending_only(results: Sequence[ComparisonResult]) -> list[ComparisonResult]:
    """Invoices the authority knows that were never booked, cancellations excluded."""
    return [
        r
        for r in results
        if r.status is ReconciliationStatus.NOT_BOOKED_IN_LEDGER and "cancelada" not in r.authority_status.lower()
    ]


def results_to_rows(results: Sequence[ComparisonResult]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for item in results:
        rows.append(
            {
                "Número": item.number,
                "Série": item.series,
                "Chave de Acesso": item.key,
                "Data": item.issue_date,
                "Valor": f"{item.value:.2f}",
                "Situação SEFAZ": item.authority_status,
                "Status Confronto": item.status.value,
            }
        )
    return rows


def render_csv(results: Sequence[ComparisonResult]) -> bytes:
    rows = results_to_rows(results)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def render_html(
    results: Sequence[ComparisonResult],
    title: str = "Relatório Completo de Confronto",
    generated_at: datetime | None = None,
) -> str:
    generated = (generated_at or datetime.utcnow()).strftime("%d/%m/%Y %H:%M:%S UTC")
    heading = f"<h1>{html.escape(title)}</h1><p>Gerado em: {generated}</p>"
    if not results:
        return heading + "<p>Nenhum resultado.</p>"
    header = "".join(f"<th>{col}</th>" for col in REPORT_COLUMNS)
    body_parts = []
    for item in results:
        color = STATUS_COLORS.get(item.status)
        style = f' style="color: {color}"' if color else ""
        cells = [item.number, item.series, item.key, item.issue_date, item.authority_status]
        body_parts.append(
            "<tr>"
            + "".join(f"<td>{html.escape(value)}</td>" for value in cells)
            + f"<td{style}>{html.escape(item.status.value)}</td>"
            + "</tr>"
        )
    body_html = "".join(body_parts)
    return f"{heading}<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"
