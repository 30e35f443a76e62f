"""Command-line entrypoint for invoice reconciliation."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from nfe_checker.application.aggregation import MergePolicy
from nfe_checker.application.use_cases import ReconcileInvoicesUseCase, ReconciliationContext
from nfe_checker.config import SETTINGS
from nfe_checker.domain.errors import FormatError
from nfe_checker.domain.services import InvoiceReconciler
from nfe_checker.infrastructure.repositories.file_repositories import (
    HtmlAuthorityRepository,
    SpreadsheetLedgerRepository,
)
from nfe_checker.presentation.diff_report import pending_only, render_csv, render_html


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile an accounting ledger export against SEFAZ portal exports")
    parser.add_argument("ledger", type=Path, help="Path to the ledger spreadsheet (xlsx, xls or csv)")
    parser.add_argument("authority", type=Path, nargs="+", help="Path(s) to saved SEFAZ HTML pages")
    parser.add_argument(
        "--authority-only",
        action="store_true",
        help="Do not report ledger invoices missing from the SEFAZ export",
    )
    parser.add_argument(
        "--merge-policy",
        choices=[policy.value for policy in MergePolicy],
        default=SETTINGS.merge_policy.value,
        help="How repeated keys across several SEFAZ exports are resolved",
    )
    parser.add_argument("--encoding", default=SETTINGS.authority_encoding, help="Encoding of the HTML files")
    parser.add_argument("--csv", type=Path, help="Write the results as CSV to this path")
    parser.add_argument("--html", type=Path, help="Write the results as an HTML report to this path")
    parser.add_argument("--pending-only", action="store_true", help="Export only invoices not booked in the ledger")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    context = ReconciliationContext(
        ledger_repository=SpreadsheetLedgerRepository(args.ledger),
        authority_repository=HtmlAuthorityRepository(
            args.authority,
            merge_policy=MergePolicy(args.merge_policy),
            encoding=args.encoding,
        ),
        reconciler=InvoiceReconciler(include_unmatched_ledger=not args.authority_only),
    )
    try:
        report, ledger_records, authority_records = ReconcileInvoicesUseCase(context).execute()
    except FormatError as exc:
        print(f"Invalid document: {exc}", file=sys.stderr)
        return 2

    print("Reconciliation Summary")
    print("======================")
    summary = report.summary
    print(f"Ledger records: {len(ledger_records)}")
    print(f"SEFAZ records: {len(authority_records)}")
    print(f"Booked: {summary.matched}")
    print(f"Not booked: {summary.not_booked}")
    print(f"Cancelled: {summary.cancelled}")
    print(f"Not found at SEFAZ: {summary.not_found_at_authority}")

    if report.has_issues():
        print("\nDiscrepancies detected:")
        for result in report.iter_discrepancies():
            print(f"- {result.status.value} {result.number or '-'} ({result.key}): {result.authority_status}")
    else:
        print("\nNo discrepancies detected.")

    exported = pending_only(report.results) if args.pending_only else list(report.results)
    if args.csv:
        args.csv.write_bytes(render_csv(exported))
    if args.html:
        title = "Relatório de Pendências (Não Lançadas)" if args.pending_only else "Relatório Completo de Confronto"
        args.html.write_text(
            render_html(exported, title=title, generated_at=summary.generated_at),
            encoding="utf-8",
        )

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
