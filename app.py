"""Streamlit front-end for the SEFAZ reconciliation pipeline."""
from __future__ import annotations

from typing import Sequence

import pandas as pd
import streamlit as st

from nfe_checker import (
    FormatError,
    InvoiceReconciler,
    extract_authority,
    extract_ledger,
)
from nfe_checker.application.aggregation import merge_authority_records
from nfe_checker.config import SETTINGS
from nfe_checker.domain.models import ComparisonResult, ReconciliationStatus
from nfe_checker.domain.results import ReconciliationReport
from nfe_checker.presentation.diff_report import pending_only, render_csv, render_html, results_to_rows
from nfe_checker.presentation.results_view import SORTABLE_FIELDS, filter_results, paginate, sort_results


st.set_page_config(page_title="FiscalAudit", layout="wide")
st.title("Confronto Contábil x SEFAZ")


def results_to_dataframe(results: Sequence[ComparisonResult]) -> pd.DataFrame:
    return pd.DataFrame(results_to_rows(results))


for state_key, default in (("ledger", None), ("authority", None), ("report", None)):
    if state_key not in st.session_state:
        st.session_state[state_key] = default


col1, col2 = st.columns(2)
with col1:
    ledger_file = st.file_uploader("Arquivo contábil", type=["xls", "xlsx", "csv"])
    if ledger_file is not None:
        try:
            st.session_state["ledger"] = extract_ledger(ledger_file.getvalue())
            st.session_state["report"] = None
        except FormatError as exc:
            st.session_state["ledger"] = None
            st.error(f"Erro no arquivo contábil: {exc}")
with col2:
    authority_files = st.file_uploader("Arquivos SEFAZ (HTML)", type=["html", "htm"], accept_multiple_files=True)
    if authority_files:
        try:
            batches = [extract_authority(f.getvalue()) for f in authority_files]
            st.session_state["authority"] = merge_authority_records(batches, SETTINGS.merge_policy)
            st.session_state["report"] = None
        except FormatError as exc:
            st.session_state["authority"] = None
            st.error(f"Erro nos arquivos SEFAZ: {exc}")

include_unmatched = st.checkbox("Listar notas contábeis ausentes na SEFAZ", value=SETTINGS.include_unmatched_ledger)
ready = bool(st.session_state["ledger"]) and bool(st.session_state["authority"])
if st.button("Confrontar", disabled=not ready):
    reconciler = InvoiceReconciler(include_unmatched_ledger=include_unmatched)
    st.session_state["report"] = reconciler.build_report(st.session_state["ledger"], st.session_state["authority"])

report: ReconciliationReport | None = st.session_state["report"]
if report is None:
    st.info("Carregue os dois arquivos e clique em Confrontar.")
else:
    summary = report.summary
    metrics = st.columns(5)
    metrics[0].metric("Total", summary.total)
    metrics[1].metric("Lançadas", summary.matched)
    metrics[2].metric("Não lançadas", summary.not_booked)
    metrics[3].metric("Canceladas", summary.cancelled)
    metrics[4].metric("Não encontradas na SEFAZ", summary.not_found_at_authority)

    filter_col, status_col, sort_col = st.columns([3, 2, 2])
    with filter_col:
        text = st.text_input("Buscar número, chave ou situação")
    with status_col:
        status_options = ["Todos"] + [status.value for status in ReconciliationStatus]
        status_choice = st.selectbox("Status", status_options)
    with sort_col:
        sort_field = st.selectbox("Ordenar por", list(SORTABLE_FIELDS))
        descending = st.checkbox("Decrescente")

    status = None if status_choice == "Todos" else ReconciliationStatus(status_choice)
    view = sort_results(filter_results(report.results, text=text, status=status), sort_field, descending=descending)
    page_number = st.number_input("Página", min_value=1, value=1, step=1)
    page = paginate(view, page=int(page_number))
    st.caption(f"Exibindo {page.first_index} a {page.last_index} de {page.total_items} resultados")
    st.dataframe(results_to_dataframe(page.items), use_container_width=True)

    pending = pending_only(report.results)
    st.download_button(
        "Baixar CSV",
        data=render_csv(report.results),
        file_name="confronto_fiscal.csv",
        mime="text/csv",
    )
    st.download_button(
        "Relatório completo (HTML)",
        data=render_html(report.results, generated_at=summary.generated_at).encode("utf-8"),
        file_name="confronto_fiscal.html",
        mime="text/html",
    )
    st.download_button(
        "Pendências (HTML)",
        data=render_html(
            pending,
            title="Relatório de Pendências (Não Lançadas)",
            generated_at=summary.generated_at,
        ).encode("utf-8"),
        file_name="pendencias_fiscal.html",
        mime="text/html",
    )
