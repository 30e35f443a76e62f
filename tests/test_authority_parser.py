import pytest
from bs4 import BeautifulSoup

from nfe_checker.domain.errors import FormatError
from nfe_checker.infrastructure.parsing.authority import extract_authority, find_invoice_table
from nfe_checker.infrastructure.parsing.columns import AuthorityColumn

from tests.helpers import make_key, make_portal_page

HEADER = ["Chave de Acesso", "Situação", "Número", "Série", "CNPJ Emitente", "Emitente", "Data Emissão"]


def test_extract_authority_reads_invoice_table():
    key = make_key()
    page = make_portal_page(HEADER, [[key, "Autorizada", "100", "1", "12.345.678/0001-90", "ACME LTDA", "05/03/2024"]])

    records = extract_authority(page)

    assert len(records) == 1
    record = records[0]
    assert record.key == key
    assert record.status_text == "Autorizada"
    assert record.number == "100"
    assert record.series == "1"
    assert record.issuer == "ACME LTDA"
    assert record.issue_date == "05/03/2024"
    assert record.source_row[0] == key


def test_formatted_key_and_missing_date():
    key = make_key(year="23", month="07")
    formatted = " ".join(key[i:i + 4] for i in range(0, len(key), 4))
    page = make_portal_page(["Chave", "Situacao", "Numero"], [[formatted, "Autorizada", "100"]])

    record = extract_authority(page)[0]

    assert record.key == key
    assert record.issue_date == "07/2023"
    assert record.series == ""


def test_short_keys_and_narrow_rows_are_skipped():
    good = make_key()
    page = make_portal_page(
        ["Chave", "Situacao", "Numero"],
        [
            ["12345", "Autorizada", "1"],
            ["Total: 2 notas"],
            ["1" * 20, "Autorizada", "2"],
            ["1" * 21, "Autorizada", "3"],
            [good, "Cancelada", "4"],
        ],
    )

    records = extract_authority(page)

    assert [r.number for r in records] == ["3", "4"]


def test_header_beyond_search_depth_is_not_found():
    rows = "".join("<tr><td>banner</td></tr>" for _ in range(5))
    page = (
        "<table>" + rows + "<tr><td>Chave</td><td>Situacao</td><td>Numero</td></tr>"
        f"<tr><td>{make_key()}</td><td>Autorizada</td><td>1</td></tr></table>"
    )

    with pytest.raises(FormatError, match="target table not found"):
        extract_authority(page)


def test_table_needs_both_anchor_headers():
    page = "<table><tr><th>Chave</th><th>Numero</th><th>Valor</th></tr></table>"

    with pytest.raises(FormatError):
        extract_authority(page)


def test_first_matching_table_is_used():
    first, second = make_key(tail="1"), make_key(tail="2")
    page = make_portal_page(["Chave", "Situacao", "Numero"], [[first, "Autorizada", "1"]]) + make_portal_page(
        ["Chave", "Situacao", "Numero"], [[second, "Autorizada", "2"]]
    )

    records = extract_authority(page)

    assert [r.key for r in records] == [first]


def test_column_roles_follow_priority():
    html = make_portal_page(HEADER, [])
    _, columns = find_invoice_table(BeautifulSoup(html, "lxml"))

    assert columns[AuthorityColumn.KEY] == 0
    assert columns[AuthorityColumn.STATUS] == 1
    assert columns[AuthorityColumn.NUMBER] == 2
    assert columns[AuthorityColumn.SERIES] == 3
    assert columns[AuthorityColumn.ISSUER] == 5
    assert columns[AuthorityColumn.DATE] == 6


def test_bytes_are_decoded_as_latin1():
    key = make_key()
    page = make_portal_page(["Chave", "Situação", "Número"], [[key, "Autorizada", "1"]])

    records = extract_authority(page.encode("latin-1"))

    assert records[0].number == "1"
    assert records[0].status_text == "Autorizada"


def test_implicitly_closed_cells_and_rows():
    key = make_key()
    page = (
        "<table><tr><th>Chave<th>Situacao<th>Numero"
        f"<tr><td>{key}<td>Autorizada<td>100"
        f"<tr><td>{make_key(tail='2')}<td>Cancelada<td>101</table>"
    )

    records = extract_authority(page)

    assert [r.number for r in records] == ["100", "101"]
    assert records[0].key == key
    assert records[1].status_text == "Cancelada"
