from datetime import datetime
from decimal import Decimal

import pytest

from nfe_checker.domain.errors import FormatError
from nfe_checker.infrastructure.parsing.ledger import extract_ledger, rows_to_ledger_records
from nfe_checker.infrastructure.parsing.utils import parse_currency

from tests.helpers import make_key, make_workbook


def test_extract_ledger_from_workbook():
    key = make_key()
    data = make_workbook(
        [
            ["Chave", "Numero", "Valor", "Emissao"],
            [key, "100", "R$ 1.234,56", "01/03/2024"],
        ]
    )

    records = extract_ledger(data)

    assert len(records) == 1
    record = records[0]
    assert record.key == key
    assert record.number == "100"
    assert record.value == Decimal("1234.56")
    assert record.issue_date == "01/03/2024"
    assert record.source_row[0] == key


def test_missing_key_column_raises():
    data = make_workbook([["Numero", "Valor"], ["1", "10,00"]])

    with pytest.raises(FormatError, match="missing key column"):
        extract_ledger(data)


def test_numeric_and_date_cells_rendered_as_text():
    key = make_key()
    data = make_workbook(
        [
            ["Chave NF-e", "Nota", "Valor Contábil", "Data"],
            [key, 42, 1234.5, datetime(2024, 3, 5)],
        ]
    )

    record = extract_ledger(data)[0]

    assert record.number == "42"
    assert record.value == Decimal("1234.5")
    assert record.issue_date == "05/03/2024"


def test_rows_without_key_are_skipped_and_order_kept():
    first, second = make_key(tail="1"), make_key(tail="2")
    grid = [
        ("Chave", "Numero", "Valor"),
        (first, "1", "10,00"),
        (),
        ("", "2", "20,00"),
        ("---", "3", "30,00"),
        (second, "4", "40,00"),
    ]

    records = rows_to_ledger_records(grid)

    assert [r.key for r in records] == [first, second]
    assert [r.number for r in records] == ["1", "4"]


def test_duplicate_keys_are_not_collapsed():
    key = make_key()
    grid = [("Chave", "Valor"), (key, "1,00"), (key, "2,00")]

    records = rows_to_ledger_records(grid)

    assert [r.value for r in records] == [Decimal("1.00"), Decimal("2.00")]


def test_unresolved_roles_fall_back():
    key = make_key(year="22", month="12")
    records = rows_to_ledger_records([("ChaveNFe",), (key,)])

    assert records[0].number == ""
    assert records[0].value == Decimal("0")
    assert records[0].issue_date == "12/2022"


def test_header_bound_to_first_matching_role():
    key = make_key()
    # "Data Nota" satisfies both number and date; number is tried first.
    records = rows_to_ledger_records([("Chave", "Data Nota", "Emissão"), (key, "77", "02/03/2024")])

    assert records[0].number == "77"
    assert records[0].issue_date == "02/03/2024"


def test_empty_document_raises():
    with pytest.raises(FormatError):
        rows_to_ledger_records([])


def test_extract_ledger_from_semicolon_csv():
    key = make_key()
    data = f"Chave;Numero;Valor\n{key};9;R$ 10,50\n".encode("latin-1")

    records = extract_ledger(data)

    assert records[0].number == "9"
    assert records[0].value == Decimal("10.50")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("R$ 1.234,56", Decimal("1234.56")),
        ("1.000.000,00", Decimal("1000000.00")),
        ("12,3 reais", Decimal("12.3")),
        ("abc", Decimal("0")),
        ("", Decimal("0")),
        (None, Decimal("0")),
    ],
)
def test_parse_currency(raw, expected):
    assert parse_currency(raw) == expected
