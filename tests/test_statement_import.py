"""Tests for reading bank statement CSV files."""

import pytest

from ledgerkit.domain.errors import ValidationError
from ledgerkit.domain.statement_import import BankStatementCSVReader


def test_read_rows(tmp_path):
    csv_file = tmp_path / "statement.csv"
    csv_file.write_text(
        "Date,Description,Reference,Debit,Credit,Balance\n"
        "2024-03-01, Coffee ,,4.50,,995.50\n"
    )

    (row,) = BankStatementCSVReader().read(str(csv_file))

    assert row == {
        "date": "2024-03-01",
        "description": "Coffee",
        "reference": None,
        "debit": "4.50",
        "credit": None,
        "balance": "995.50",
    }


def test_semicolon_delimiter_and_bom(tmp_path):
    csv_file = tmp_path / "statement.csv"
    csv_file.write_text(
        "\ufeffDate;Description;Debit;Credit\n2024-03-01;Salary;;2500\n2024-03-02;Rent;900;\n",
        encoding="utf-8",
    )

    rows = BankStatementCSVReader().read(str(csv_file))

    assert [r["date"] for r in rows] == ["2024-03-01", "2024-03-02"]
    assert rows[0]["credit"] == "2500"
    assert rows[1]["debit"] == "900"


def test_custom_column_names(tmp_path):
    csv_file = tmp_path / "statement.csv"
    csv_file.write_text("Txn Date,Narration,Withdrawal,Deposit\n01/03/2024,ATM,200,\n")

    reader = BankStatementCSVReader(
        {"date": "Txn Date", "description": "Narration", "debit": "Withdrawal", "credit": "Deposit"}
    )
    (row,) = reader.read(str(csv_file))

    assert row["description"] == "ATM"
    assert row["debit"] == "200"


def test_missing_required_columns(tmp_path):
    csv_file = tmp_path / "statement.csv"
    csv_file.write_text("Date,Description\n2024-03-01,Coffee\n")

    with pytest.raises(ValidationError, match="missing required columns"):
        BankStatementCSVReader().read(str(csv_file))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        BankStatementCSVReader().read(str(tmp_path / "nope.csv"))
