"""Tests for the CSV statement parser."""

from datetime import date
from decimal import Decimal

import pytest

from budgetbook.domain.entities import (
    ColumnMapping,
    HeaderMappingPrompt,
    IssueSeverity,
    ParsedStatement,
)
from budgetbook.domain.statement_parser import (
    CSVStatementParser,
    MAPPING_REQUIRED_MESSAGE,
    normalize_header,
)


@pytest.fixture
def parser():
    """Create a statement parser."""
    return CSVStatementParser()


def test_normalize_header():
    """Headers are lowercased with underscores and runs of spaces collapsed."""
    assert normalize_header("  Transaction_Date ") == "transaction date"
    assert normalize_header("Posted   DATE") == "posted date"
    assert normalize_header(None) == ""


def test_header_row_detected(parser):
    """A row of known keywords is treated as a header."""
    assert parser.looks_like_header(["Date", "Amount", "Description"])


def test_data_row_not_header(parser):
    """A row starting with a date and an amount is data."""
    assert not parser.looks_like_header(["2024-01-05", "-42.10", "Coffee Shop"])


def test_single_keyword_is_not_header(parser):
    """One matching keyword is not enough for a header."""
    assert not parser.looks_like_header(["Date", "Foo", "Bar"])


def test_parse_with_header(parser, fixtures_dir):
    """Rows of a headed file are normalized."""
    text = (fixtures_dir / "bank_with_header.csv").read_text(encoding="utf-8")

    outcome = parser.parse_text(text)

    assert isinstance(outcome, ParsedStatement)
    assert not outcome.fatal
    assert outcome.issues == ()
    assert len(outcome.rows) == 3
    first = outcome.rows[0]
    assert first.row_number == 2
    assert first.date == date(2024, 3, 1)
    assert first.signed_amount == Decimal("-54.20")
    assert first.description == "Grocery Store"
    assert first.source_category == "Groceries"
    assert first.external_id == "T001"
    assert outcome.rows[2].source_category is None


def test_parse_debit_credit_and_memo(parser, fixtures_dir):
    """Debit and credit columns combine into a signed amount; memo wins over payee."""
    text = (fixtures_dir / "bank_debit_credit.csv").read_text(encoding="utf-8")

    outcome = parser.parse_text(text)

    assert [row.signed_amount for row in outcome.rows] == [
        Decimal("-54.20"),
        Decimal("2500.00"),
        Decimal("-1200.00"),
    ]
    assert [row.description for row in outcome.rows] == [
        "Weekly groceries",
        "EMPLOYER INC",
        "Rent March",
    ]
    assert outcome.rows[0].date == date(2024, 3, 1)


def test_debit_credit_uses_absolute_values(parser):
    """Signs in debit/credit cells are ignored."""
    outcome = parser.parse_text("Date,Debit,Credit,Description\n2024-03-01,-10.00,,Fee\n")

    assert outcome.rows[0].signed_amount == Decimal("-10.00")


def test_unified_amount_wins_over_debit_credit(parser):
    """A parseable amount column is used before debit/credit."""
    outcome = parser.parse_text(
        "Date,Amount,Debit,Credit,Description\n2024-03-01,5.00,10.00,,Refund\n"
    )

    assert outcome.rows[0].signed_amount == Decimal("5.00")


def test_first_matching_header_wins(parser):
    """Repeated or alternative headers map to the first match."""
    header = ["Date", "Amount", "Amount", "Transaction Date"]
    indexes = parser.resolve_header_columns(header)

    assert indexes.date == 0
    assert indexes.amount == 1


def test_row_issues(parser, fixtures_dir):
    """Bad rows become per-row issues without aborting the file."""
    text = (fixtures_dir / "row_issues.csv").read_text(encoding="utf-8")

    outcome = parser.parse_text(text)

    errors = [(i.row_number, i.message) for i in outcome.issues if i.severity == IssueSeverity.ERROR]
    warnings = [
        (i.row_number, i.message) for i in outcome.issues if i.severity == IssueSeverity.WARNING
    ]
    assert errors == [(2, "Invalid or empty date"), (3, "Invalid or empty amount")]
    assert warnings == [(5, "Missing description. Defaulted to Imported transaction")]
    # The zero-amount row is kept here and rejected during import
    assert [row.row_number for row in outcome.rows] == [4, 5, 6]
    assert outcome.rows[1].description == "Imported transaction"


def test_empty_csv_is_fatal(parser):
    """A file without records is a fatal error."""
    outcome = parser.parse_text("\n\n  \n")

    assert outcome.fatal
    assert outcome.fatal_message == "CSV is empty"
    assert outcome.rows == ()


def test_missing_date_column_is_fatal(parser, fixtures_dir):
    """A header without a date column rejects the file."""
    outcome = parser.parse_text((fixtures_dir / "missing_date_column.csv").read_text())

    assert outcome.fatal
    assert outcome.fatal_message == "CSV is missing a date column"


def test_missing_amount_column_is_fatal(parser, fixtures_dir):
    """A header without amount or debit/credit rejects the file."""
    outcome = parser.parse_text((fixtures_dir / "missing_amount_column.csv").read_text())

    assert outcome.fatal
    assert outcome.fatal_message == "CSV is missing amount or debit/credit columns"


def test_headerless_without_mapping_prompts(parser, fixtures_dir):
    """A headerless file without a mapping yields a prompt with suggestions."""
    outcome = parser.parse_text((fixtures_dir / "bank_no_header.csv").read_text())

    assert isinstance(outcome, HeaderMappingPrompt)
    assert outcome.message == MAPPING_REQUIRED_MESSAGE
    assert outcome.column_count == 3
    assert outcome.sample_row == ("2024-03-01", "-20.00", "Groceries")
    assert outcome.suggested_date_column_index == 0
    assert outcome.suggested_amount_column_index == 1
    assert outcome.suggested_description_column_index == 2
    assert outcome.suggested_category_column_index is None
    assert outcome.suggested_external_id_column_index is None


def test_prompt_suggestions_reordered_columns(parser):
    """Suggestions follow cell content, not position."""
    outcome = parser.parse_text("Coffee Shop Downtown,12/03/2024,4.50,x1\n")

    assert isinstance(outcome, HeaderMappingPrompt)
    assert outcome.suggested_date_column_index == 1
    assert outcome.suggested_amount_column_index == 2
    assert outcome.suggested_description_column_index == 0


def test_prompt_without_inference(parser):
    """No suggestions are made unless date, amount and description are all found."""
    outcome = parser.parse_text("foo,bar,baz\n")

    assert isinstance(outcome, HeaderMappingPrompt)
    assert outcome.suggested_date_column_index is None
    assert outcome.suggested_amount_column_index is None
    assert outcome.suggested_description_column_index is None


def test_headerless_with_mapping(parser, fixtures_dir):
    """A mapping parses every record, numbering rows from 1."""
    mapping = ColumnMapping(
        date_column_index=0, amount_column_index=1, description_column_index=2
    )

    outcome = parser.parse_text((fixtures_dir / "bank_no_header.csv").read_text(), mapping)

    assert isinstance(outcome, ParsedStatement)
    assert [row.row_number for row in outcome.rows] == [1, 2, 3]
    assert outcome.rows[2].signed_amount == Decimal("1500.00")


def test_mapping_out_of_range_column(parser):
    """Out-of-range mapped columns behave like empty cells."""
    mapping = ColumnMapping(
        date_column_index=0, amount_column_index=1, description_column_index=9
    )

    outcome = parser.parse_text("2024-03-01,-20.00\n", mapping)

    assert outcome.rows[0].description == "Imported transaction"
    assert outcome.issues[0].severity == IssueSeverity.WARNING


def test_semicolon_delimiter_and_bom(parser):
    """Semicolon files and a leading BOM are handled."""
    text = "\ufeffDate;Amount;Description\n2024-03-01;-3.50;Bakery\n2024-03-02;-7.25;Cinema\n"

    outcome = parser.parse_text(text)

    assert len(outcome.rows) == 2
    assert outcome.rows[1].description == "Cinema"


def test_ragged_rows_warn(parser):
    """Rows with a different field count get a warning but are still parsed."""
    outcome = parser.parse_text(
        "Date,Amount,Description\n2024-03-01,-1.00,One,extra\n2024-03-02,-2.00,Two\n"
    )

    assert [i.message for i in outcome.issues] == ["Expected 3 fields but parsed 4"]
    assert len(outcome.rows) == 2


def test_blank_lines_skipped(parser):
    """Blank lines between records are ignored."""
    outcome = parser.parse_text("Date,Amount,Description\n\n\n2024-03-01,-1.00,One\n\n")

    assert len(outcome.rows) == 1
    assert outcome.issues == ()


def test_long_values_truncated(parser):
    """Description, external id and category are cut to their maximum lengths."""
    text = "Date,Amount,Description,Category,Reference\n2024-03-01,-1.00,{},{},{}\n".format(
        "d" * 400, "c" * 200, "r" * 250
    )

    row = parser.parse_text(text).rows[0]

    assert len(row.description) == 300
    assert len(row.source_category) == 120
    assert len(row.external_id) == 200


def test_oversized_amount_is_row_error(parser):
    """Amounts too large to store are rejected per row."""
    outcome = parser.parse_text(
        "Date,Amount,Description\n"
        "2024-03-01,1e30,Weird\n"
        "2024-03-02,123456789012345678901234567890,Reference\n"
        "2024-03-03,-5.00,Coffee\n"
    )

    assert [(i.row_number, i.message) for i in outcome.issues] == [
        (2, "Invalid or empty amount"),
        (3, "Invalid or empty amount"),
    ]
    assert [row.row_number for row in outcome.rows] == [4]


def test_prompt_skips_oversized_number_column(parser):
    """A long reference number is not suggested as the amount column."""
    outcome = parser.parse_text("2024-03-01,123456789012345678901234567890,-5.00,Coffee\n")

    assert isinstance(outcome, HeaderMappingPrompt)
    assert outcome.suggested_date_column_index == 0
    assert outcome.suggested_amount_column_index == 2
    assert outcome.suggested_description_column_index == 3
