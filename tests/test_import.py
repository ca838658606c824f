"""Tests for CSV import and import ledger commands."""

import pytest

from budgetbook.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--owner", "owner-1", *args]
    )


def test_import_successful(cli_runner, temp_db, sample_account, fixtures_dir):
    """Test successful CSV import."""
    csv_file = fixtures_dir / "bank_with_header.csv"

    result = _invoke(cli_runner, temp_db, "import", str(csv_file), "--account", str(sample_account.id))

    assert result.exit_code == 0
    assert "Import complete" in result.output
    assert "Imported: 3 transactions" in result.output
    assert "Skipped: 0 duplicates" in result.output


def test_import_twice_skips_duplicates(cli_runner, temp_db, sample_account, fixtures_dir):
    """Re-importing a file reports every row as a duplicate."""
    csv_file = str(fixtures_dir / "bank_with_header.csv")

    _invoke(cli_runner, temp_db, "import", csv_file, "--account", str(sample_account.id))
    result = _invoke(cli_runner, temp_db, "import", csv_file, "--account", str(sample_account.id))

    assert result.exit_code == 0
    assert "Imported: 0 transactions" in result.output
    assert "Skipped: 3 duplicates" in result.output


def test_import_mapping_required(cli_runner, temp_db, sample_account, fixtures_dir):
    """A headerless file without mapping prints suggestions and exits with 2."""
    csv_file = fixtures_dir / "bank_no_header.csv"

    result = _invoke(cli_runner, temp_db, "import", str(csv_file), "--account", str(sample_account.id))

    assert result.exit_code == 2
    assert "no recognizable header row" in result.output
    assert "Suggested: --date-column 0 --amount-column 1 --description-column 2" in result.output


def test_import_with_columns(cli_runner, temp_db, owner_id, sample_account, fixtures_dir):
    """Column options import a headerless file and can be saved."""
    csv_file = fixtures_dir / "bank_no_header.csv"

    result = _invoke(
        cli_runner,
        temp_db,
        "import",
        str(csv_file),
        "--account",
        str(sample_account.id),
        "--date-column",
        "0",
        "--amount-column",
        "1",
        "--description-column",
        "2",
        "--save-mapping",
    )

    assert result.exit_code == 0
    assert "Imported: 3 transactions" in result.output
    assert temp_db.get_csv_mapping(owner_id, sample_account.id) is not None


def test_import_partial_columns_rejected(cli_runner, temp_db, sample_account, fixtures_dir):
    """Column options must be given together."""
    csv_file = fixtures_dir / "bank_no_header.csv"

    result = _invoke(
        cli_runner, temp_db, "import", str(csv_file), "--account", str(sample_account.id), "--date-column", "0"
    )

    assert result.exit_code == 1
    assert "must be given together" in result.output


def test_import_missing_columns(cli_runner, temp_db, sample_account, fixtures_dir):
    """Test import with missing required columns."""
    csv_file = fixtures_dir / "missing_date_column.csv"

    result = _invoke(cli_runner, temp_db, "import", str(csv_file), "--account", str(sample_account.id))

    assert result.exit_code == 1
    assert "Error: CSV is missing a date column" in result.output


def test_import_unknown_account(cli_runner, temp_db, fixtures_dir):
    """Importing into an unknown account fails."""
    csv_file = fixtures_dir / "bank_with_header.csv"

    result = _invoke(cli_runner, temp_db, "import", str(csv_file), "--account", "99")

    assert result.exit_code == 1
    assert "Account not found: 99" in result.output


def test_import_reports_issues(cli_runner, temp_db, sample_account, fixtures_dir):
    """Row issues are listed after the summary."""
    csv_file = fixtures_dir / "row_issues.csv"

    result = _invoke(cli_runner, temp_db, "import", str(csv_file), "--account", str(sample_account.id))

    assert result.exit_code == 0
    assert "Errors: 2" in result.output
    assert "Warnings: 2" in result.output
    assert "Row 2: Invalid or empty date" in result.output


def test_imports_list_and_show(cli_runner, temp_db, sample_account, fixtures_dir):
    """The ledger commands show batches and their issues."""
    csv_file = fixtures_dir / "row_issues.csv"
    _invoke(cli_runner, temp_db, "import", str(csv_file), "--account", str(sample_account.id))

    listed = _invoke(cli_runner, temp_db, "imports", "list")
    shown = _invoke(cli_runner, temp_db, "imports", "show", "1")

    assert listed.exit_code == 0
    assert "row_issues.csv" in listed.output
    assert "COMPLETED_WITH_WARNINGS" in listed.output
    assert shown.exit_code == 0
    assert "Parse errors: 2" in shown.output
    assert "Skipped zero-amount transaction" in shown.output


def test_imports_show_unknown(cli_runner, temp_db):
    """Showing a missing batch fails."""
    result = _invoke(cli_runner, temp_db, "imports", "show", "5")

    assert result.exit_code == 1
    assert "Import batch not found: 5" in result.output


@pytest.mark.parametrize(
    "extra",
    [["--save-mapping"], ["--category-column", "3"], ["--external-id-column", "4"]],
)
def test_import_optional_columns_need_required_columns(
    cli_runner, temp_db, owner_id, sample_account, fixtures_dir, extra
):
    """Optional column options are rejected without the required ones."""
    csv_file = fixtures_dir / "bank_with_header.csv"

    result = _invoke(
        cli_runner, temp_db, "import", str(csv_file), "--account", str(sample_account.id), *extra
    )

    assert result.exit_code == 1
    assert "must be given together" in result.output
    assert temp_db.list_import_batches(owner_id) == []
