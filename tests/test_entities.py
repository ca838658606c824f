"""Tests for domain entities."""

import pytest
from datetime import date
from decimal import Decimal

from budgetbook.domain.entities import (
    CandidateTransaction,
    HeaderMappingPrompt,
    ImportSummary,
    Issue,
    IssueSeverity,
    ParsedStatement,
    StatementImportResult,
    StatementImportStatus,
    TransactionType,
)


def _candidate(txn_date: date) -> CandidateTransaction:
    return CandidateTransaction(
        row_number=2,
        date=txn_date,
        type=TransactionType.EXPENSE,
        amount=Decimal("10.00"),
        description="Coffee",
        external_id=None,
        source_category=None,
        fingerprint="deadbeef",
    )


class TestCandidateTransaction:
    """Tests for CandidateTransaction entity."""

    def test_month_key(self):
        """The month key is derived from the date."""
        assert _candidate(date(2024, 3, 9)).month_key == "2024-03"

    def test_immutability(self):
        """Test that candidates are immutable."""
        candidate = _candidate(date(2024, 3, 9))
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            candidate.amount = Decimal("1.00")


class TestParsedStatement:
    """Tests for ParsedStatement entity."""

    def test_fatal_message_is_last_issue(self):
        parsed = ParsedStatement(
            rows=(),
            issues=(
                Issue(IssueSeverity.WARNING, 3, "Malformed CSV"),
                Issue(IssueSeverity.ERROR, None, "CSV is missing a date column"),
            ),
            fatal=True,
        )
        assert parsed.fatal_message == "CSV is missing a date column"

    def test_no_fatal_message_when_not_fatal(self):
        parsed = ParsedStatement(
            rows=(), issues=(Issue(IssueSeverity.ERROR, 2, "Invalid or empty date"),)
        )
        assert parsed.fatal_message is None


class TestStatementImportResult:
    """Tests for the two import result shapes."""

    def test_completed(self):
        summary = ImportSummary(
            import_batch_id=1, inserted=2, skipped_duplicates=0, parse_errors=(), warnings=()
        )
        result = StatementImportResult.completed(summary)

        assert result.status == StatementImportStatus.COMPLETED
        assert result.summary is summary
        assert result.header_mapping_prompt is None

    def test_mapping_required(self):
        prompt = HeaderMappingPrompt(
            message="no header",
            column_count=3,
            sample_row=("2024-03-01", "-20.00", "Groceries"),
            suggested_date_column_index=0,
            suggested_amount_column_index=1,
            suggested_description_column_index=2,
            suggested_category_column_index=None,
            suggested_external_id_column_index=None,
        )
        result = StatementImportResult.mapping_required(prompt)

        assert result.status == StatementImportStatus.HEADER_MAPPING_REQUIRED
        assert result.summary is None
        assert result.header_mapping_prompt is prompt
