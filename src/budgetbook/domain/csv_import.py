"""CSV statement import domain service.

Runs one statement file through parsing, duplicate detection and category
resolution, and records what happened in the import ledger.
"""

from datetime import datetime, UTC
from pathlib import Path
from typing import Optional, Union

from budgetbook.database.base import Database
from budgetbook.domain.account import AccountService
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import (
    CandidateTransaction,
    Category,
    ColumnMapping,
    HeaderMappingPrompt,
    ImportBatch,
    ImportBatchStatus,
    ImportIssue,
    ImportSummary,
    Issue,
    IssueSeverity,
    NewTransaction,
    NormalizedRow,
    StatementImportResult,
    TransactionType,
)
from budgetbook.domain.errors import (
    NotFoundError,
    UnsupportedFormatError,
    ValidationError,
    import_batch_not_found,
)
from budgetbook.domain.statement_parser import (
    CSVStatementParser,
    DEFAULT_DESCRIPTION,
    MAX_DESCRIPTION_LENGTH,
    truncate,
)
from budgetbook.logging_setup import get_logger
from budgetbook.utils.amount_parser import round_currency
from budgetbook.utils.fingerprint import build_fingerprint

logger = get_logger(__name__)

IMPORTED_EXPENSE_CATEGORY = "Imported Expense"
IMPORTED_INCOME_CATEGORY = "Imported Income"
MAX_ISSUE_MESSAGE_LENGTH = 500
UNSUPPORTED_FORMAT_MESSAGE = "Only CSV statement imports are supported."


class CSVImportService:
    """Service for importing bank statement CSV files into an account."""

    def __init__(self, db: Database, owner_id: str, parser: Optional[CSVStatementParser] = None):
        """Initialize CSV import service.

        Args:
            db: Database instance
            owner_id: Owner all operations are scoped to
            parser: Statement parser (a default one is created if omitted)
        """
        self.db = db
        self.owner_id = owner_id
        self.parser = parser or CSVStatementParser()
        self.account_service = AccountService(db, owner_id)
        self.category_service = CategoryService(db, owner_id)

    def import_file(
        self,
        account_id: int,
        csv_file_path: Union[str, Path],
        mapping: Optional[ColumnMapping] = None,
    ) -> StatementImportResult:
        """Import a statement file from disk.

        Raises:
            ValidationError: If the file cannot be read as UTF-8 text
            (plus everything ``import_statement`` raises)
        """
        csv_path = Path(csv_file_path)
        if csv_path.suffix.lower() == ".csv":
            try:
                content = csv_path.read_text(encoding="utf-8-sig")
            except (OSError, UnicodeDecodeError) as e:
                raise ValidationError(f"Unable to read file {csv_path.name}: {e}")
        else:
            # Let import_statement report the unsupported format
            content = ""
        return self.import_statement(account_id, csv_path.name, content, mapping)

    def import_statement(
        self,
        account_id: int,
        file_name: str,
        content: str,
        mapping: Optional[ColumnMapping] = None,
    ) -> StatementImportResult:
        """Import the text of a statement file into an account.

        Args:
            account_id: Target account
            file_name: Original file name, recorded as the batch source
            content: File text
            mapping: Column indexes for a headerless file. When omitted the
                account's saved mapping (if any) is used.

        Returns:
            A completed result with the import summary, or a mapping-required
            result carrying suggestions when the file has no header row and
            no mapping is available. Nothing is persisted in the latter case.

        Raises:
            NotFoundError: If the account is missing or inactive
            UnsupportedFormatError: If the file is not a .csv file
            ValidationError: If the mapping is invalid, or the file is empty
                or lacks required columns
        """
        self.account_service.require_active_account(account_id)

        file_name = (file_name or "").strip()
        if not file_name.lower().endswith(".csv"):
            raise UnsupportedFormatError(UNSUPPORTED_FORMAT_MESSAGE)

        if mapping is not None:
            self.validate_mapping(mapping)
        effective_mapping = mapping or self.db.get_csv_mapping(self.owner_id, account_id)

        outcome = self.parser.parse_text(content, effective_mapping)
        if isinstance(outcome, HeaderMappingPrompt):
            logger.info("Import of %s into account %s needs a column mapping", file_name, account_id)
            return StatementImportResult.mapping_required(outcome)
        if outcome.fatal:
            raise ValidationError(outcome.fatal_message)

        if mapping is not None and mapping.save_header_mapping:
            self.db.upsert_csv_mapping(self.owner_id, account_id, mapping)
            logger.debug("Saved column mapping for account %s", account_id)

        summary = self.complete_import(account_id, file_name, outcome.rows, list(outcome.issues))
        return StatementImportResult.completed(summary)

    def validate_mapping(self, mapping: ColumnMapping) -> None:
        """Reject negative column indexes.

        Raises:
            ValidationError: If any given index is negative
        """
        indexes = {
            "date": mapping.date_column_index,
            "amount": mapping.amount_column_index,
            "description": mapping.description_column_index,
            "category": mapping.category_column_index,
            "external id": mapping.external_id_column_index,
        }
        for label, index in indexes.items():
            if index is not None and index < 0:
                raise ValidationError(f"The {label} column index must not be negative")

    def complete_import(
        self,
        account_id: int,
        file_name: str,
        rows: tuple[NormalizedRow, ...],
        issues: list[Issue],
    ) -> ImportSummary:
        """Deduplicate and persist parsed rows, then finalize the batch.

        ``issues`` collects every issue of the run and is extended in place.
        """
        batch = self.db.create_import_batch(self.owner_id, account_id, file_name)
        logger.info("Created import batch %s for %s", batch.id, file_name)

        category_cache: dict[str, Category] = {}
        fallback_categories = {
            TransactionType.EXPENSE: self.category_service.get_or_create_category(
                TransactionType.EXPENSE, IMPORTED_EXPENSE_CATEGORY, category_cache
            ),
            TransactionType.INCOME: self.category_service.get_or_create_category(
                TransactionType.INCOME, IMPORTED_INCOME_CATEGORY, category_cache
            ),
        }

        candidates = self.build_candidates(rows, issues)
        seen_external_ids = self.db.find_existing_external_ids(
            self.owner_id, account_id, [c.external_id for c in candidates if c.external_id]
        )
        seen_fingerprints = self.db.find_existing_fingerprints(
            self.owner_id, account_id, [c.fingerprint for c in candidates]
        )

        to_insert: list[NewTransaction] = []
        skipped_duplicates = 0
        for candidate in candidates:
            if (
                candidate.external_id is not None and candidate.external_id in seen_external_ids
            ) or candidate.fingerprint in seen_fingerprints:
                skipped_duplicates += 1
                logger.debug("Skipping duplicate row %s", candidate.row_number)
                continue

            if candidate.external_id is not None:
                seen_external_ids.add(candidate.external_id)
            seen_fingerprints.add(candidate.fingerprint)

            if candidate.source_category:
                category = self.category_service.get_or_create_category(
                    candidate.type, candidate.source_category, category_cache
                )
            else:
                category = fallback_categories[candidate.type]

            to_insert.append(
                NewTransaction(
                    month_key=candidate.month_key,
                    type=candidate.type,
                    date=candidate.date,
                    amount=candidate.amount,
                    description=candidate.description,
                    category_id=category.id,
                    account_id=account_id,
                    external_id=candidate.external_id,
                    dedupe_fingerprint=candidate.fingerprint,
                    import_batch_id=batch.id,
                )
            )

        if to_insert:
            self.db.bulk_create_transactions(self.owner_id, to_insert)

        if issues:
            self.db.bulk_create_import_issues(
                self.owner_id,
                batch.id,
                [
                    Issue(
                        issue.severity,
                        issue.row_number,
                        truncate(issue.message, MAX_ISSUE_MESSAGE_LENGTH),
                    )
                    for issue in issues
                ],
            )

        parse_errors = tuple(i for i in issues if i.severity == IssueSeverity.ERROR)
        warnings = tuple(i for i in issues if i.severity == IssueSeverity.WARNING)
        status = (
            ImportBatchStatus.COMPLETED_WITH_WARNINGS
            if parse_errors or warnings
            else ImportBatchStatus.COMPLETED
        )

        self.db.complete_import_batch(
            self.owner_id,
            batch.id,
            status=status,
            inserted_count=len(to_insert),
            skipped_duplicates=skipped_duplicates,
            parse_error_count=len(parse_errors),
            warning_count=len(warnings),
            completed_at=datetime.now(UTC),
        )
        logger.info(
            "Import batch %s %s: %d inserted, %d duplicates, %d errors, %d warnings",
            batch.id,
            status.value,
            len(to_insert),
            skipped_duplicates,
            len(parse_errors),
            len(warnings),
        )

        return ImportSummary(
            import_batch_id=batch.id,
            inserted=len(to_insert),
            skipped_duplicates=skipped_duplicates,
            parse_errors=parse_errors,
            warnings=warnings,
        )

    def build_candidates(
        self, rows: tuple[NormalizedRow, ...], issues: list[Issue]
    ) -> list[CandidateTransaction]:
        """Turn normalized rows into typed candidates.

        Zero amounts are dropped with a WARNING; the sign of the amount
        decides the type and the stored amount is its magnitude.
        """
        candidates: list[CandidateTransaction] = []
        for row in rows:
            if row.date is None:
                issues.append(Issue(IssueSeverity.ERROR, row.row_number, "Invalid or empty date"))
                continue
            if row.signed_amount is None:
                issues.append(
                    Issue(IssueSeverity.ERROR, row.row_number, "Invalid or empty amount")
                )
                continue

            signed_amount = round_currency(row.signed_amount)
            if signed_amount == 0:
                issues.append(
                    Issue(IssueSeverity.WARNING, row.row_number, "Skipped zero-amount transaction")
                )
                continue

            txn_type = TransactionType.EXPENSE if signed_amount < 0 else TransactionType.INCOME
            amount = abs(signed_amount)
            description = truncate(
                (row.description or "").strip() or DEFAULT_DESCRIPTION, MAX_DESCRIPTION_LENGTH
            )
            candidates.append(
                CandidateTransaction(
                    row_number=row.row_number,
                    date=row.date,
                    type=txn_type,
                    amount=amount,
                    description=description,
                    external_id=row.external_id or None,
                    source_category=row.source_category or None,
                    fingerprint=build_fingerprint(row.date, txn_type.value, amount, description),
                )
            )
        return candidates

    def list_batches(self, account_id: Optional[int] = None) -> list[ImportBatch]:
        """List import batches newest first, optionally for one account."""
        return self.db.list_import_batches(self.owner_id, account_id)

    def get_batch(self, batch_id: int) -> ImportBatch:
        """Get an import batch.

        Raises:
            NotFoundError: If the batch does not exist for the owner
        """
        batch = self.db.get_import_batch(self.owner_id, batch_id)
        if batch is None:
            raise NotFoundError(import_batch_not_found(batch_id))
        return batch

    def get_batch_issues(self, batch_id: int) -> list[ImportIssue]:
        """List the issues recorded for an import batch.

        Raises:
            NotFoundError: If the batch does not exist for the owner
        """
        self.get_batch(batch_id)
        return self.db.list_import_issues(self.owner_id, batch_id)
