"""CSV bank statement parser.

Turns the text of an arbitrary bank CSV export into normalized rows. The
first record decides the layout: a recognizable header row is mapped by
keyword, otherwise the caller must supply column indexes and gets a
``HeaderMappingPrompt`` with suggestions when it has not.
"""

import csv
import io
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from budgetbook.domain.entities import (
    ColumnMapping,
    HeaderMappingPrompt,
    Issue,
    IssueSeverity,
    NormalizedRow,
    ParseOutcome,
    ParsedStatement,
)
from budgetbook.utils.amount_parser import try_parse_amount, round_currency
from budgetbook.utils.date_parser import parse_statement_date
from budgetbook.logging_setup import get_logger

logger = get_logger(__name__)

DATE_HEADERS = ("date", "txn date", "transaction date", "posted date", "post date")
AMOUNT_HEADERS = ("amount", "transaction amount", "amt")
DEBIT_HEADERS = ("debit", "withdrawal", "outflow", "money out")
CREDIT_HEADERS = ("credit", "deposit", "inflow", "money in")
MEMO_HEADERS = ("memo",)
DESCRIPTION_HEADERS = ("description", "payee", "name", "details")
CATEGORY_HEADERS = ("category", "category name", "classification")
EXTERNAL_ID_HEADERS = ("fitid", "id", "transaction id", "reference", "reference id")
ALL_KNOWN_HEADERS = frozenset(
    DATE_HEADERS
    + AMOUNT_HEADERS
    + DEBIT_HEADERS
    + CREDIT_HEADERS
    + MEMO_HEADERS
    + DESCRIPTION_HEADERS
    + CATEGORY_HEADERS
    + EXTERNAL_ID_HEADERS
)

DEFAULT_DESCRIPTION = "Imported transaction"
MAPPING_REQUIRED_MESSAGE = (
    "CSV file has no recognizable header row. Provide column indexes to continue import."
)
CANDIDATE_DELIMITERS = ",;\t|"
MAX_DESCRIPTION_LENGTH = 300
MAX_EXTERNAL_ID_LENGTH = 200
MAX_SOURCE_CATEGORY_LENGTH = 120


@dataclass(frozen=True)
class ColumnIndexes:
    """Resolved column positions for one statement layout."""

    date: Optional[int] = None
    amount: Optional[int] = None
    debit: Optional[int] = None
    credit: Optional[int] = None
    memo: Optional[int] = None
    description: Optional[int] = None
    category: Optional[int] = None
    external_id: Optional[int] = None

    @classmethod
    def from_mapping(cls, mapping: ColumnMapping) -> "ColumnIndexes":
        return cls(
            date=mapping.date_column_index,
            amount=mapping.amount_column_index,
            description=mapping.description_column_index,
            category=mapping.category_column_index,
            external_id=mapping.external_id_column_index,
        )


def normalize_cell(value: Optional[str]) -> Optional[str]:
    """Trim a cell, returning None when nothing is left."""
    if not value:
        return None
    trimmed = value.strip()
    return trimmed or None


def normalize_header(value: Optional[str]) -> str:
    """Lowercase a header cell, turn underscores into spaces, collapse whitespace."""
    if not value:
        return ""
    return " ".join(value.lower().replace("_", " ").split())


def truncate(value: Optional[str], max_length: int) -> Optional[str]:
    """Cut a string down to ``max_length`` characters."""
    if value is None:
        return None
    return value[:max_length]


def get_cell(record: Sequence[str], column_index: Optional[int]) -> Optional[str]:
    """Return the cell at ``column_index`` or None when out of range."""
    if column_index is None or column_index < 0 or column_index >= len(record):
        return None
    return record[column_index]


class CSVStatementParser:
    """Parser for loosely structured bank statement CSV files."""

    def parse_text(self, text: str, mapping: Optional[ColumnMapping] = None) -> ParseOutcome:
        """Parse statement text into normalized rows.

        Args:
            text: Raw file content
            mapping: Column indexes to use when the file has no header row

        Returns:
            ``ParsedStatement`` with rows and issues, or ``HeaderMappingPrompt``
            when the file has no header and no mapping was given
        """
        records, issues = self.read_records(text)

        if not records:
            issues.append(Issue(IssueSeverity.ERROR, None, "CSV is empty"))
            return ParsedStatement(rows=(), issues=tuple(issues), fatal=True)

        first_record = records[0]
        if self.looks_like_header(first_record):
            logger.debug("Header row detected: %s", first_record)
            return self.parse_with_header(records, issues)

        if mapping is None:
            logger.debug("No header row and no mapping; requesting column mapping")
            return self.build_header_mapping_prompt(first_record)

        logger.debug("No header row; using column mapping %s", mapping)
        return self.parse_without_header(records, mapping, issues)

    def read_records(self, text: str) -> tuple[list[list[str]], list[Issue]]:
        """Split text into records, skipping blank lines.

        Returns:
            Tuple of (records, structural warnings)
        """
        text = text.lstrip("\ufeff")
        issues: list[Issue] = []
        records: list[list[str]] = []

        reader = csv.reader(io.StringIO(text, newline=""), delimiter=self.detect_delimiter(text))
        try:
            for record in reader:
                cells = [value or "" for value in record]
                if not any(cell.strip() for cell in cells):
                    continue
                records.append(cells)
        except csv.Error as e:
            issues.append(
                Issue(IssueSeverity.WARNING, reader.line_num or None, f"Malformed CSV: {e}")
            )

        if records:
            expected = len(records[0])
            for row_number, record in enumerate(records[1:], start=2):
                if len(record) != expected:
                    issues.append(
                        Issue(
                            IssueSeverity.WARNING,
                            row_number,
                            f"Expected {expected} fields but parsed {len(record)}",
                        )
                    )

        return records, issues

    def detect_delimiter(self, text: str) -> str:
        """Guess the field delimiter from the first lines, defaulting to comma."""
        sample = "\n".join(text.splitlines()[:20])
        if not sample:
            return ","
        try:
            return csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS).delimiter
        except csv.Error:
            return ","

    def looks_like_header(self, first_record: Sequence[str]) -> bool:
        """Decide whether the first record is a header row.

        A record starting with a date followed by an amount is data, even if
        its cells happen to match header keywords. Otherwise at least two
        cells must be known header keywords.
        """
        if not first_record:
            return False

        first_cell = normalize_cell(first_record[0])
        second_cell = normalize_cell(first_record[1]) if len(first_record) > 1 else None
        if parse_statement_date(first_cell) and try_parse_amount(second_cell) is not None:
            return False

        known_header_count = sum(
            1 for value in first_record if normalize_header(value) in ALL_KNOWN_HEADERS
        )
        return known_header_count >= 2

    def resolve_header_columns(self, header: Sequence[str]) -> ColumnIndexes:
        """Map semantic columns to header positions.

        Synonyms are tried in order; a repeated header keeps its first position.
        """
        indexed: dict[str, int] = {}
        for index, value in enumerate(header):
            normalized = normalize_header(value)
            if normalized and normalized not in indexed:
                indexed[normalized] = index

        def find(candidates: Sequence[str]) -> Optional[int]:
            for candidate in candidates:
                if candidate in indexed:
                    return indexed[candidate]
            return None

        return ColumnIndexes(
            date=find(DATE_HEADERS),
            amount=find(AMOUNT_HEADERS),
            debit=find(DEBIT_HEADERS),
            credit=find(CREDIT_HEADERS),
            memo=find(MEMO_HEADERS),
            description=find(DESCRIPTION_HEADERS),
            category=find(CATEGORY_HEADERS),
            external_id=find(EXTERNAL_ID_HEADERS),
        )

    def parse_with_header(self, records: list[list[str]], issues: list[Issue]) -> ParsedStatement:
        indexes = self.resolve_header_columns(records[0])

        if indexes.date is None:
            issues.append(Issue(IssueSeverity.ERROR, None, "CSV is missing a date column"))
            return ParsedStatement(rows=(), issues=tuple(issues), fatal=True)

        if indexes.amount is None and indexes.debit is None and indexes.credit is None:
            issues.append(
                Issue(IssueSeverity.ERROR, None, "CSV is missing amount or debit/credit columns")
            )
            return ParsedStatement(rows=(), issues=tuple(issues), fatal=True)

        rows: list[NormalizedRow] = []
        for row_number, record in enumerate(records[1:], start=2):
            row = self.parse_record(record, row_number, indexes, issues)
            if row is not None:
                rows.append(row)
        return ParsedStatement(rows=tuple(rows), issues=tuple(issues))

    def parse_without_header(
        self, records: list[list[str]], mapping: ColumnMapping, issues: list[Issue]
    ) -> ParsedStatement:
        indexes = ColumnIndexes.from_mapping(mapping)
        rows: list[NormalizedRow] = []
        for row_number, record in enumerate(records, start=1):
            row = self.parse_record(record, row_number, indexes, issues)
            if row is not None:
                rows.append(row)
        return ParsedStatement(rows=tuple(rows), issues=tuple(issues))

    def parse_record(
        self,
        record: Sequence[str],
        row_number: int,
        indexes: ColumnIndexes,
        issues: list[Issue],
    ) -> Optional[NormalizedRow]:
        """Normalize one data record.

        Rows with an unusable date or amount are dropped with an ERROR issue.
        A missing description is defaulted with a WARNING.
        """
        txn_date = parse_statement_date(get_cell(record, indexes.date))
        if txn_date is None:
            issues.append(Issue(IssueSeverity.ERROR, row_number, "Invalid or empty date"))
            return None

        signed_amount = self.resolve_amount(
            get_cell(record, indexes.amount),
            get_cell(record, indexes.debit),
            get_cell(record, indexes.credit),
        )
        if signed_amount is None:
            issues.append(Issue(IssueSeverity.ERROR, row_number, "Invalid or empty amount"))
            return None

        description = normalize_cell(get_cell(record, indexes.memo)) or normalize_cell(
            get_cell(record, indexes.description)
        )
        if not description:
            description = DEFAULT_DESCRIPTION
            issues.append(
                Issue(
                    IssueSeverity.WARNING,
                    row_number,
                    f"Missing description. Defaulted to {DEFAULT_DESCRIPTION}",
                )
            )

        return NormalizedRow(
            row_number=row_number,
            date=txn_date,
            signed_amount=signed_amount,
            description=truncate(description, MAX_DESCRIPTION_LENGTH),
            external_id=truncate(
                normalize_cell(get_cell(record, indexes.external_id)), MAX_EXTERNAL_ID_LENGTH
            ),
            source_category=truncate(
                normalize_cell(get_cell(record, indexes.category)), MAX_SOURCE_CATEGORY_LENGTH
            ),
        )

    def resolve_amount(
        self,
        amount_raw: Optional[str],
        debit_raw: Optional[str],
        credit_raw: Optional[str],
    ) -> Optional[Decimal]:
        """Resolve the signed amount of a row.

        A parseable unified amount wins; otherwise ``credit - debit`` using
        absolute values, with a missing side counted as zero.
        """
        amount = try_parse_amount(amount_raw)
        if amount is not None:
            return amount

        debit = try_parse_amount(debit_raw)
        credit = try_parse_amount(credit_raw)
        if debit is None and credit is None:
            return None

        normalized_debit = abs(debit) if debit is not None else Decimal("0")
        normalized_credit = abs(credit) if credit is not None else Decimal("0")
        return round_currency(normalized_credit - normalized_debit)

    def build_header_mapping_prompt(self, first_record: Sequence[str]) -> HeaderMappingPrompt:
        """Build the prompt returned when column indexes are needed."""
        inferred = self.infer_column_mapping(first_record)
        return HeaderMappingPrompt(
            message=MAPPING_REQUIRED_MESSAGE,
            column_count=len(first_record),
            sample_row=tuple(normalize_cell(value) for value in first_record),
            suggested_date_column_index=inferred.date_column_index if inferred else None,
            suggested_amount_column_index=inferred.amount_column_index if inferred else None,
            suggested_description_column_index=(
                inferred.description_column_index if inferred else None
            ),
            suggested_category_column_index=None,
            suggested_external_id_column_index=None,
        )

    def infer_column_mapping(self, record: Sequence[str]) -> Optional[ColumnMapping]:
        """Guess date, amount and description columns from one data record.

        The date is the first date-like cell, the amount the first other
        amount-like cell, and the description the longest remaining cell
        containing a letter. Returns None unless all three are found.
        """
        date_index: Optional[int] = None
        for index, value in enumerate(record):
            if parse_statement_date(value) is not None:
                date_index = index
                break

        amount_index: Optional[int] = None
        for index, value in enumerate(record):
            if index == date_index:
                continue
            if try_parse_amount(value) is not None:
                amount_index = index
                break

        description_index: Optional[int] = None
        longest = -1
        for index, value in enumerate(record):
            if index in (date_index, amount_index):
                continue
            cell = normalize_cell(value)
            if not cell or not any(char.isalpha() for char in cell):
                continue
            if len(cell) > longest:
                longest = len(cell)
                description_index = index

        if date_index is None or amount_index is None or description_index is None:
            return None

        return ColumnMapping(
            date_column_index=date_index,
            amount_column_index=amount_index,
            description_column_index=description_index,
        )
