"""Domain model entities for budgetbook.

These are pure data classes representing business concepts, independent of
database schema. Persisted entities mirror the stored rows; the statement
types further down only live for the duration of one import call.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class TransactionType(str, Enum):
    """Direction of money flow. Also used as the category type."""

    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class IssueSeverity(str, Enum):
    """Severity of an import issue."""

    ERROR = "ERROR"
    WARNING = "WARNING"


class ImportBatchStatus(str, Enum):
    """Lifecycle status of an import batch."""

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    COMPLETED_WITH_WARNINGS = "COMPLETED_WITH_WARNINGS"


class StatementImportStatus(str, Enum):
    """Outcome of an import call."""

    COMPLETED = "COMPLETED"
    HEADER_MAPPING_REQUIRED = "HEADER_MAPPING_REQUIRED"


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    owner_id: str
    name: str
    institution_name: Optional[str]
    last4: Optional[str]
    active: bool
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Budget category, scoped to one owner and one type."""

    id: int
    owner_id: str
    name: str
    type: TransactionType
    sort_order: int
    active: bool
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always a positive magnitude; ``type`` carries the sign.
    """

    id: int
    owner_id: str
    month_key: str
    type: TransactionType
    date: date
    amount: Decimal
    description: str
    category_id: int
    account_id: int
    external_id: Optional[str]
    dedupe_fingerprint: Optional[str]
    import_batch_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class NewTransaction:
    """Transaction values queued for insertion."""

    month_key: str
    type: TransactionType
    date: date
    amount: Decimal
    description: str
    category_id: int
    account_id: int
    external_id: Optional[str] = None
    dedupe_fingerprint: Optional[str] = None
    import_batch_id: Optional[int] = None


@dataclass(frozen=True)
class Plan:
    """Planned amount for one category in one month."""

    id: int
    owner_id: str
    month_key: str
    category_id: int
    planned_amount: Decimal


@dataclass(frozen=True)
class MonthSettings:
    """Per-month settings."""

    month_key: str
    starting_balance: Decimal


@dataclass(frozen=True)
class ImportBatch:
    """Audit record of one upload attempt."""

    id: int
    owner_id: str
    account_id: int
    source_name: str
    status: ImportBatchStatus
    inserted_count: int
    skipped_duplicates: int
    parse_error_count: int
    warning_count: int
    created_at: datetime
    completed_at: Optional[datetime]


@dataclass(frozen=True)
class Issue:
    """A per-row (or whole-file, when ``row_number`` is None) import issue."""

    severity: IssueSeverity
    row_number: Optional[int]
    message: str


@dataclass(frozen=True)
class ImportIssue:
    """An issue as persisted against an import batch."""

    id: int
    import_batch_id: int
    severity: IssueSeverity
    row_number: Optional[int]
    message: str


@dataclass(frozen=True)
class ColumnMapping:
    """Caller-supplied column indexes for a headerless CSV file."""

    date_column_index: int
    amount_column_index: int
    description_column_index: int
    category_column_index: Optional[int] = None
    external_id_column_index: Optional[int] = None
    save_header_mapping: bool = False


@dataclass(frozen=True)
class NormalizedRow:
    """One parsed statement row, before reconciliation."""

    row_number: Optional[int]
    date: Optional[date]
    signed_amount: Optional[Decimal]
    description: Optional[str]
    external_id: Optional[str] = None
    source_category: Optional[str] = None


@dataclass(frozen=True)
class CandidateTransaction:
    """A normalized row that passed validation and is ready for dedup."""

    row_number: Optional[int]
    date: date
    type: TransactionType
    amount: Decimal
    description: str
    external_id: Optional[str]
    source_category: Optional[str]
    fingerprint: str

    @property
    def month_key(self) -> str:
        return self.date.strftime("%Y-%m")


@dataclass(frozen=True)
class ParsedStatement:
    """Rows and issues produced by the statement parser.

    ``fatal`` is set when the whole file must be rejected (empty file,
    missing required columns); the offending issue is the last one.
    """

    rows: tuple[NormalizedRow, ...]
    issues: tuple[Issue, ...]
    fatal: bool = False

    @property
    def fatal_message(self) -> Optional[str]:
        if not self.fatal or not self.issues:
            return None
        return self.issues[-1].message


@dataclass(frozen=True)
class HeaderMappingPrompt:
    """Returned instead of rows when a headerless file has no mapping."""

    message: str
    column_count: int
    sample_row: tuple[Optional[str], ...]
    suggested_date_column_index: Optional[int] = None
    suggested_amount_column_index: Optional[int] = None
    suggested_description_column_index: Optional[int] = None
    suggested_category_column_index: Optional[int] = None
    suggested_external_id_column_index: Optional[int] = None


ParseOutcome = Union[ParsedStatement, HeaderMappingPrompt]


@dataclass(frozen=True)
class ImportSummary:
    """What happened during a completed import."""

    import_batch_id: int
    inserted: int
    skipped_duplicates: int
    parse_errors: tuple[Issue, ...] = ()
    warnings: tuple[Issue, ...] = ()


@dataclass(frozen=True)
class StatementImportResult:
    """Either a completed import summary or a header mapping prompt."""

    status: StatementImportStatus
    summary: Optional[ImportSummary] = None
    header_mapping_prompt: Optional[HeaderMappingPrompt] = None

    @classmethod
    def completed(cls, summary: ImportSummary) -> "StatementImportResult":
        return cls(status=StatementImportStatus.COMPLETED, summary=summary)

    @classmethod
    def mapping_required(cls, prompt: HeaderMappingPrompt) -> "StatementImportResult":
        return cls(
            status=StatementImportStatus.HEADER_MAPPING_REQUIRED,
            header_mapping_prompt=prompt,
        )


@dataclass(frozen=True)
class PlanItem:
    """A category with its planned amount for a month."""

    category_id: int
    category_name: str
    category_type: TransactionType
    sort_order: int
    planned_amount: Decimal


@dataclass(frozen=True)
class SummaryCategoryRow:
    """Planned vs. actual for one category."""

    category_id: int
    category_name: str
    planned: Decimal
    actual: Decimal
    diff: Decimal


@dataclass(frozen=True)
class SummaryTotals:
    """Column-wise totals of summary rows."""

    planned: Decimal = Decimal("0.00")
    actual: Decimal = Decimal("0.00")
    diff: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class MonthSummary:
    """Planned vs. actual roll-up for one month."""

    month: str
    starting_balance: Decimal
    net_change: Decimal
    ending_balance: Decimal
    savings_label: str
    expense_totals: SummaryTotals
    income_totals: SummaryTotals
    expense_categories: tuple[SummaryCategoryRow, ...] = field(default_factory=tuple)
    income_categories: tuple[SummaryCategoryRow, ...] = field(default_factory=tuple)
