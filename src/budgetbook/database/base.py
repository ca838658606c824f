"""Abstract database interface.

Every operation is scoped to one owner; rows belonging to other owners are
never returned or modified.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from datetime import datetime
from decimal import Decimal

# Import entities directly; budgetbook.domain resolves its services lazily
from budgetbook.domain.entities import (
    Account,
    Category,
    ColumnMapping,
    ImportBatch,
    ImportBatchStatus,
    ImportIssue,
    Issue,
    MonthSettings,
    NewTransaction,
    Plan,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for budgetbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        owner_id: str,
        name: str,
        institution_name: Optional[str] = None,
        last4: Optional[str] = None,
    ) -> Account:
        """Create a new active account."""
        pass

    @abstractmethod
    def get_account(self, owner_id: str, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: str, include_inactive: bool = False) -> list[Account]:
        """List accounts ordered by name."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        owner_id: str,
        name: str,
        category_type: TransactionType,
        sort_order: int = 0,
        active: bool = True,
    ) -> Category:
        """Create a category."""
        pass

    @abstractmethod
    def get_category(self, owner_id: str, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(
        self, owner_id: str, category_type: Optional[TransactionType] = None
    ) -> list[Category]:
        """List categories ordered by sort order, then name."""
        pass

    @abstractmethod
    def find_category_by_name(
        self, owner_id: str, category_type: TransactionType, name: str
    ) -> Optional[Category]:
        """Find a category of a type by name, ignoring case and outer whitespace."""
        pass

    @abstractmethod
    def get_max_category_sort_order(
        self, owner_id: str, category_type: TransactionType
    ) -> Optional[int]:
        """Highest sort order among the owner's categories of a type."""
        pass

    @abstractmethod
    def update_category(
        self,
        owner_id: str,
        category_id: int,
        name: Optional[str] = None,
        sort_order: Optional[int] = None,
        active: Optional[bool] = None,
    ) -> Category:
        """Update category fields that are not None."""
        pass

    @abstractmethod
    def delete_category(self, owner_id: str, category_id: int) -> None:
        """Delete a category."""
        pass

    @abstractmethod
    def count_category_references(self, owner_id: str, category_id: int) -> tuple[int, int]:
        """Count (plans, transactions) referencing a category."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, owner_id: str, transaction: NewTransaction) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def bulk_create_transactions(
        self, owner_id: str, transactions: list[NewTransaction]
    ) -> int:
        """Insert many transactions in one write. Returns the number inserted."""
        pass

    @abstractmethod
    def get_transaction(self, owner_id: str, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner_id: str,
        month_key: Optional[str] = None,
        transaction_type: Optional[TransactionType] = None,
        account_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions newest first, with optional filters."""
        pass

    @abstractmethod
    def delete_transaction(self, owner_id: str, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def find_existing_external_ids(
        self, owner_id: str, account_id: int, external_ids: Iterable[str]
    ) -> set[str]:
        """Return which of the given external IDs are already stored for the account."""
        pass

    @abstractmethod
    def find_existing_fingerprints(
        self, owner_id: str, account_id: int, fingerprints: Iterable[str]
    ) -> set[str]:
        """Return which of the given fingerprints are already stored for the account."""
        pass

    # Plan operations
    @abstractmethod
    def list_plans(self, owner_id: str, month_key: str) -> list[Plan]:
        """List plan rows for a month."""
        pass

    @abstractmethod
    def upsert_plans(
        self, owner_id: str, month_key: str, amounts: dict[int, Decimal]
    ) -> None:
        """Insert or replace planned amounts keyed by category ID."""
        pass

    # Month settings operations
    @abstractmethod
    def get_month_settings(self, owner_id: str, month_key: str) -> Optional[MonthSettings]:
        """Get settings for a month, or None if never saved."""
        pass

    @abstractmethod
    def upsert_month_settings(
        self, owner_id: str, month_key: str, starting_balance: Decimal
    ) -> MonthSettings:
        """Insert or replace settings for a month."""
        pass

    # Header mapping operations
    @abstractmethod
    def get_csv_mapping(self, owner_id: str, account_id: int) -> Optional[ColumnMapping]:
        """Get the saved header mapping for an account."""
        pass

    @abstractmethod
    def upsert_csv_mapping(self, owner_id: str, account_id: int, mapping: ColumnMapping) -> None:
        """Insert or replace the saved header mapping for an account."""
        pass

    # Import ledger operations
    @abstractmethod
    def create_import_batch(self, owner_id: str, account_id: int, source_name: str) -> ImportBatch:
        """Create a batch in PROCESSING status with zero counts."""
        pass

    @abstractmethod
    def complete_import_batch(
        self,
        owner_id: str,
        batch_id: int,
        status: ImportBatchStatus,
        inserted_count: int,
        skipped_duplicates: int,
        parse_error_count: int,
        warning_count: int,
        completed_at: datetime,
    ) -> None:
        """Record the final status and counts of a batch."""
        pass

    @abstractmethod
    def get_import_batch(self, owner_id: str, batch_id: int) -> Optional[ImportBatch]:
        """Get import batch by ID."""
        pass

    @abstractmethod
    def list_import_batches(
        self, owner_id: str, account_id: Optional[int] = None
    ) -> list[ImportBatch]:
        """List import batches newest first."""
        pass

    @abstractmethod
    def bulk_create_import_issues(self, owner_id: str, batch_id: int, issues: list[Issue]) -> None:
        """Insert issues for a batch in one write."""
        pass

    @abstractmethod
    def list_import_issues(self, owner_id: str, batch_id: int) -> list[ImportIssue]:
        """List issues of a batch in insertion order."""
        pass
