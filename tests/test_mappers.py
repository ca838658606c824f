"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from budgetbook.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    ImportBatch as ORMImportBatch,
    ImportIssue as ORMImportIssue,
)
from budgetbook.database.mappers import (
    account_to_domain,
    category_to_domain,
    transaction_to_domain,
    new_transaction_to_orm,
    import_batch_to_domain,
    import_issue_to_domain,
)
from budgetbook.domain.entities import (
    Account,
    ImportBatchStatus,
    IssueSeverity,
    NewTransaction,
    TransactionType,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id=1,
            owner_id="owner-1",
            name="Checking",
            institution_name=None,
            last4="1234",
            active=True,
            created_at=datetime.now(UTC),
        )

        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.id == 1
        assert account.last4 == "1234"
        assert account.institution_name is None


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_type_becomes_enum(self):
        """Stored type strings become TransactionType members."""
        orm_category = ORMCategory(
            id=3,
            owner_id="owner-1",
            name="Salary",
            type="INCOME",
            sort_order=2,
            active=False,
            created_at=datetime.now(UTC),
        )

        category = category_to_domain(orm_category)

        assert category.type is TransactionType.INCOME
        assert not category.active


class TestTransactionMapper:
    """Tests for Transaction mappers."""

    def test_transaction_to_domain_quantizes_amount(self):
        """Amounts are returned as two-place Decimals."""
        orm_txn = ORMTransaction(
            id=5,
            owner_id="owner-1",
            month_key="2024-03",
            type="EXPENSE",
            date=date(2024, 3, 1),
            amount=Decimal("12.5"),
            description="Lunch",
            category_id=1,
            account_id=1,
            external_id=None,
            dedupe_fingerprint="deadbeef",
            import_batch_id=None,
            created_at=datetime.now(UTC),
        )

        txn = transaction_to_domain(orm_txn)

        assert txn.amount == Decimal("12.50")
        assert str(txn.amount) == "12.50"
        assert txn.type is TransactionType.EXPENSE

    def test_new_transaction_to_orm(self):
        """Queued transactions store the enum value."""
        new_txn = NewTransaction(
            month_key="2024-03",
            type=TransactionType.INCOME,
            date=date(2024, 3, 2),
            amount=Decimal("100.00"),
            description="Refund",
            category_id=2,
            account_id=1,
            external_id="X9",
            import_batch_id=7,
        )

        orm_txn = new_transaction_to_orm("owner-1", new_txn)

        assert orm_txn.owner_id == "owner-1"
        assert orm_txn.type == "INCOME"
        assert orm_txn.external_id == "X9"
        assert orm_txn.import_batch_id == 7


class TestImportMappers:
    """Tests for import ledger mappers."""

    def test_import_batch_and_issue(self):
        """Statuses and severities become enums."""
        orm_batch = ORMImportBatch(
            id=1,
            owner_id="owner-1",
            account_id=1,
            source_name="march.csv",
            status="COMPLETED",
            inserted_count=2,
            skipped_duplicates=0,
            parse_error_count=0,
            warning_count=0,
            created_at=datetime.now(UTC),
            completed_at=None,
        )
        orm_issue = ORMImportIssue(
            id=1, owner_id="owner-1", import_batch_id=1, severity="WARNING", row_number=None, message="m"
        )

        assert import_batch_to_domain(orm_batch).status is ImportBatchStatus.COMPLETED
        issue = import_issue_to_domain(orm_issue)
        assert issue.severity is IssueSeverity.WARNING
        assert issue.row_number is None
