"""Transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from budgetbook.database.base import Database
from budgetbook.domain.account import AccountService
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import (
    NewTransaction,
    Transaction as TransactionEntity,
    TransactionType,
)
from budgetbook.domain.errors import (
    NotFoundError,
    ValidationError,
    category_type_mismatch,
    transaction_not_found,
)
from budgetbook.domain.validation import validate_date_in_month, validate_month
from budgetbook.utils.amount_parser import round_currency

MAX_DESCRIPTION_LENGTH = 300


class TransactionService:
    """Service for manually entered transactions."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize transaction service.

        Args:
            db: Database instance
            owner_id: Owner all operations are scoped to
        """
        self.db = db
        self.owner_id = owner_id
        self.account_service = AccountService(db, owner_id)
        self.category_service = CategoryService(db, owner_id)

    def create_transaction(
        self,
        month: str,
        transaction_type: TransactionType,
        txn_date: date,
        amount: Decimal,
        description: str,
        category_id: int,
        account_id: Optional[int] = None,
    ) -> TransactionEntity:
        """Create a transaction.

        Args:
            month: Month key the transaction belongs to
            transaction_type: EXPENSE or INCOME
            txn_date: Transaction date, within ``month``
            amount: Amount; stored as a positive magnitude rounded to cents
            description: Free text description
            category_id: Category of the same type as the transaction
            account_id: Account ID, or None for the default account

        Returns:
            Created transaction

        Raises:
            ValidationError: If month, date, amount, description or category type is invalid
            NotFoundError: If the account or category does not exist
        """
        validate_month(month)
        validate_date_in_month(txn_date, month)

        description = (description or "").strip()
        if not description:
            raise ValidationError("Description is required")
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
            )

        magnitude = round_currency(abs(amount))
        if magnitude == 0:
            raise ValidationError("Amount must not be zero")

        if account_id is None:
            account = self.account_service.ensure_default_account()
        else:
            account = self.account_service.require_active_account(account_id)

        category = self.category_service.require_category(category_id)
        if category.type != transaction_type:
            raise ValidationError(category_type_mismatch())

        transaction_id = self.db.create_transaction(
            self.owner_id,
            NewTransaction(
                month_key=month,
                type=transaction_type,
                date=txn_date,
                amount=magnitude,
                description=description,
                category_id=category.id,
                account_id=account.id,
            ),
        )
        return self.db.get_transaction(self.owner_id, transaction_id)

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID, or None if not found."""
        return self.db.get_transaction(self.owner_id, transaction_id)

    def list_transactions(
        self,
        month: str,
        transaction_type: Optional[TransactionType] = None,
        account_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List a month's transactions, newest first.

        Raises:
            ValidationError: If the month is invalid
        """
        validate_month(month)
        return self.db.list_transactions(
            self.owner_id,
            month_key=month,
            transaction_type=transaction_type,
            account_id=account_id,
        )

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        if self.db.get_transaction(self.owner_id, transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.delete_transaction(self.owner_id, transaction_id)
