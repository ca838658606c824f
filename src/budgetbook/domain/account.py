"""Account domain service."""

from typing import Optional
from budgetbook.database.base import Database
from budgetbook.domain.entities import Account as AccountEntity
from budgetbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account,
)

DEFAULT_ACCOUNT_NAME = "Primary"


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize account service.

        Args:
            db: Database instance
            owner_id: Owner all operations are scoped to
        """
        self.db = db
        self.owner_id = owner_id

    def create_account(
        self,
        name: str,
        institution_name: Optional[str] = None,
        last4: Optional[str] = None,
    ) -> AccountEntity:
        """Create a new account.

        Args:
            name: Account name
            institution_name: Optional bank name
            last4: Optional last four digits of the account number

        Returns:
            Created account

        Raises:
            ValidationError: If name is blank or last4 is malformed
            ConflictError: If an account with the same name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        if last4 is not None:
            last4 = last4.strip() or None
            if last4 is not None and (len(last4) != 4 or not last4.isdigit()):
                raise ValidationError("last4 must be exactly four digits")

        # Names are unique per owner, ignoring case
        for acc in self.db.list_accounts(self.owner_id, include_inactive=True):
            if acc.name.strip().lower() == name.lower():
                raise ConflictError(duplicate_account(name))

        institution_name = (institution_name or "").strip() or None
        return self.db.create_account(
            self.owner_id, name=name, institution_name=institution_name, last4=last4
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(self.owner_id, account_id)

    def list_accounts(self, include_inactive: bool = False) -> list[AccountEntity]:
        """List accounts ordered by name."""
        return self.db.list_accounts(self.owner_id, include_inactive=include_inactive)

    def require_active_account(self, account_id: int) -> AccountEntity:
        """Get an account that exists, belongs to the owner and is active.

        Raises:
            NotFoundError: Otherwise
        """
        account = self.db.get_account(self.owner_id, account_id)
        if account is None or not account.active:
            raise NotFoundError(account_not_found(account_id))
        return account

    def ensure_default_account(self) -> AccountEntity:
        """Return the default account, creating it on first use."""
        for acc in self.db.list_accounts(self.owner_id):
            if acc.name == DEFAULT_ACCOUNT_NAME:
                return acc
        return self.db.create_account(self.owner_id, name=DEFAULT_ACCOUNT_NAME)
