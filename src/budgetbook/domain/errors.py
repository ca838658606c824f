"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class UnsupportedFormatError(ValidationError):
    """Uploaded file is not in a supported format."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist for the owner."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def account_not_found(account_id: int) -> str:
    """Return message for missing or inactive account."""
    return f"Account not found: {account_id}"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category not found: {category_id}"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction by ID."""
    return f"Transaction not found: {transaction_id}"


def import_batch_not_found(batch_id: int) -> str:
    """Return message for missing import batch by ID."""
    return f"Import batch not found: {batch_id}"


def invalid_month(month: str) -> str:
    """Return message for a malformed month key."""
    return f"Invalid month: {month}"


def duplicate_category(name: str) -> str:
    """Return message for a category name clash within one type."""
    return f"Category already exists for type: {name}"


def duplicate_account(name: str) -> str:
    """Return message for an account name clash."""
    return f"Account already exists: {name}"


def category_delete_blocked(category_id: int, plan_count: int, transaction_count: int) -> str:
    """Return message when a category is still referenced."""
    parts = []
    if plan_count > 0:
        parts.append(f"{plan_count} plan{'s' if plan_count != 1 else ''}")
    if transaction_count > 0:
        parts.append(
            f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}"
        )
    return (
        f"Cannot delete category {category_id}: it is referenced by {', '.join(parts)}."
    )


def category_type_mismatch() -> str:
    """Return message when a transaction's category has the other type."""
    return "Category type does not match transaction type"


def category_wrong_type(category_id: int, category_type: str) -> str:
    """Return message when a plan item names a category of another type."""
    return f"Category {category_id} does not belong to {category_type}"


def date_outside_month(month: str) -> str:
    """Return message when a transaction date is not within its month."""
    return f"Transaction date must belong to month {month}"
