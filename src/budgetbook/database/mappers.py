"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the stored representation
(strings for enums, nullable columns) never leaks into the domain.
"""

from decimal import Decimal

from budgetbook.domain import entities as domain
from budgetbook.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Plan as ORMPlan,
    MonthSetting as ORMMonthSetting,
    CSVMapping as ORMCSVMapping,
    ImportBatch as ORMImportBatch,
    ImportIssue as ORMImportIssue,
)


def _decimal(value) -> Decimal:
    return Decimal(value if value is not None else 0).quantize(Decimal("0.01"))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        name=orm_account.name,
        institution_name=orm_account.institution_name,
        last4=orm_account.last4,
        active=bool(orm_account.active),
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        owner_id=orm_category.owner_id,
        name=orm_category.name,
        type=domain.TransactionType(orm_category.type),
        sort_order=orm_category.sort_order,
        active=bool(orm_category.active),
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        month_key=orm_transaction.month_key,
        type=domain.TransactionType(orm_transaction.type),
        date=orm_transaction.date,
        amount=_decimal(orm_transaction.amount),
        description=orm_transaction.description,
        category_id=orm_transaction.category_id,
        account_id=orm_transaction.account_id,
        external_id=orm_transaction.external_id,
        dedupe_fingerprint=orm_transaction.dedupe_fingerprint,
        import_batch_id=orm_transaction.import_batch_id,
        created_at=orm_transaction.created_at,
    )


def new_transaction_to_orm(owner_id: str, txn: domain.NewTransaction) -> ORMTransaction:
    """Build a SQLAlchemy Transaction from queued domain values."""
    return ORMTransaction(
        owner_id=owner_id,
        month_key=txn.month_key,
        type=txn.type.value,
        date=txn.date,
        amount=txn.amount,
        description=txn.description,
        category_id=txn.category_id,
        account_id=txn.account_id,
        external_id=txn.external_id,
        dedupe_fingerprint=txn.dedupe_fingerprint,
        import_batch_id=txn.import_batch_id,
    )


def plan_to_domain(orm_plan: ORMPlan) -> domain.Plan:
    """Convert SQLAlchemy Plan model to domain Plan entity."""
    return domain.Plan(
        id=orm_plan.id,
        owner_id=orm_plan.owner_id,
        month_key=orm_plan.month_key,
        category_id=orm_plan.category_id,
        planned_amount=_decimal(orm_plan.planned_amount),
    )


def month_setting_to_domain(orm_setting: ORMMonthSetting) -> domain.MonthSettings:
    """Convert SQLAlchemy MonthSetting model to domain MonthSettings."""
    return domain.MonthSettings(
        month_key=orm_setting.month_key,
        starting_balance=_decimal(orm_setting.starting_balance),
    )


def csv_mapping_to_domain(orm_mapping: ORMCSVMapping) -> domain.ColumnMapping:
    """Convert a saved header mapping to a domain ColumnMapping."""
    return domain.ColumnMapping(
        date_column_index=orm_mapping.date_column_index,
        amount_column_index=orm_mapping.amount_column_index,
        description_column_index=orm_mapping.description_column_index,
        category_column_index=orm_mapping.category_column_index,
        external_id_column_index=orm_mapping.external_id_column_index,
        save_header_mapping=True,
    )


def import_batch_to_domain(orm_batch: ORMImportBatch) -> domain.ImportBatch:
    """Convert SQLAlchemy ImportBatch model to domain ImportBatch entity."""
    return domain.ImportBatch(
        id=orm_batch.id,
        owner_id=orm_batch.owner_id,
        account_id=orm_batch.account_id,
        source_name=orm_batch.source_name,
        status=domain.ImportBatchStatus(orm_batch.status),
        inserted_count=orm_batch.inserted_count,
        skipped_duplicates=orm_batch.skipped_duplicates,
        parse_error_count=orm_batch.parse_error_count,
        warning_count=orm_batch.warning_count,
        created_at=orm_batch.created_at,
        completed_at=orm_batch.completed_at,
    )


def import_issue_to_domain(orm_issue: ORMImportIssue) -> domain.ImportIssue:
    """Convert SQLAlchemy ImportIssue model to domain ImportIssue entity."""
    return domain.ImportIssue(
        id=orm_issue.id,
        import_batch_id=orm_issue.import_batch_id,
        severity=domain.IssueSeverity(orm_issue.severity),
        row_number=orm_issue.row_number,
        message=orm_issue.message,
    )
