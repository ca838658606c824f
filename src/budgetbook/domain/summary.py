"""Month summary domain service."""

from decimal import Decimal
from typing import Iterable

from budgetbook.database.base import Database
from budgetbook.domain.entities import (
    Category,
    MonthSettings,
    MonthSummary,
    Plan,
    SummaryCategoryRow,
    SummaryTotals,
    Transaction,
    TransactionType,
)
from budgetbook.domain.validation import validate_month
from budgetbook.utils.amount_parser import round_currency, ZERO

SPENT_LABEL = "Spent this month"
SAVED_LABEL = "Saved this month"


def build_summary_rows(
    category_type: TransactionType,
    categories: list[Category],
    plans: Iterable[Plan],
    transactions: Iterable[Transaction],
) -> list[SummaryCategoryRow]:
    """Compare planned and actual amounts per category of one type.

    Active categories come first in their listed order, followed by
    inactive ones that have a plan or transaction this month.

    Args:
        category_type: EXPENSE or INCOME
        categories: All of the owner's categories, ordered for display
        plans: The month's plan rows
        transactions: The month's transactions

    Returns:
        One row per category. ``diff`` is ``planned - actual`` for expenses
        and ``actual - planned`` for income, so a negative diff is always bad.
    """
    category_by_id = {category.id: category for category in categories}
    ordered: dict[int, Category] = {
        category.id: category
        for category in categories
        if category.type == category_type and category.active
    }

    planned_by_category: dict[int, Decimal] = {}
    for plan in plans:
        category = category_by_id.get(plan.category_id)
        if category is None or category.type != category_type:
            continue
        ordered.setdefault(category.id, category)
        planned_by_category[category.id] = round_currency(
            planned_by_category.get(category.id, ZERO) + plan.planned_amount
        )

    actual_by_category: dict[int, Decimal] = {}
    for txn in transactions:
        if txn.type != category_type:
            continue
        category = category_by_id.get(txn.category_id)
        if category is None:
            continue
        ordered.setdefault(category.id, category)
        actual_by_category[category.id] = round_currency(
            actual_by_category.get(category.id, ZERO) + txn.amount
        )

    rows = []
    for category in ordered.values():
        planned = round_currency(planned_by_category.get(category.id, ZERO))
        actual = round_currency(actual_by_category.get(category.id, ZERO))
        if category_type == TransactionType.EXPENSE:
            diff = round_currency(planned - actual)
        else:
            diff = round_currency(actual - planned)
        rows.append(
            SummaryCategoryRow(
                category_id=category.id,
                category_name=category.name,
                planned=planned,
                actual=actual,
                diff=diff,
            )
        )
    return rows


def build_totals(rows: Iterable[SummaryCategoryRow]) -> SummaryTotals:
    """Sum summary rows column by column."""
    planned = actual = diff = ZERO
    for row in rows:
        planned = round_currency(planned + row.planned)
        actual = round_currency(actual + row.actual)
        diff = round_currency(diff + row.diff)
    return SummaryTotals(planned=planned, actual=actual, diff=diff)


class SummaryService:
    """Service for month roll-ups and month settings."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize summary service.

        Args:
            db: Database instance
            owner_id: Owner all operations are scoped to
        """
        self.db = db
        self.owner_id = owner_id

    def get_month_settings(self, month: str) -> MonthSettings:
        """Get a month's settings; the starting balance defaults to 0.

        Raises:
            ValidationError: If the month is invalid
        """
        validate_month(month)
        settings = self.db.get_month_settings(self.owner_id, month)
        if settings is None:
            return MonthSettings(month_key=month, starting_balance=ZERO)
        return settings

    def set_starting_balance(self, month: str, starting_balance: Decimal) -> MonthSettings:
        """Set a month's starting balance, rounded to cents.

        Raises:
            ValidationError: If the month is invalid
        """
        validate_month(month)
        return self.db.upsert_month_settings(
            self.owner_id, month, round_currency(starting_balance)
        )

    def build_month_summary(self, month: str) -> MonthSummary:
        """Build the planned vs. actual summary of a month.

        Raises:
            ValidationError: If the month is invalid
        """
        settings = self.get_month_settings(month)
        categories = self.db.list_categories(self.owner_id)
        plans = self.db.list_plans(self.owner_id, month)
        transactions = self.db.list_transactions(self.owner_id, month_key=month)

        expense_rows = build_summary_rows(TransactionType.EXPENSE, categories, plans, transactions)
        income_rows = build_summary_rows(TransactionType.INCOME, categories, plans, transactions)
        expense_totals = build_totals(expense_rows)
        income_totals = build_totals(income_rows)
        net_change = round_currency(income_totals.actual - expense_totals.actual)

        return MonthSummary(
            month=month,
            starting_balance=settings.starting_balance,
            net_change=net_change,
            ending_balance=round_currency(settings.starting_balance + net_change),
            savings_label=SPENT_LABEL if net_change < 0 else SAVED_LABEL,
            expense_totals=expense_totals,
            income_totals=income_totals,
            expense_categories=tuple(expense_rows),
            income_categories=tuple(income_rows),
        )
