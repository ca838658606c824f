"""Budget plan domain service."""

from decimal import Decimal
from typing import Mapping

from budgetbook.database.base import Database
from budgetbook.domain.entities import PlanItem, TransactionType
from budgetbook.domain.errors import ValidationError, category_wrong_type
from budgetbook.domain.validation import validate_month
from budgetbook.utils.amount_parser import round_currency, ZERO


class PlanService:
    """Service for planned amounts per category and month."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize plan service.

        Args:
            db: Database instance
            owner_id: Owner all operations are scoped to
        """
        self.db = db
        self.owner_id = owner_id

    def list_plans(self, month: str, category_type: TransactionType) -> list[PlanItem]:
        """List every category of a type with its planned amount for a month.

        Categories without a plan row are listed with a planned amount of 0.

        Raises:
            ValidationError: If the month is invalid
        """
        validate_month(month)
        planned_by_category = {
            plan.category_id: plan.planned_amount
            for plan in self.db.list_plans(self.owner_id, month)
        }
        return [
            PlanItem(
                category_id=category.id,
                category_name=category.name,
                category_type=category.type,
                sort_order=category.sort_order,
                planned_amount=planned_by_category.get(category.id, ZERO),
            )
            for category in self.db.list_categories(self.owner_id, category_type)
        ]

    def upsert_plans(
        self,
        month: str,
        category_type: TransactionType,
        amounts: Mapping[int, Decimal],
    ) -> list[PlanItem]:
        """Set planned amounts for categories of one type.

        Args:
            month: Month key
            category_type: Type every listed category must have
            amounts: Planned amount by category ID

        Returns:
            The month's plan for that type after the update

        Raises:
            ValidationError: If the month is invalid or a category is not one
                of the owner's categories of that type
        """
        validate_month(month)
        category_ids = {
            category.id for category in self.db.list_categories(self.owner_id, category_type)
        }
        for category_id in amounts:
            if category_id not in category_ids:
                raise ValidationError(category_wrong_type(category_id, category_type.value))

        rounded = {
            category_id: round_currency(amount) for category_id, amount in amounts.items()
        }
        self.db.upsert_plans(self.owner_id, month, rounded)
        return self.list_plans(month, category_type)
