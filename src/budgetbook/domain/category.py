"""Category domain service."""

from typing import Optional
from budgetbook.database.base import Database
from budgetbook.domain.entities import Category, TransactionType
from budgetbook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    category_delete_blocked,
    category_not_found,
    duplicate_category,
)
from budgetbook.logging_setup import get_logger

logger = get_logger(__name__)

MAX_CATEGORY_NAME_LENGTH = 120


def category_cache_key(category_type: TransactionType, name: str) -> str:
    """Key of a category in an import run's cache."""
    return f"{category_type.value}|{name.strip().lower()}"


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize category service.

        Args:
            db: Database instance
            owner_id: Owner all operations are scoped to
        """
        self.db = db
        self.owner_id = owner_id

    def _clean_name(self, name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if len(name) > MAX_CATEGORY_NAME_LENGTH:
            raise ValidationError(
                f"Category name must be at most {MAX_CATEGORY_NAME_LENGTH} characters"
            )
        return name

    def _check_unique(
        self, category_type: TransactionType, name: str, exclude_id: Optional[int] = None
    ) -> None:
        existing = self.db.find_category_by_name(self.owner_id, category_type, name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(duplicate_category(name))

    def create_category(
        self,
        name: str,
        category_type: TransactionType,
        sort_order: int = 0,
        active: bool = True,
    ) -> Category:
        """Create a category.

        Args:
            name: Category name
            category_type: EXPENSE or INCOME
            sort_order: Position within its type
            active: Whether the category is offered for new entries

        Returns:
            Created category

        Raises:
            ValidationError: If the name is blank or too long
            ConflictError: If the name already exists for this type (ignoring case)
        """
        name = self._clean_name(name)
        self._check_unique(category_type, name)
        return self.db.create_category(
            self.owner_id,
            name=name,
            category_type=category_type,
            sort_order=sort_order,
            active=active,
        )

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID, or None if not found."""
        return self.db.get_category(self.owner_id, category_id)

    def require_category(self, category_id: int) -> Category:
        """Get category by ID.

        Raises:
            NotFoundError: If the category does not exist for the owner
        """
        category = self.db.get_category(self.owner_id, category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def list_categories(self, category_type: Optional[TransactionType] = None) -> list[Category]:
        """List categories ordered by sort order, then name."""
        return self.db.list_categories(self.owner_id, category_type)

    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        sort_order: Optional[int] = None,
        active: Optional[bool] = None,
    ) -> Category:
        """Update a category. Fields left as None are unchanged.

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: If the new name is blank
            ConflictError: If the new name clashes with another category of the same type
        """
        category = self.require_category(category_id)
        if name is not None:
            name = self._clean_name(name)
            self._check_unique(category.type, name, exclude_id=category_id)
        return self.db.update_category(
            self.owner_id, category_id, name=name, sort_order=sort_order, active=active
        )

    def delete_category(self, category_id: int) -> None:
        """Delete a category that nothing refers to.

        Raises:
            NotFoundError: If the category does not exist
            DependencyError: If plans or transactions still reference it
        """
        self.require_category(category_id)
        plan_count, transaction_count = self.db.count_category_references(
            self.owner_id, category_id
        )
        if plan_count > 0 or transaction_count > 0:
            raise DependencyError(
                category_delete_blocked(category_id, plan_count, transaction_count)
            )
        self.db.delete_category(self.owner_id, category_id)

    def get_or_create_category(
        self,
        category_type: TransactionType,
        name: str,
        cache: dict[str, Category],
    ) -> Category:
        """Resolve a category by name, creating it on first use.

        Lookup ignores case and surrounding whitespace. New categories are
        appended after the last one of their type and start active.

        Args:
            category_type: EXPENSE or INCOME
            name: Desired category name
            cache: Categories already resolved during the current import,
                keyed by ``category_cache_key``; updated in place

        Returns:
            Existing or newly created category
        """
        name = self._clean_name(name)
        key = category_cache_key(category_type, name)
        cached = cache.get(key)
        if cached is not None:
            return cached

        category = self.db.find_category_by_name(self.owner_id, category_type, name)
        if category is None:
            max_sort_order = self.db.get_max_category_sort_order(self.owner_id, category_type)
            category = self.db.create_category(
                self.owner_id,
                name=name,
                category_type=category_type,
                sort_order=(max_sort_order or 0) + 1,
                active=True,
            )
            logger.debug("Created %s category %r (id=%s)", category_type.value, name, category.id)

        cache[key] = category
        return category
