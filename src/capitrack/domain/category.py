"""Category domain service."""

from typing import Optional

from capitrack.database.base import Database
from capitrack.domain.entities import Category, CategoryKind
from capitrack.domain.errors import ConflictError, ValidationError

# Categories the application books on its own (asset purchases, write-downs,
# returns). They are flagged at creation and kept out of ordinary spending.
SYSTEM_CATEGORIES = (
    ("Investment", CategoryKind.EXPENSE.value),
    ("Depreciation", CategoryKind.EXPENSE.value),
    ("Investment Return", CategoryKind.INCOME.value),
    ("Investment Loss", CategoryKind.EXPENSE.value),
)
SYSTEM_CATEGORY_NAMES = tuple(name for name, _ in SYSTEM_CATEGORIES)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self, name: str, kind: str = CategoryKind.EXPENSE.value, is_system_generated: bool = False
    ) -> int:
        """Create a category.

        Args:
            name: Category name
            kind: EXPENSE or INCOME
            is_system_generated: Whether the application owns this category

        Returns:
            Category ID

        Raises:
            ValidationError: If kind is invalid or name is empty
            ConflictError: If a category with this name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        kind = kind.upper()
        if kind not in {k.value for k in CategoryKind}:
            raise ValidationError(f"Invalid category kind: {kind}")
        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(f"Category '{name}' already exists")

        return self.db.create_category(name=name, kind=kind, is_system_generated=is_system_generated)

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        return self.db.get_category_by_name(name)

    def list_categories(self, include_system: bool = True) -> list[Category]:
        """List categories.

        Args:
            include_system: Whether to include system-generated categories

        Returns:
            List of category entities
        """
        categories = self.db.list_categories()
        if include_system:
            return categories
        return [c for c in categories if not c.is_system_generated]

    def ensure_system_categories(self) -> list[int]:
        """Create any missing system categories.

        Returns:
            IDs of the categories created by this call
        """
        created = []
        for name, kind in SYSTEM_CATEGORIES:
            if self.db.get_category_by_name(name) is None:
                created.append(
                    self.db.create_category(name=name, kind=kind, is_system_generated=True)
                )
        return created
