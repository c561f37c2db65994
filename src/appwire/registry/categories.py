# appwire/registry/categories.py
"""Registration categories and normalization helpers."""

from __future__ import annotations

from enum import Enum

from .exceptions import UnknownCategoryError

__all__ = ["Category", "normalize_category"]


class Category(str, Enum):
    """The closed set of things an application registers."""

    ACTIONS = "actions"
    STORES = "stores"
    WIDGETS = "widgets"

    @property
    def label(self) -> str:
        """Singular form used in user-facing messages (``action``, ``store``, ``widget``)."""
        return self.value[:-1]

    def __str__(self) -> str:
        return self.value


def normalize_category(value: Category | str) -> Category:
    """Coerce a category or its string value, rejecting anything else."""
    if isinstance(value, Category):
        return value
    try:
        return Category(value)
    except ValueError:
        raise UnknownCategoryError(f"No such store: {value}") from None
