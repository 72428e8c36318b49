"""Canonical clothing categories.

The closet only knows five categories. The closet screen also filters by the
pseudo-category ``all``, which is not a valid category for an item.
"""

from enum import Enum
from typing import List


class Category(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    DRESSES = "dresses"
    SHOES = "shoes"
    ACCESSORIES = "accessories"


ALL_CATEGORIES = "all"
DEFAULT_CATEGORY = Category.TOPS
CATEGORY_FILTERS: List[str] = [ALL_CATEGORIES] + [category.value for category in Category]


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower()


def validate_category(value: "str | Category") -> Category:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    if isinstance(value, Category):
        return value
    key = _normalize_key(str(value))
    try:
        return Category(key)
    except ValueError:
        raise ValueError(
            f"Unsupported category '{value}'. Allowed: {[c.value for c in Category]}"
        ) from None


def validate_category_filter(value: "str | Category") -> str:
    """Validate a closet filter, which is a category or ``all``."""

    if isinstance(value, Category):
        return value.value
    key = _normalize_key(str(value))
    if key == ALL_CATEGORIES:
        return key
    return validate_category(key).value


__all__ = [
    "ALL_CATEGORIES",
    "CATEGORY_FILTERS",
    "Category",
    "DEFAULT_CATEGORY",
    "validate_category",
    "validate_category_filter",
]
