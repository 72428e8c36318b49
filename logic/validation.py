"""Pydantic schemas for the drafts accepted by the wardrobe manager."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from models.taxonomy import DEFAULT_CATEGORY, Category, validate_category
from models.wardrobe_item import WardrobeItem, from_raw_metadata


def _strip_required(value: str, label: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{label} must not be blank")
    return stripped


class LoginRequest(BaseModel):
    """Free-text login; the only rule is a non-blank name."""

    username: str

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        return _strip_required(value, "username")


class ItemDraft(BaseModel):
    """User input for a new closet item, before it has an id."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: Category = DEFAULT_CATEGORY
    image: str = ""

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _strip_required(value, "name")

    @field_validator("category", mode="before")
    @classmethod
    def _normalise_category(cls, value: Any) -> Category:
        return validate_category(value)

    @field_validator("image", mode="before")
    @classmethod
    def _default_image(cls, value: Any) -> Any:
        return "" if value is None else value


class OutfitDraft(BaseModel):
    """User input for a new outfit: a name plus the selected closet items."""

    name: str
    items: List[Any] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _strip_required(value, "name")

    @field_validator("items")
    @classmethod
    def _coerce_items(cls, values: List[Any]) -> List[WardrobeItem]:
        items = []
        for value in values:
            if isinstance(value, WardrobeItem):
                items.append(value)
            elif isinstance(value, dict):
                items.append(from_raw_metadata(value))
            else:
                raise ValueError(f"Unsupported outfit item {type(value).__name__}")
        return items


class ValidationResult(BaseModel):
    """Summary of a rejected draft, used for logging."""

    operation: str
    reason: str
    details: List[Dict[str, Any]]


def validation_failure(operation: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a compact, JSON-safe payload."""

    details = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    return ValidationResult(
        operation=operation, reason=f"{operation} rejected", details=details
    ).model_dump()


__all__ = [
    "ItemDraft",
    "LoginRequest",
    "OutfitDraft",
    "ValidationResult",
    "validation_failure",
]
