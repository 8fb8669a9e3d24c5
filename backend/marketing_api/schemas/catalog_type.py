"""Catalog Type Schemas - plan types, activity types and campaign types share one shape.

Invariants:
    - Create bodies never carry isSystem (system rows come from seeding only)
    - Update bodies accept sortOrder as an integer or a digit string
    - Reorder bodies list at least one {id, order} pair
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, model_validator

from marketing_api.schemas.base import (
    ApiModel, NonEmptyStr, ResponseModel, SortOrderValue, StrictFlag, non_nullable,
)


class CatalogTypeCreate(ApiModel):
    key: NonEmptyStr
    name: NonEmptyStr
    description: str | None = None
    color: str | None = None
    icon: str | None = None

    @model_validator(mode="before")
    @classmethod
    def reject_system_flag(cls, data: Any) -> Any:
        if isinstance(data, dict) and "isSystem" in data:
            raise ValueError("isSystem cannot be set through the API")
        return data


class CatalogTypeUpdate(ApiModel):
    key: NonEmptyStr | None = None
    name: NonEmptyStr | None = None
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    sort_order: SortOrderValue | None = None
    is_active: StrictFlag | None = None

    reject_null = non_nullable("key", "name", "sort_order", "is_active")


class PlanTypeCreate(CatalogTypeCreate):
    pass


class PlanTypeUpdate(CatalogTypeUpdate):
    pass


class CampaignTypeCreate(CatalogTypeCreate):
    pass


class CampaignTypeUpdate(CatalogTypeUpdate):
    pass


class ActivityTypeCreate(CatalogTypeCreate):
    category: str | None = None


class ActivityTypeUpdate(CatalogTypeUpdate):
    category: str | None = None


class ReorderEntry(ApiModel):
    id: UUID
    order: int = Field(ge=0, strict=True)


class CatalogTypeReorder(ApiModel):
    types: list[ReorderEntry] = Field(min_length=1)


# ─── Responses ───────────────────────────────────────────────────

class TypeRef(ResponseModel):
    """Catalog row embedded in another entity's response."""
    id: UUID
    key: str
    name: str
    color: str | None = None
    icon: str | None = None


class CatalogTypeResponse(ResponseModel):
    id: UUID
    key: str
    name: str
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    sort_order: int
    is_system: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ActivityTypeResponse(CatalogTypeResponse):
    category: str | None = None


class ReorderResponse(ApiModel):
    success: bool = True
    updated: int
    items: list[CatalogTypeResponse]
