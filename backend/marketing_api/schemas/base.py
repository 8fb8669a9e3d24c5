"""Schema Building Blocks - base model and constrained field types shared by every request schema.

Invariants:
    - Wire format is camelCase, Python attributes are snake_case
    - Unknown fields are dropped (strip), never rejected
    - Numbers and booleans are strict: "12" and "true" are rejected
    - Datetimes must be ISO-8601 strings with a timezone; they are normalized to UTC
    - On update schemas, absent / null / value stay distinguishable through model_fields_set

Design Decisions:
    - Annotated aliases (NonEmptyStr, Money, IsoDatetime) over per-field Field() repetition
    - non_nullable() marks update fields that may be omitted but not cleared
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Generic, TypeVar

from pydantic import (
    AfterValidator,
    AwareDatetime,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    Strict,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for request and response schemas."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def changes(self) -> dict[str, Any]:
        """Fields the client supplied (explicit nulls included), keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class ResponseModel(ApiModel):
    """Base for schemas built from ORM rows."""
    model_config = ConfigDict(from_attributes=True)


# ─── Field Types ─────────────────────────────────────────────────

def _require_iso_string(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError("must be an ISO-8601 datetime string")
    return value


def _to_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)


def _coerce_sort_order(value: Any) -> int:
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise ValueError("sortOrder must be a non-negative integer")


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
IsoDatetime = Annotated[
    AwareDatetime, BeforeValidator(_require_iso_string), AfterValidator(_to_utc),
]
Money = Annotated[float, Strict(), Field(ge=0, allow_inf_nan=False)]
PositiveMoney = Annotated[float, Strict(), Field(gt=0, allow_inf_nan=False)]
StrictFlag = Annotated[bool, Strict()]
SortOrderValue = Annotated[int, BeforeValidator(_coerce_sort_order)]


def _reject_null(cls, value: Any) -> Any:
    if value is None:
        raise ValueError("may be omitted but cannot be null")
    return value


def non_nullable(*fields: str):
    """Field validator rejecting explicit null on optional update fields."""
    return field_validator(*fields)(classmethod(_reject_null))


# ─── Envelopes ───────────────────────────────────────────────────

ItemT = TypeVar("ItemT")


class ItemList(ApiModel, Generic[ItemT]):
    """Bare list envelope for catalog-style endpoints."""
    items: list[ItemT]


class Page(ApiModel, Generic[ItemT]):
    """Paginated list envelope."""
    items: list[ItemT]
    total: int
    limit: int
    offset: int
