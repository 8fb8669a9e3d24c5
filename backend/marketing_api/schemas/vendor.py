"""Vendor Schemas - vendor directory bodies and responses."""

from datetime import datetime
from uuid import UUID

from marketing_api.core.domain_types import VendorKind
from marketing_api.schemas.base import (
    ApiModel, NonEmptyStr, ResponseModel, StrictFlag, non_nullable,
)


class VendorCreate(ApiModel):
    name: NonEmptyStr
    kind: VendorKind
    link: str | None = None
    contact: str | None = None
    notes: str | None = None
    is_active: StrictFlag = True


class VendorUpdate(ApiModel):
    name: NonEmptyStr | None = None
    kind: VendorKind | None = None
    link: str | None = None
    contact: str | None = None
    notes: str | None = None
    is_active: StrictFlag | None = None

    reject_null = non_nullable("name", "kind", "is_active")


class VendorResponse(ResponseModel):
    id: UUID
    name: str
    kind: str
    link: str | None = None
    contact: str | None = None
    notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
