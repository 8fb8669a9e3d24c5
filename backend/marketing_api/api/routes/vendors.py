"""Vendor Routes - vendor directory CRUD.

Invariants:
    - Listing returns {items} ordered by name, active vendors only by default
    - isActive defaults to true on create
    - Vendors carry no owner: scope mode own behaves like none (hidden, read-only)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import ScopeEntity, ScopeVerb, VendorKind
from marketing_api.core.errors import RequestValidationFailed
from marketing_api.infrastructure.database import get_db
from marketing_api.models.vendor import Vendor
from marketing_api.schemas.base import ItemList
from marketing_api.schemas.common import SuccessResponse
from marketing_api.schemas.vendor import VendorCreate, VendorResponse, VendorUpdate
from marketing_api.services.scope import ScopeGrant
from marketing_api.api.dependencies import scope_for
from marketing_api.api.routes.crud_helpers import (
    apply_changes, get_or_404, get_visible_or_404, reload,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/vendors", tags=["vendors"])

_UPDATABLE = ("name", "kind", "link", "contact", "notes", "is_active")


@router.get("", response_model=ItemList[VendorResponse])
async def list_vendors(
    active_only: bool = Query(True, alias="activeOnly"),
    kind: str | None = Query(None),
    search: str | None = Query(None),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.VENDORS, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    if scope.conditions() is None:
        return {"items": []}
    query = select(Vendor)
    if active_only:
        query = query.where(Vendor.is_active.is_(True))
    if kind:
        try:
            query = query.where(Vendor.kind == VendorKind(kind).value)
        except ValueError:
            raise RequestValidationFailed(f"Unknown vendor kind '{kind}'", field="kind")
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Vendor.name.ilike(pattern), Vendor.contact.ilike(pattern)))
    result = await db.execute(query.order_by(Vendor.name.asc()))
    return {"items": result.scalars().all()}


@router.post("", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    body: VendorCreate,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.VENDORS, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    scope.ensure_writable()
    vendor = Vendor(
        name=body.name,
        kind=body.kind.value,
        link=body.link,
        contact=body.contact,
        notes=body.notes,
        is_active=body.is_active,
    )
    db.add(vendor)
    await db.commit()
    logger.info("Vendor created", extra={"entity_id": str(vendor.id), "entity_type": "vendor"})
    return await reload(db, Vendor, vendor.id)


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor(
    vendor_id: UUID,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.VENDORS, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    return await get_visible_or_404(db, Vendor, vendor_id, "Vendor", scope)


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: UUID,
    body: VendorUpdate,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.VENDORS, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    vendor = await get_or_404(db, Vendor, vendor_id, "Vendor")
    scope.ensure_writable(vendor)
    changes = body.changes()
    if "kind" in changes:
        changes["kind"] = changes["kind"].value
    apply_changes(vendor, changes, _UPDATABLE)
    await db.commit()
    return await reload(db, Vendor, vendor_id)


@router.delete("/{vendor_id}", response_model=SuccessResponse)
async def delete_vendor(
    vendor_id: UUID,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.VENDORS, ScopeVerb.DELETE)),
    db: AsyncSession = Depends(get_db),
):
    vendor = await get_or_404(db, Vendor, vendor_id, "Vendor")
    scope.ensure_writable(vendor)
    await db.delete(vendor)
    await db.commit()
    logger.info("Vendor deleted", extra={"entity_id": str(vendor_id), "entity_type": "vendor"})
    return SuccessResponse()
