"""Plan Type Routes - plan categorization catalog.

Invariants:
    - The default catalog is seeded on the first read of an empty table
    - Writes require marketing.setup.plan-types.access
    - System rows cannot be deleted
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import ActionKey
from marketing_api.core.errors import PermissionDeniedError
from marketing_api.infrastructure.database import get_db
from marketing_api.models.catalog_type import PlanType
from marketing_api.schemas.base import Page
from marketing_api.schemas.catalog_type import (
    CatalogTypeResponse, PlanTypeCreate, PlanTypeUpdate,
)
from marketing_api.schemas.common import SuccessResponse
from marketing_api.services import catalog
from marketing_api.api.dependencies import PageParams, catalog_page_params, require_action
from marketing_api.api.routes.crud_helpers import (
    apply_changes, commit_or_conflict, get_or_404, reload,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/plan-types", tags=["plan-types"])

_can_manage = require_action(ActionKey.SETUP_PLAN_TYPES)
_UPDATABLE = ("key", "name", "description", "color", "icon", "sort_order", "is_active")


@router.get("", response_model=Page[CatalogTypeResponse])
async def list_plan_types(
    active_only: bool = Query(True, alias="activeOnly"),
    search: str | None = Query(None),
    page: PageParams = Depends(catalog_page_params),
    db: AsyncSession = Depends(get_db),
):
    if await catalog.seed_plan_types(db):
        await db.commit()
    items, total = await catalog.list_catalog(
        db, PlanType, active_only=active_only, search=search,
        limit=page.limit, offset=page.offset,
    )
    return {"items": items, "total": total, "limit": page.limit, "offset": page.offset}


@router.post(
    "", response_model=CatalogTypeResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_can_manage)],
)
async def create_plan_type(body: PlanTypeCreate, db: AsyncSession = Depends(get_db)):
    entry = await catalog.create_entry(db, PlanType, body.model_dump())
    await commit_or_conflict(db, f"A type with key '{body.key}' already exists")
    logger.info("Plan type created", extra={"entity_id": str(entry.id), "entity_type": "plan_type"})
    return await reload(db, PlanType, entry.id)


@router.get("/{type_id}", response_model=CatalogTypeResponse)
async def get_plan_type(type_id: UUID, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, PlanType, type_id, "Plan type")


@router.put(
    "/{type_id}", response_model=CatalogTypeResponse,
    dependencies=[Depends(_can_manage)],
)
async def update_plan_type(
    type_id: UUID, body: PlanTypeUpdate, db: AsyncSession = Depends(get_db),
):
    entry = await get_or_404(db, PlanType, type_id, "Plan type")
    changes = body.changes()
    if "key" in changes:
        await catalog.ensure_key_available(db, PlanType, changes["key"], exclude_id=type_id)
    apply_changes(entry, changes, _UPDATABLE)
    await commit_or_conflict(db, "A type with this key already exists")
    return await reload(db, PlanType, type_id)


@router.delete(
    "/{type_id}", response_model=SuccessResponse,
    dependencies=[Depends(_can_manage)],
)
async def delete_plan_type(type_id: UUID, db: AsyncSession = Depends(get_db)):
    entry = await get_or_404(db, PlanType, type_id, "Plan type")
    if entry.is_system:
        raise PermissionDeniedError(
            ActionKey.SETUP_PLAN_TYPES.value, "System plan types cannot be deleted",
        )
    await db.delete(entry)
    await db.commit()
    logger.info("Plan type deleted", extra={"entity_id": str(type_id), "entity_type": "plan_type"})
    return SuccessResponse()
