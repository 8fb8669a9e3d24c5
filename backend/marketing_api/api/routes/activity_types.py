"""Activity Type Routes - catalog used to categorize expenses and type budgets.

Invariants:
    - Writes require marketing.setup.activity-types.access
    - category is an optional free-form grouping, filterable on list
    - System rows cannot be deleted
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import ActionKey
from marketing_api.core.errors import PermissionDeniedError
from marketing_api.infrastructure.database import get_db
from marketing_api.models.catalog_type import ActivityType
from marketing_api.schemas.base import Page
from marketing_api.schemas.catalog_type import (
    ActivityTypeCreate, ActivityTypeResponse, ActivityTypeUpdate,
)
from marketing_api.schemas.common import SuccessResponse
from marketing_api.services import catalog
from marketing_api.api.dependencies import PageParams, catalog_page_params, require_action
from marketing_api.api.routes.crud_helpers import (
    apply_changes, commit_or_conflict, get_or_404, reload,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/activity-types", tags=["activity-types"])

_can_manage = require_action(ActionKey.SETUP_ACTIVITY_TYPES)
_UPDATABLE = (
    "key", "name", "category", "description", "color", "icon", "sort_order", "is_active",
)


@router.get("", response_model=Page[ActivityTypeResponse])
async def list_activity_types(
    active_only: bool = Query(True, alias="activeOnly"),
    category: str | None = Query(None),
    search: str | None = Query(None),
    page: PageParams = Depends(catalog_page_params),
    db: AsyncSession = Depends(get_db),
):
    items, total = await catalog.list_catalog(
        db, ActivityType, active_only=active_only, search=search,
        category=category or None, limit=page.limit, offset=page.offset,
    )
    return {"items": items, "total": total, "limit": page.limit, "offset": page.offset}


@router.post(
    "", response_model=ActivityTypeResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_can_manage)],
)
async def create_activity_type(
    body: ActivityTypeCreate, db: AsyncSession = Depends(get_db),
):
    entry = await catalog.create_entry(db, ActivityType, body.model_dump())
    await commit_or_conflict(db, f"A type with key '{body.key}' already exists")
    logger.info(
        "Activity type created",
        extra={"entity_id": str(entry.id), "entity_type": "activity_type"},
    )
    return await reload(db, ActivityType, entry.id)


@router.get("/{type_id}", response_model=ActivityTypeResponse)
async def get_activity_type(type_id: UUID, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, ActivityType, type_id, "Activity type")


@router.put(
    "/{type_id}", response_model=ActivityTypeResponse,
    dependencies=[Depends(_can_manage)],
)
async def update_activity_type(
    type_id: UUID, body: ActivityTypeUpdate, db: AsyncSession = Depends(get_db),
):
    entry = await get_or_404(db, ActivityType, type_id, "Activity type")
    changes = body.changes()
    if "key" in changes:
        await catalog.ensure_key_available(
            db, ActivityType, changes["key"], exclude_id=type_id,
        )
    apply_changes(entry, changes, _UPDATABLE)
    await commit_or_conflict(db, "A type with this key already exists")
    return await reload(db, ActivityType, type_id)


@router.delete(
    "/{type_id}", response_model=SuccessResponse,
    dependencies=[Depends(_can_manage)],
)
async def delete_activity_type(type_id: UUID, db: AsyncSession = Depends(get_db)):
    entry = await get_or_404(db, ActivityType, type_id, "Activity type")
    if entry.is_system:
        raise PermissionDeniedError(
            ActionKey.SETUP_ACTIVITY_TYPES.value,
            "System activity types cannot be deleted",
        )
    await db.delete(entry)
    await db.commit()
    logger.info(
        "Activity type deleted",
        extra={"entity_id": str(type_id), "entity_type": "activity_type"},
    )
    return SuccessResponse()
