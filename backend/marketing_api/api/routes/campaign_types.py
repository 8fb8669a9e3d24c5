"""Campaign Type Routes - reorderable campaign categorization catalog.

Invariants:
    - Writes (create, update, reorder) require marketing.setup.campaign-types.access
    - Reorder applies every {id, order} pair in one transaction or none of them
    - /reorder is declared before /{type_id} so it is never parsed as an id
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import ActionKey
from marketing_api.infrastructure.database import get_db
from marketing_api.models.catalog_type import CampaignType
from marketing_api.schemas.base import ItemList
from marketing_api.schemas.catalog_type import (
    CampaignTypeCreate, CampaignTypeUpdate, CatalogTypeReorder,
    CatalogTypeResponse, ReorderResponse,
)
from marketing_api.services import catalog
from marketing_api.api.dependencies import require_action
from marketing_api.api.routes.crud_helpers import (
    apply_changes, commit_or_conflict, get_or_404, reload,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/campaign-types", tags=["campaign-types"])

_can_manage = require_action(ActionKey.SETUP_CAMPAIGN_TYPES)
_UPDATABLE = ("key", "name", "description", "color", "icon", "sort_order", "is_active")


@router.get("", response_model=ItemList[CatalogTypeResponse])
async def list_campaign_types(
    active_only: bool = Query(True, alias="activeOnly"),
    search: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    items, _ = await catalog.list_catalog(
        db, CampaignType, active_only=active_only, search=search,
    )
    return {"items": items}


@router.post(
    "", response_model=CatalogTypeResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_can_manage)],
)
async def create_campaign_type(
    body: CampaignTypeCreate, db: AsyncSession = Depends(get_db),
):
    entry = await catalog.create_entry(db, CampaignType, body.model_dump())
    await commit_or_conflict(db, f"A type with key '{body.key}' already exists")
    logger.info(
        "Campaign type created",
        extra={"entity_id": str(entry.id), "entity_type": "campaign_type"},
    )
    return await reload(db, CampaignType, entry.id)


@router.put(
    "/reorder", response_model=ReorderResponse,
    dependencies=[Depends(_can_manage)],
)
async def reorder_campaign_types(
    body: CatalogTypeReorder, db: AsyncSession = Depends(get_db),
):
    updated = await catalog.apply_reorder(
        db, CampaignType, [(entry.id, entry.order) for entry in body.types],
    )
    await db.commit()
    logger.info(f"Reordered {len(updated)} campaign types")
    items, _ = await catalog.list_catalog(db, CampaignType, active_only=False)
    return {"success": True, "updated": len(updated), "items": items}


@router.put(
    "/{type_id}", response_model=CatalogTypeResponse,
    dependencies=[Depends(_can_manage)],
)
async def update_campaign_type(
    type_id: UUID, body: CampaignTypeUpdate, db: AsyncSession = Depends(get_db),
):
    entry = await get_or_404(db, CampaignType, type_id, "Campaign type")
    changes = body.changes()
    if "key" in changes:
        await catalog.ensure_key_available(
            db, CampaignType, changes["key"], exclude_id=type_id,
        )
    apply_changes(entry, changes, _UPDATABLE)
    await commit_or_conflict(db, "A type with this key already exists")
    return await reload(db, CampaignType, type_id)
