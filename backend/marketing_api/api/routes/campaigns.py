"""Campaign Routes - campaign CRUD with type embedding.

Invariants:
    - Create requires marketing.campaigns.create, delete requires marketing.campaigns.delete
    - Update requires a caller identity (recorded as last_updated_by_user_id)
    - campaignTypeId must resolve when given
    - Each item embeds campaignType {id, key, name, color, icon} or null
    - Scope mode own limits reads and writes to campaigns the caller owns or created;
      none hides every campaign and refuses every write
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import (
    ActionKey, AuthUser, CampaignStatus, ScopeEntity, ScopeVerb,
)
from marketing_api.core.errors import RequestValidationFailed
from marketing_api.infrastructure.database import get_db
from marketing_api.models.campaign import Campaign
from marketing_api.models.catalog_type import CampaignType
from marketing_api.schemas.base import Page
from marketing_api.schemas.campaign import CampaignCreate, CampaignResponse, CampaignUpdate
from marketing_api.schemas.common import SuccessResponse
from marketing_api.services.scope import ScopeGrant
from marketing_api.api.dependencies import (
    PageParams, page_params, require_action, require_user, scope_for,
)
from marketing_api.api.routes.crud_helpers import (
    apply_changes, empty_page, ensure_exists, get_or_404, get_visible_or_404,
    order_clause, parse_query_uuid, parse_sort_order, pick_sort_column, reload,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/campaigns", tags=["campaigns"])

_SORT_COLUMNS = {
    "name": Campaign.name,
    "startDate": Campaign.start_date,
    "endDate": Campaign.end_date,
    "status": Campaign.status,
    "budgetAmount": Campaign.budget_amount,
    "createdAt": Campaign.created_at,
    "updatedAt": Campaign.updated_at,
    "id": Campaign.id,
}
_UPDATABLE = (
    "name", "description", "goals", "campaign_type_id", "status",
    "start_date", "end_date", "budget_amount", "owner_user_id",
)
_OWNER_ATTRS = ("owner_user_id", "created_by_user_id")


@router.get("", response_model=Page[CampaignResponse])
async def list_campaigns(
    status_filter: str | None = Query(None, alias="status"),
    campaign_type_id: str | None = Query(None, alias="campaignTypeId"),
    type_id: str | None = Query(None, alias="typeId"),
    search: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    page: PageParams = Depends(page_params),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.CAMPAIGNS, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    conditions = scope.conditions(Campaign.owner_user_id, Campaign.created_by_user_id)
    if conditions is None:
        return empty_page(page.limit, page.offset)
    if status_filter:
        try:
            conditions.append(Campaign.status == CampaignStatus(status_filter).value)
        except ValueError:
            raise RequestValidationFailed(
                f"Unknown campaign status '{status_filter}'", field="status",
            )
    type_filter = parse_query_uuid(campaign_type_id or type_id, "campaignTypeId")
    if type_filter:
        conditions.append(Campaign.campaign_type_id == type_filter)
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            Campaign.name.ilike(pattern),
            Campaign.description.ilike(pattern),
            Campaign.goals.ilike(pattern),
        ))

    total = await db.scalar(
        select(func.count()).select_from(Campaign).where(*conditions),
    )
    column = pick_sort_column(sort_by, _SORT_COLUMNS, "startDate")
    direction = parse_sort_order(sort_order)
    result = await db.execute(
        select(Campaign).where(*conditions)
        .order_by(order_clause(column, direction), Campaign.id.asc())
        .limit(page.limit).offset(page.offset),
    )
    return {
        "items": result.scalars().all(),
        "total": int(total or 0),
        "limit": page.limit,
        "offset": page.offset,
    }


@router.post("", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    body: CampaignCreate,
    user: AuthUser = Depends(require_action(ActionKey.CAMPAIGNS_CREATE)),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.CAMPAIGNS, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    scope.ensure_writable(None, *_OWNER_ATTRS)
    await ensure_exists(db, CampaignType, body.campaign_type_id, "Campaign type")
    values = body.model_dump(exclude={"status"})
    campaign = Campaign(
        **values,
        status=(body.status or CampaignStatus.PLANNED).value,
        created_by_user_id=user.sub,
        last_updated_by_user_id=user.sub,
    )
    db.add(campaign)
    await db.commit()
    logger.info(
        "Campaign created",
        extra={"entity_id": str(campaign.id), "entity_type": "campaign", "user_id": user.sub},
    )
    return await reload(db, Campaign, campaign.id)


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: UUID,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.CAMPAIGNS, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    return await get_visible_or_404(
        db, Campaign, campaign_id, "Campaign", scope, *_OWNER_ATTRS,
    )


@router.put("/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: UUID,
    body: CampaignUpdate,
    user: AuthUser = Depends(require_user),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.CAMPAIGNS, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    campaign = await get_or_404(db, Campaign, campaign_id, "Campaign")
    scope.ensure_writable(campaign, *_OWNER_ATTRS)
    changes = body.changes()
    if changes.get("campaign_type_id") is not None:
        await ensure_exists(db, CampaignType, changes["campaign_type_id"], "Campaign type")
    if "status" in changes:
        changes["status"] = changes["status"].value
    apply_changes(campaign, changes, _UPDATABLE)
    campaign.last_updated_by_user_id = user.sub
    await db.commit()
    return await reload(db, Campaign, campaign_id)


@router.delete(
    "/{campaign_id}", response_model=SuccessResponse,
    dependencies=[Depends(require_action(ActionKey.CAMPAIGNS_DELETE))],
)
async def delete_campaign(
    campaign_id: UUID,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.CAMPAIGNS, ScopeVerb.DELETE)),
    db: AsyncSession = Depends(get_db),
):
    campaign = await get_or_404(db, Campaign, campaign_id, "Campaign")
    scope.ensure_writable(campaign, *_OWNER_ATTRS)
    await db.delete(campaign)
    await db.commit()
    logger.info("Campaign deleted", extra={"entity_id": str(campaign_id), "entity_type": "campaign"})
    return SuccessResponse()
