"""Link Routes - generic edges between marketing entities and other modules.

Invariants:
    - Every route answers 403 while project linking is disabled for the caller
    - Creating an existing four-field tuple is a no-op answered with 201 {success: true}
    - Referenced entities are not checked for existence
    - DELETE takes ?id= or the full tuple in the body
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import AuthUser
from marketing_api.core.errors import RequestValidationFailed
from marketing_api.infrastructure.database import get_db
from marketing_api.models.entity_link import EntityLink
from marketing_api.schemas.base import ItemList
from marketing_api.schemas.common import SuccessResponse
from marketing_api.schemas.link import LinkCreate, LinkDelete, LinkResponse
from marketing_api.api.dependencies import require_linking, require_user
from marketing_api.api.routes.crud_helpers import parse_query_uuid

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/links", tags=["links"], dependencies=[Depends(require_linking)],
)


def _tuple_filter(link: LinkCreate | LinkDelete) -> tuple:
    return (
        EntityLink.marketing_entity_type == link.marketing_entity_type,
        EntityLink.marketing_entity_id == link.marketing_entity_id,
        EntityLink.linked_entity_kind == link.linked_entity_kind,
        EntityLink.linked_entity_id == link.linked_entity_id,
    )


@router.get("", response_model=ItemList[LinkResponse])
async def list_links(
    marketing_entity_type: str | None = Query(None, alias="marketingEntityType"),
    marketing_entity_id: str | None = Query(None, alias="marketingEntityId"),
    linked_entity_kind: str | None = Query(None, alias="linkedEntityKind"),
    linked_entity_id: str | None = Query(None, alias="linkedEntityId"),
    db: AsyncSession = Depends(get_db),
):
    filters = [
        (EntityLink.marketing_entity_type, marketing_entity_type),
        (EntityLink.marketing_entity_id, marketing_entity_id),
        (EntityLink.linked_entity_kind, linked_entity_kind),
        (EntityLink.linked_entity_id, linked_entity_id),
    ]
    conditions = [
        column == value.strip()
        for column, value in filters
        if value and value.strip()
    ]
    result = await db.execute(
        select(EntityLink).where(*conditions).order_by(EntityLink.created_at.desc()),
    )
    return {"items": result.scalars().all()}


@router.post(
    "",
    response_model=LinkResponse | SuccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_link(
    body: LinkCreate,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    existing = await db.scalar(select(EntityLink.id).where(*_tuple_filter(body)))
    if existing is not None:
        return SuccessResponse()

    link = EntityLink(**body.model_dump(), created_by_user_id=user.sub)
    db.add(link)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Link already created by a concurrent request")
        return SuccessResponse()
    logger.info("Link created", extra={"entity_id": str(link.id), "user_id": user.sub})
    return LinkResponse.model_validate(link)


@router.delete("", response_model=SuccessResponse)
async def delete_link(
    link_id: str | None = Query(None, alias="id"),
    body: LinkDelete | None = None,
    user: AuthUser = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    target = parse_query_uuid((link_id or "").strip(), "id")
    if target is not None:
        await db.execute(delete(EntityLink).where(EntityLink.id == target))
    elif body is not None:
        await db.execute(delete(EntityLink).where(*_tuple_filter(body)))
    else:
        raise RequestValidationFailed("Provide id or full link identity to delete")
    await db.commit()
    logger.info("Link deleted", extra={"user_id": user.sub})
    return SuccessResponse()
