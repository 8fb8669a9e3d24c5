"""Project Linking - optional edge from a plan or expense to a project of another module.

Invariants:
    - At most one project link per marketing entity (set replaces, None clears)
    - Links are plain EntityLink rows with linked_entity_kind "project"
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import MarketingEntityType, PROJECT_LINK_KIND
from marketing_api.models.entity_link import EntityLink

logger = logging.getLogger(__name__)


def _entity_filter(entity_type: MarketingEntityType, entity_id: UUID):
    return (
        EntityLink.marketing_entity_type == entity_type.value,
        EntityLink.marketing_entity_id == str(entity_id),
        EntityLink.linked_entity_kind == PROJECT_LINK_KIND,
    )


async def get_linked_project_id(
    db: AsyncSession, entity_type: MarketingEntityType, entity_id: UUID,
) -> UUID | None:
    result = await db.execute(
        select(EntityLink.linked_entity_id)
        .where(*_entity_filter(entity_type, entity_id))
        .order_by(EntityLink.created_at)
        .limit(1),
    )
    linked = result.scalar_one_or_none()
    if linked is None:
        return None
    try:
        return UUID(linked)
    except ValueError:
        logger.warning(
            f"Ignoring malformed project link {linked!r}",
            extra={"entity_id": str(entity_id), "entity_type": entity_type.value},
        )
        return None


async def set_linked_project_id(
    db: AsyncSession,
    entity_type: MarketingEntityType,
    entity_id: UUID,
    project_id: UUID | None,
    created_by: str | None = None,
) -> None:
    """Replace the entity's project link (None removes it). Caller commits."""
    await db.execute(delete(EntityLink).where(*_entity_filter(entity_type, entity_id)))
    if project_id is None:
        return
    db.add(EntityLink(
        marketing_entity_type=entity_type.value,
        marketing_entity_id=str(entity_id),
        linked_entity_kind=PROJECT_LINK_KIND,
        linked_entity_id=str(project_id),
        created_by_user_id=created_by,
    ))


async def delete_entity_links(
    db: AsyncSession, entity_type: MarketingEntityType, entity_id: UUID,
) -> None:
    """Drop every link (any kind) hanging off a marketing entity."""
    await db.execute(
        delete(EntityLink).where(
            EntityLink.marketing_entity_type == entity_type.value,
            EntityLink.marketing_entity_id == str(entity_id),
        ),
    )
