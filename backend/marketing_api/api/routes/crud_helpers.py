"""CRUD Helpers - lookup, partial-update, commit and sorting plumbing shared by routers.

Invariants:
    - get_or_404 raises ResourceNotFoundError, never returns None
    - get_visible_or_404 answers 404 for rows outside the caller's scope as well
    - apply_changes only touches attributes the client supplied
    - A unique-constraint violation on commit surfaces as ConflictError (409)
    - reload re-reads a row with populate_existing so selectin relationships are fresh
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import SortOrder
from marketing_api.core.errors import ConflictError, RequestValidationFailed, ResourceNotFoundError
from marketing_api.services.scope import ScopeGrant

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


async def get_or_404(
    db: AsyncSession, model: type[ModelT], entity_id: UUID, label: str,
) -> ModelT:
    entity = await db.get(model, entity_id)
    if entity is None:
        raise ResourceNotFoundError(label, str(entity_id))
    return entity


async def get_visible_or_404(
    db: AsyncSession,
    model: type[ModelT],
    entity_id: UUID,
    label: str,
    scope: ScopeGrant,
    *owner_attrs: str,
) -> ModelT:
    entity = await get_or_404(db, model, entity_id, label)
    if not scope.can_see(entity, *owner_attrs):
        raise ResourceNotFoundError(label, str(entity_id))
    return entity


def empty_page(limit: int, offset: int) -> dict:
    return {"items": [], "total": 0, "limit": limit, "offset": offset}


async def ensure_exists(
    db: AsyncSession, model: type, entity_id: UUID | None, label: str,
) -> None:
    """404 when a referenced id does not resolve; None references pass."""
    if entity_id is not None:
        await get_or_404(db, model, entity_id, label)


def apply_changes(
    entity: Any, changes: dict[str, Any], fields: Iterable[str],
) -> list[str]:
    """Copy supplied values (explicit None included) onto entity. Returns changed names."""
    applied = []
    for name in fields:
        if name in changes:
            setattr(entity, name, changes[name])
            applied.append(name)
    return applied


async def commit_or_conflict(db: AsyncSession, conflict_message: str) -> None:
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"Commit rejected by constraint: {e.orig}")
        raise ConflictError(conflict_message)


async def reload(db: AsyncSession, model: type[ModelT], entity_id: UUID) -> ModelT:
    result = await db.execute(
        select(model)
        .where(model.id == entity_id)
        .execution_options(populate_existing=True),
    )
    return result.scalar_one()


def parse_sort_order(value: str | None, default: SortOrder = SortOrder.DESC) -> SortOrder:
    if value is None or value == "":
        return default
    try:
        return SortOrder(value.lower())
    except ValueError:
        raise RequestValidationFailed(
            "sortOrder must be 'asc' or 'desc'", field="sortOrder",
        )


def order_clause(column, direction: SortOrder):
    return column.asc() if direction is SortOrder.ASC else column.desc()


def pick_sort_column(
    sort_by: str | None, columns: dict[str, Any], default: str,
):
    """Whitelisted sort column; unknown names fall back to the default."""
    return columns.get(sort_by or default, columns[default])


def parse_query_datetime(value: str | None, field: str) -> datetime | None:
    """ISO-8601 query value as an aware UTC datetime; naive values are read as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise RequestValidationFailed(f"{field} must be an ISO-8601 date", field=field)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_query_uuid(value: str | None, field: str) -> UUID | None:
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        raise RequestValidationFailed(f"{field} must be a UUID", field=field)
