"""Catalog Service - listing, key uniqueness, ordering and seeding for type catalogs.

Invariants:
    - Catalog listings are ordered by (sort_order, name)
    - New entries are appended after the current highest sort_order
    - Reorder validates every id before touching any row (all-or-nothing)
    - Seeding only runs against an empty table

Design Decisions:
    - Functions take the model class: plan, activity and campaign types share
      one code path (CatalogTypeMixin columns)
"""

import logging
from typing import Sequence, TypeVar
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.catalog_defaults import DEFAULT_PLAN_TYPES
from marketing_api.core.errors import ConflictError, ResourceNotFoundError
from marketing_api.models.catalog_type import CatalogTypeMixin, PlanType

logger = logging.getLogger(__name__)

CatalogT = TypeVar("CatalogT", bound=CatalogTypeMixin)


async def list_catalog(
    db: AsyncSession,
    model: type[CatalogT],
    *,
    active_only: bool = True,
    search: str | None = None,
    category: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> tuple[Sequence[CatalogT], int]:
    """Return (page, total) of a catalog table."""
    conditions = []
    if active_only:
        conditions.append(model.is_active.is_(True))
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            model.name.ilike(pattern),
            model.key.ilike(pattern),
            model.description.ilike(pattern),
        ))
    if category is not None:
        conditions.append(model.category == category)

    total = await db.scalar(
        select(func.count()).select_from(model).where(*conditions),
    )
    query = (
        select(model).where(*conditions)
        .order_by(model.sort_order.asc(), model.name.asc())
        .offset(offset)
    )
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return result.scalars().all(), int(total or 0)


async def ensure_key_available(
    db: AsyncSession,
    model: type[CatalogTypeMixin],
    key: str,
    exclude_id: UUID | None = None,
) -> None:
    query = select(model.id).where(model.key == key)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    if await db.scalar(query) is not None:
        raise ConflictError(f"A type with key '{key}' already exists")


async def next_sort_order(db: AsyncSession, model: type[CatalogTypeMixin]) -> int:
    highest = await db.scalar(select(func.max(model.sort_order)))
    return 0 if highest is None else int(highest) + 1


async def create_entry(
    db: AsyncSession, model: type[CatalogT], values: dict,
) -> CatalogT:
    """Insert a non-system catalog row at the end of the ordering. Caller commits."""
    await ensure_key_available(db, model, values["key"])
    entry = model(
        **values,
        sort_order=await next_sort_order(db, model),
        is_system=False,
        is_active=True,
    )
    db.add(entry)
    await db.flush()
    return entry


async def apply_reorder(
    db: AsyncSession,
    model: type[CatalogT],
    orders: Sequence[tuple[UUID, int]],
) -> list[CatalogT]:
    """Set sort_order for every (id, order) pair, or none of them. Caller commits."""
    ids = [entry_id for entry_id, _ in orders]
    result = await db.execute(select(model).where(model.id.in_(ids)))
    rows = {row.id: row for row in result.scalars().all()}
    missing = [str(entry_id) for entry_id in ids if entry_id not in rows]
    if missing:
        raise ResourceNotFoundError(model.__name__, ", ".join(missing))
    for entry_id, order in orders:
        rows[entry_id].sort_order = order
    return [rows[entry_id] for entry_id in dict.fromkeys(ids)]


async def seed_plan_types(db: AsyncSession) -> int:
    """Insert the default plan types when the table is empty. Caller commits."""
    existing = await db.scalar(select(func.count()).select_from(PlanType))
    if existing:
        return 0
    for position, defaults in enumerate(DEFAULT_PLAN_TYPES):
        db.add(PlanType(
            **defaults, sort_order=position, is_system=True, is_active=True,
        ))
    await db.flush()
    logger.info(f"Seeded {len(DEFAULT_PLAN_TYPES)} default plan types")
    return len(DEFAULT_PLAN_TYPES)
