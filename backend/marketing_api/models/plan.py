"""Plan ORM - a budget envelope with optional type, dates and per-activity allocations.

Invariants:
    - budget_amount >= 0, spend_amount starts at 0
    - is_archived plans are hidden from default listings and the monthly summary
    - type budgets and links are deleted explicitly on hard delete
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, String, DateTime, ForeignKey, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketing_api.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from marketing_api.models.catalog_type import PlanType


class Plan(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "marketing_plans"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    type_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("marketing_plan_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    budget_amount: Mapped[float] = mapped_column(
        Numeric(20, 2, asdecimal=False), nullable=False,
    )
    spend_amount: Mapped[float] = mapped_column(
        Numeric(20, 2, asdecimal=False), nullable=False, default=0,
    )
    start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    allocate_by_type: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )

    type: Mapped[PlanType | None] = relationship(PlanType, lazy="selectin")
