"""Expense ORM - one actual spend entry, optionally tied to a plan, activity type and vendor.

Invariants:
    - amount > 0
    - occurred_at is always set; it drives month windows and date filters
    - plan/type/vendor references are nulled, not cascaded, when the target is deleted
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketing_api.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from marketing_api.models.catalog_type import ActivityType
from marketing_api.models.plan import Plan
from marketing_api.models.vendor import Vendor


class Expense(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "marketing_expenses"

    plan_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("marketing_plans.id", ondelete="SET NULL"),
        nullable=True,
    )
    type_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("marketing_activity_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    vendor_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("marketing_vendors.id", ondelete="SET NULL"),
        nullable=True,
    )
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    amount: Mapped[float] = mapped_column(
        Numeric(20, 2, asdecimal=False), nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachment_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    plan: Mapped[Plan | None] = relationship(Plan, lazy="selectin")
    type: Mapped[ActivityType | None] = relationship(
        ActivityType, lazy="selectin",
    )
    vendor: Mapped[Vendor | None] = relationship(Vendor, lazy="selectin")
