"""Plan Type Budget ORM - planned amount for one activity type inside one plan.

Invariants:
    - (plan_id, activity_type_id) is unique: upserts update in place
    - type_id mirrors activity_type_id for older clients
    - planned_amount >= 0
"""

import uuid

from sqlalchemy import ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketing_api.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from marketing_api.models.catalog_type import ActivityType


class PlanTypeBudget(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "marketing_plan_type_budgets"
    __table_args__ = (
        UniqueConstraint(
            "plan_id", "activity_type_id",
            name="marketing_plan_type_budgets_unique",
        ),
    )

    plan_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("marketing_plans.id", ondelete="CASCADE"),
        nullable=False,
    )
    activity_type_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("marketing_activity_types.id", ondelete="CASCADE"),
        nullable=False,
    )
    type_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    planned_amount: Mapped[float] = mapped_column(
        Numeric(20, 2, asdecimal=False), nullable=False,
    )

    type: Mapped[ActivityType] = relationship(
        ActivityType, lazy="selectin",
    )
