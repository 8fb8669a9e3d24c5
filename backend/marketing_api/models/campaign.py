"""Campaign ORM - a dated, budgeted marketing push with an optional type.

Invariants:
    - status is one of CampaignStatus values (default planned)
    - budget_amount is NULL (no budget) or >= 0
    - created_by_user_id is set once on insert
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketing_api.core.domain_types import CampaignStatus
from marketing_api.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from marketing_api.models.catalog_type import CampaignType


class Campaign(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "marketing_campaigns"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    goals: Mapped[str | None] = mapped_column(Text, nullable=True)
    campaign_type_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("marketing_campaign_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CampaignStatus.PLANNED.value,
    )
    start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    budget_amount: Mapped[float | None] = mapped_column(
        Numeric(20, 2, asdecimal=False), nullable=True,
    )
    owner_user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_by_user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    last_updated_by_user_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True,
    )

    campaign_type: Mapped[CampaignType | None] = relationship(
        CampaignType, lazy="selectin",
    )
