"""Catalog Type ORM - shared columns and concrete tables for reorderable type catalogs.

Invariants:
    - key is unique per catalog table
    - is_system rows are seeded, never created through the API, never deleted
    - Listing order is (sort_order, name)

Design Decisions:
    - One mixin, three tables: plan types, activity types and campaign types evolve
      separately (activity types carry a category) but share catalog behavior
"""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from marketing_api.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class CatalogTypeMixin(UUIDPrimaryKeyMixin, TimestampMixin):
    key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class PlanType(CatalogTypeMixin, Base):
    """Plan categorization (e.g. "Paid Ads", "Influencer Partnership")."""
    __tablename__ = "marketing_plan_types"


class ActivityType(CatalogTypeMixin, Base):
    """Activity types used to categorize expenses and type budgets."""
    __tablename__ = "marketing_activity_types"

    category: Mapped[str | None] = mapped_column(String(50), nullable=True)


class CampaignType(CatalogTypeMixin, Base):
    """Campaign categorization, reorderable from the setup screen."""
    __tablename__ = "marketing_campaign_types"
