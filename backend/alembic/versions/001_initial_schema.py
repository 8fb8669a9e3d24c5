"""Initial marketing schema - catalogs, campaigns, plans, budgets, vendors, expenses, links.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _catalog_columns() -> list[sa.Column]:
    return [
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("key", sa.String(100), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("color", sa.String(50), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_system", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
    ]


def upgrade() -> None:
    op.create_table("marketing_plan_types", *_catalog_columns(), *_timestamps())
    op.create_table(
        "marketing_activity_types",
        *_catalog_columns(),
        sa.Column("category", sa.String(50), nullable=True),
        *_timestamps(),
    )
    op.create_table("marketing_campaign_types", *_catalog_columns(), *_timestamps())

    op.create_table(
        "marketing_campaigns",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("goals", sa.Text, nullable=True),
        sa.Column(
            "campaign_type_id", UUID(as_uuid=True),
            sa.ForeignKey("marketing_campaign_types.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="planned"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("budget_amount", sa.Numeric(20, 2), nullable=True),
        sa.Column("owner_user_id", sa.String(255), nullable=True),
        sa.Column("created_by_user_id", sa.String(255), nullable=False),
        sa.Column("last_updated_by_user_id", sa.String(255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "marketing_plans",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column(
            "type_id", UUID(as_uuid=True),
            sa.ForeignKey("marketing_plan_types.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("budget_amount", sa.Numeric(20, 2), nullable=False),
        sa.Column("spend_amount", sa.Numeric(20, 2), nullable=False, server_default="0"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("allocate_by_type", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("is_archived", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_marketing_plans_is_archived", "marketing_plans", ["is_archived"])

    op.create_table(
        "marketing_plan_type_budgets",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "plan_id", UUID(as_uuid=True),
            sa.ForeignKey("marketing_plans.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "activity_type_id", UUID(as_uuid=True),
            sa.ForeignKey("marketing_activity_types.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("type_id", UUID(as_uuid=True), nullable=False),
        sa.Column("planned_amount", sa.Numeric(20, 2), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "plan_id", "activity_type_id", name="marketing_plan_type_budgets_unique",
        ),
    )

    op.create_table(
        "marketing_vendors",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("kind", sa.String(50), nullable=False),
        sa.Column("link", sa.String(500), nullable=True),
        sa.Column("contact", sa.String(500), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "marketing_expenses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "plan_id", UUID(as_uuid=True),
            sa.ForeignKey("marketing_plans.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "type_id", UUID(as_uuid=True),
            sa.ForeignKey("marketing_activity_types.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "vendor_id", UUID(as_uuid=True),
            sa.ForeignKey("marketing_vendors.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("amount", sa.Numeric(20, 2), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("attachment_url", sa.String(500), nullable=True),
        sa.Column("created_by", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_marketing_expenses_plan_id", "marketing_expenses", ["plan_id"])
    op.create_index("ix_marketing_expenses_occurred_at", "marketing_expenses", ["occurred_at"])

    op.create_table(
        "marketing_entity_links",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("marketing_entity_type", sa.String(50), nullable=False),
        sa.Column("marketing_entity_id", sa.String(255), nullable=False),
        sa.Column("linked_entity_kind", sa.String(50), nullable=False),
        sa.Column("linked_entity_id", sa.String(255), nullable=False),
        sa.Column("created_by_user_id", sa.String(255), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "marketing_entity_type", "marketing_entity_id",
            "linked_entity_kind", "linked_entity_id",
            name="marketing_entity_links_unique",
        ),
    )


def downgrade() -> None:
    op.drop_table("marketing_entity_links")
    op.drop_index("ix_marketing_expenses_occurred_at", table_name="marketing_expenses")
    op.drop_index("ix_marketing_expenses_plan_id", table_name="marketing_expenses")
    op.drop_table("marketing_expenses")
    op.drop_table("marketing_vendors")
    op.drop_table("marketing_plan_type_budgets")
    op.drop_index("ix_marketing_plans_is_archived", table_name="marketing_plans")
    op.drop_table("marketing_plans")
    op.drop_table("marketing_campaigns")
    op.drop_table("marketing_campaign_types")
    op.drop_table("marketing_activity_types")
    op.drop_table("marketing_plan_types")
