"""Entity Link ORM - generic edge from a marketing entity to an entity of another module.

Invariants:
    - The four-field tuple is unique; inserting it twice is a no-op
    - Referenced entities are not validated here (they may live in another service)
"""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from marketing_api.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class EntityLink(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "marketing_entity_links"
    __table_args__ = (
        UniqueConstraint(
            "marketing_entity_type", "marketing_entity_id",
            "linked_entity_kind", "linked_entity_id",
            name="marketing_entity_links_unique",
        ),
    )

    marketing_entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    marketing_entity_id: Mapped[str] = mapped_column(String(255), nullable=False)
    linked_entity_kind: Mapped[str] = mapped_column(String(50), nullable=False)
    linked_entity_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_by_user_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True,
    )
