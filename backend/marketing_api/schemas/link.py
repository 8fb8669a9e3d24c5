"""Link Schemas - generic cross-module edges."""

from datetime import datetime
from uuid import UUID

from marketing_api.schemas.base import ApiModel, NonEmptyStr, ResponseModel


class LinkCreate(ApiModel):
    marketing_entity_type: NonEmptyStr
    marketing_entity_id: NonEmptyStr
    linked_entity_kind: NonEmptyStr
    linked_entity_id: NonEmptyStr


class LinkDelete(ApiModel):
    """Body form of DELETE /links when no ?id= is given."""
    marketing_entity_type: NonEmptyStr
    marketing_entity_id: NonEmptyStr
    linked_entity_kind: NonEmptyStr
    linked_entity_id: NonEmptyStr


class LinkResponse(ResponseModel):
    id: UUID
    marketing_entity_type: str
    marketing_entity_id: str
    linked_entity_kind: str
    linked_entity_id: str
    created_by_user_id: str | None = None
    created_at: datetime
