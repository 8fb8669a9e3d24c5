"""Campaign Schemas - request bodies and responses for /campaigns."""

from datetime import datetime
from uuid import UUID

from pydantic import computed_field

from marketing_api.core.domain_types import CampaignStatus
from marketing_api.schemas.base import (
    ApiModel, IsoDatetime, Money, NonEmptyStr, ResponseModel, non_nullable,
)
from marketing_api.schemas.catalog_type import TypeRef


class CampaignCreate(ApiModel):
    name: NonEmptyStr
    description: str | None = None
    goals: str | None = None
    campaign_type_id: UUID | None = None
    status: CampaignStatus | None = None
    start_date: IsoDatetime | None = None
    end_date: IsoDatetime | None = None
    budget_amount: Money | None = None
    owner_user_id: str | None = None


class CampaignUpdate(ApiModel):
    name: NonEmptyStr | None = None
    description: str | None = None
    goals: str | None = None
    campaign_type_id: UUID | None = None
    status: CampaignStatus | None = None
    start_date: IsoDatetime | None = None
    end_date: IsoDatetime | None = None
    budget_amount: Money | None = None
    owner_user_id: str | None = None

    reject_null = non_nullable("name", "status")


class CampaignResponse(ResponseModel):
    id: UUID
    name: str
    description: str | None = None
    goals: str | None = None
    campaign_type_id: UUID | None = None
    status: str
    start_date: datetime | None = None
    end_date: datetime | None = None
    budget_amount: float | None = None
    owner_user_id: str | None = None
    created_by_user_id: str
    last_updated_by_user_id: str | None = None
    created_at: datetime
    updated_at: datetime
    campaign_type: TypeRef | None = None

    @computed_field(alias="campaignTypeName")
    @property
    def campaign_type_name(self) -> str | None:
        return self.campaign_type.name if self.campaign_type else None
