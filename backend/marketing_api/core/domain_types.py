"""Domain Types - closed value sets and identity types shared by schemas, models and routes.

Invariants:
    - VendorKind and CampaignStatus are closed sets; schemas reject anything else
    - Action keys and scope keys (marketing.{entity}.{verb}.scope.{mode}) are the only
      strings passed to the permission checker
    - AuthUser is built by infrastructure/auth.py and never by route code

Design Decisions:
    - str Enums: values serialize to JSON as-is and compare equal to DB strings
"""

from dataclasses import dataclass, field
from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class VendorKind(str, Enum):
    """Vendor directory categories."""
    PLATFORM = "Platform"
    AGENCY = "Agency"
    CREATOR = "Creator"
    OTHER = "Other"


class CampaignStatus(str, Enum):
    """Campaign lifecycle states, maps to DB `status` column."""
    PLANNED = "planned"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MarketingEntityType(str, Enum):
    """Marketing entities that can carry a project link."""
    PLAN = "plan"
    EXPENSE = "expense"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ActionKey(str, Enum):
    """Permission action keys checked through the PermissionChecker."""
    CAMPAIGNS_CREATE = "marketing.campaigns.create"
    CAMPAIGNS_DELETE = "marketing.campaigns.delete"
    SETUP_CAMPAIGN_TYPES = "marketing.setup.campaign-types.access"
    SETUP_PLAN_TYPES = "marketing.setup.plan-types.access"
    SETUP_ACTIVITY_TYPES = "marketing.setup.activity-types.access"


class ScopeMode(str, Enum):
    """Row visibility granted to a caller, most restrictive first."""
    NONE = "none"
    OWN = "own"
    LDD = "ldd"
    ANY = "any"

    @property
    def allows_all(self) -> bool:
        return self in (ScopeMode.LDD, ScopeMode.ANY)


class ScopeVerb(str, Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"


class ScopeEntity(str, Enum):
    """Entities whose rows are filtered by scope mode."""
    PLANS = "plans"
    EXPENSES = "expenses"
    VENDORS = "vendors"
    CAMPAIGNS = "campaigns"


PROJECT_LINK_KIND = "project"


# ─── Caller ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class AuthUser:
    """Caller identity decoded from headers or token claims."""
    sub: str
    email: str = ""
    roles: tuple[str, ...] = ()
    actions: tuple[str, ...] = ()
    feature_packs: dict = field(default_factory=dict)


@dataclass(frozen=True)
class MarketingOptions:
    """Feature options for project linking as seen by one caller."""
    enable_project_linking: bool = False
    require_project_linking: bool = False

    @property
    def linking_required(self) -> bool:
        return self.enable_project_linking and self.require_project_linking
