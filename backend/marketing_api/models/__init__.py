"""ORM Models - SQLAlchemy declarative models for all marketing entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Table names carry the marketing_ prefix

Design Decisions:
    - One file per entity (catalog tables share catalog_type.py)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from marketing_api.models.catalog_type import (  # noqa: F401
    ActivityType, CampaignType, PlanType,
)
from marketing_api.models.campaign import Campaign  # noqa: F401
from marketing_api.models.plan import Plan  # noqa: F401
from marketing_api.models.plan_type_budget import PlanTypeBudget  # noqa: F401
from marketing_api.models.expense import Expense  # noqa: F401
from marketing_api.models.vendor import Vendor  # noqa: F401
from marketing_api.models.entity_link import EntityLink  # noqa: F401
