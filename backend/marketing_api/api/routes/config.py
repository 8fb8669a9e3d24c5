"""Config Route - project-linking options as seen by the caller."""

from fastapi import APIRouter, Depends

from marketing_api.core.domain_types import AuthUser, MarketingOptions
from marketing_api.schemas.common import ConfigResponse
from marketing_api.api.dependencies import get_current_user, get_marketing_options

router = APIRouter(prefix="/config", tags=["config"])


@router.get("", response_model=ConfigResponse)
async def get_config(
    user: AuthUser | None = Depends(get_current_user),
    options: MarketingOptions = Depends(get_marketing_options),
):
    packs = user.feature_packs if user else {}
    return {
        "options": {
            "enable_project_linking": options.enable_project_linking,
            "require_project_linking": options.require_project_linking,
        },
        "projects_installed": bool(packs.get("projects")),
    }
