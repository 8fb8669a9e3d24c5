"""Small response bodies shared across routers."""

from pydantic import BaseModel

from marketing_api.schemas.base import ApiModel


class SuccessResponse(ApiModel):
    success: bool = True


class LinkingOptions(BaseModel):
    """Option keys keep their feature-pack (snake_case) spelling on the wire."""
    enable_project_linking: bool
    require_project_linking: bool


class ConfigResponse(ApiModel):
    options: LinkingOptions
    projects_installed: bool
