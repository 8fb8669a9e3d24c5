"""Request Dependencies - caller identity, permission gates, linking options and paging.

Invariants:
    - require_action resolves before the route body runs: 401 without identity, 403 when denied
    - The permission checker is a dependency so deployments and tests can swap it
    - scope_for resolves the caller's scope mode; routes apply it to queries and writes
    - limit is clamped to [1, max_page_limit], offset to >= 0

Design Decisions:
    - Dependency factories (require_action, page_params) over decorators: FastAPI
      resolves them before request-body validation errors are reported
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Query, Request

from marketing_api.config import Settings, get_settings
from marketing_api.core.domain_types import (
    ActionKey, AuthUser, MarketingOptions, ScopeEntity, ScopeVerb,
)
from marketing_api.core.errors import (
    AuthenticationRequiredError, ErrorContext, LinkingDisabledError, PermissionDeniedError,
)
from marketing_api.core.permission_protocols import PermissionChecker
from marketing_api.infrastructure.auth import (
    ClaimsPermissionChecker, extract_user, marketing_options_for,
)
from marketing_api.services.scope import ScopeGrant, resolve_scope_mode

logger = logging.getLogger(__name__)


def get_permission_checker(
    settings: Settings = Depends(get_settings),
) -> PermissionChecker:
    return ClaimsPermissionChecker(settings.admin_role)


def get_current_user(request: Request) -> AuthUser | None:
    return extract_user(request)


def require_user(
    user: AuthUser | None = Depends(get_current_user),
) -> AuthUser:
    if user is None:
        raise AuthenticationRequiredError()
    return user


def require_action(action: ActionKey):
    """Dependency that admits only callers allowed to perform `action`."""

    async def check_action(
        user: AuthUser | None = Depends(get_current_user),
        checker: PermissionChecker = Depends(get_permission_checker),
    ) -> AuthUser:
        if user is None:
            raise AuthenticationRequiredError(ErrorContext(action_key=action.value))
        result = await checker.check(user, action.value)
        if not result.ok:
            logger.warning(
                f"Permission denied: {result.reason or 'denied'}",
                extra={"action_key": action.value, "user_id": user.sub},
            )
            raise PermissionDeniedError(
                action.value, context=ErrorContext(user_id=user.sub),
            )
        return user

    return check_action


def scope_for(entity: ScopeEntity, verb: ScopeVerb):
    """Dependency resolving the caller's scope mode for `verb` on `entity` rows."""

    async def resolve_scope(
        user: AuthUser | None = Depends(get_current_user),
        checker: PermissionChecker = Depends(get_permission_checker),
        settings: Settings = Depends(get_settings),
    ) -> ScopeGrant:
        mode = await resolve_scope_mode(
            checker, user, entity, verb, settings.default_scope_mode,
        )
        return ScopeGrant(entity, verb, mode, user)

    return resolve_scope


def get_marketing_options(
    user: AuthUser | None = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> MarketingOptions:
    return marketing_options_for(user, settings)


def require_linking(
    options: MarketingOptions = Depends(get_marketing_options),
) -> MarketingOptions:
    if not options.enable_project_linking:
        raise LinkingDisabledError()
    return options


@dataclass(frozen=True)
class PageParams:
    limit: int
    offset: int


def _clamp(limit: int | None, offset: int | None, default: int, ceiling: int) -> PageParams:
    size = default if limit is None else limit
    return PageParams(
        limit=max(1, min(size, ceiling)),
        offset=max(0, offset or 0),
    )


def page_params(
    limit: int | None = Query(None),
    offset: int | None = Query(None),
    settings: Settings = Depends(get_settings),
) -> PageParams:
    return _clamp(limit, offset, settings.default_page_limit, settings.max_page_limit)


def catalog_page_params(
    limit: int | None = Query(None),
    offset: int | None = Query(None),
    settings: Settings = Depends(get_settings),
) -> PageParams:
    return _clamp(limit, offset, settings.catalog_page_limit, settings.max_page_limit)
