"""Scope Modes - which plan, expense, vendor and campaign rows a caller may read or change.

Invariants:
    - Keys are checked most restrictive first: none, own, ldd, any
    - Entity keys (marketing.{entity}.{verb}.scope.{mode}) win over marketing-wide keys
      (marketing.{verb}.scope.{mode}); nothing granted falls back to the configured default
    - ldd and any see every row
    - own sees rows whose owner columns match the caller; entities without owner
      columns (plans, vendors) are invisible and read-only in own mode
    - none sees nothing and changes nothing

Design Decisions:
    - Resolution goes through PermissionChecker so deployments swap one collaborator
    - Routes receive a ScopeGrant and ask it for query conditions or write checks
"""

import logging
from dataclasses import dataclass

from sqlalchemy import or_

from marketing_api.core.domain_types import AuthUser, ScopeEntity, ScopeMode, ScopeVerb
from marketing_api.core.errors import (
    AuthenticationRequiredError, ErrorContext, PermissionDeniedError,
)
from marketing_api.core.permission_protocols import PermissionChecker

logger = logging.getLogger(__name__)


def scope_key(entity: ScopeEntity | None, verb: ScopeVerb, mode: ScopeMode) -> str:
    if entity is None:
        return f"marketing.{verb.value}.scope.{mode.value}"
    return f"marketing.{entity.value}.{verb.value}.scope.{mode.value}"


async def resolve_scope_mode(
    checker: PermissionChecker,
    user: AuthUser | None,
    entity: ScopeEntity,
    verb: ScopeVerb,
    default: ScopeMode = ScopeMode.OWN,
) -> ScopeMode:
    """Effective scope for (entity, verb): entity override, then marketing-wide, then default."""
    for target in (entity, None):
        for mode in ScopeMode:
            result = await checker.check(user, scope_key(target, verb, mode))
            if result.ok:
                return mode
    return default


@dataclass(frozen=True)
class ScopeGrant:
    """Resolved scope of one caller for one (entity, verb)."""
    entity: ScopeEntity
    verb: ScopeVerb
    mode: ScopeMode
    user: AuthUser | None = None

    @property
    def owner_key(self) -> str | None:
        return self.user.sub if self.user else None

    @property
    def action_key(self) -> str:
        return scope_key(self.entity, self.verb, self.mode)

    def conditions(self, *owner_columns) -> list | None:
        """WHERE conditions limiting a query to visible rows; None when nothing is visible."""
        if self.mode.allows_all:
            return []
        if self.mode is ScopeMode.NONE or not owner_columns or not self.owner_key:
            return None
        return [or_(*(column == self.owner_key for column in owner_columns))]

    def can_see(self, row, *owner_attrs: str) -> bool:
        if self.mode.allows_all:
            return True
        if self.mode is ScopeMode.NONE or not owner_attrs or not self.owner_key:
            return False
        return any(getattr(row, attr) == self.owner_key for attr in owner_attrs)

    def ensure_writable(self, row=None, *owner_attrs: str) -> None:
        """Raise unless the caller may change `row`, or create a row it would own when row is None."""
        if self.mode.allows_all:
            return
        if self.user is None:
            raise AuthenticationRequiredError(ErrorContext(action_key=self.action_key))
        allowed = self.mode is not ScopeMode.NONE and bool(owner_attrs)
        if allowed and row is not None:
            allowed = self.can_see(row, *owner_attrs)
        if not allowed:
            logger.warning(
                f"Scope {self.mode.value} forbids {self.verb.value} on {self.entity.value}",
                extra={
                    "action_key": self.action_key,
                    "user_id": self.owner_key,
                    "scope_mode": self.mode.value,
                },
            )
            raise PermissionDeniedError(
                self.action_key, context=ErrorContext(user_id=self.owner_key),
            )
