"""Boundary Protocols - contract between route handlers and the permission service.

Invariants:
    - Core NEVER imports from the shell (FastAPI, SQLAlchemy)
    - A check never raises for a plain denial; it returns PermissionResult(ok=False)

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass a plain fake class
    - Async check: real implementations may call a remote authorization service
"""

from dataclasses import dataclass
from typing import Protocol

from marketing_api.core.domain_types import AuthUser


@dataclass(frozen=True)
class PermissionResult:
    """Outcome of a single action check."""
    ok: bool
    action_key: str
    reason: str | None = None


class PermissionChecker(Protocol):
    """Answers "may this caller perform action_key?"."""
    async def check(
        self, user: AuthUser | None, action_key: str,
    ) -> PermissionResult: ...
