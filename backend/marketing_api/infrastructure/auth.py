"""Caller Identity & Permissions - reads the caller from request headers and answers action checks.

Invariants:
    - Identity sources, in order: x-user-id header, hit_token cookie, Bearer token
    - Token payloads are decoded, not verified (the gateway verifies signatures)
    - Expired tokens yield no identity
    - Claims of the wrong shape are ignored, never raised on
    - ClaimsPermissionChecker grants everything to the admin role, except restrictive
      scope keys: admins resolve to scope "any"
    - Scope keys (*.scope.<mode>) are granted by exact action claims only

Design Decisions:
    - extract_user returns None on any malformed token instead of raising:
      routes decide whether identity is required
    - Marketing options fall back to Settings when the token carries none
"""

import logging

import jwt
from starlette.requests import Request

from marketing_api.config import Settings
from marketing_api.core.domain_types import AuthUser, MarketingOptions, ScopeMode
from marketing_api.core.permission_protocols import PermissionResult

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "hit_token"
USER_ID_HEADER = "x-user-id"
MARKETING_PACK = "marketing"
SCOPE_MARKER = ".scope."


def decode_token_claims(token: str) -> dict | None:
    """Return the claims of a JWT, or None if malformed/expired."""
    try:
        return jwt.decode(
            token, options={"verify_signature": False, "verify_exp": True},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Ignoring expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f"Ignoring malformed token: {e}")
        return None


def _read_token(request: Request) -> str | None:
    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):]
    return None


def _string_list(value) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def extract_user(request: Request) -> AuthUser | None:
    """Resolve the caller identity from the request."""
    user_id = request.headers.get(USER_ID_HEADER)
    if user_id:
        return AuthUser(sub=user_id)

    token = _read_token(request)
    if not token:
        return None
    claims = decode_token_claims(token)
    if not claims or not claims.get("sub"):
        return None
    email = claims.get("email")
    return AuthUser(
        sub=str(claims["sub"]),
        email=email if isinstance(email, str) else "",
        roles=_string_list(claims.get("roles")),
        actions=_string_list(claims.get("actions")),
        feature_packs=_as_dict(claims.get("featurePacks")),
    )


def is_admin(user: AuthUser | None, admin_role: str = "admin") -> bool:
    return bool(user) and admin_role in user.roles


def marketing_options_for(
    user: AuthUser | None, settings: Settings,
) -> MarketingOptions:
    """Project linking options from token claims, defaulting to settings."""
    packs = _as_dict(user.feature_packs) if user else {}
    opts = _as_dict(_as_dict(packs.get(MARKETING_PACK)).get("options"))
    enabled = opts.get("enable_project_linking")
    required = opts.get("require_project_linking")
    return MarketingOptions(
        enable_project_linking=(
            enabled if isinstance(enabled, bool) else settings.enable_project_linking
        ),
        require_project_linking=(
            required if isinstance(required, bool) else settings.require_project_linking
        ),
    )


class ClaimsPermissionChecker:
    """PermissionChecker backed by the caller's role and action claims."""

    def __init__(self, admin_role: str = "admin"):
        self._admin_role = admin_role

    async def check(
        self, user: AuthUser | None, action_key: str,
    ) -> PermissionResult:
        if user is None:
            return PermissionResult(False, action_key, "unauthenticated")
        if SCOPE_MARKER in action_key:
            return self._check_scope(user, action_key)
        if is_admin(user, self._admin_role):
            return PermissionResult(True, action_key)
        for granted in user.actions:
            if granted == action_key:
                return PermissionResult(True, action_key)
            if granted.endswith(".*") and action_key.startswith(granted[:-1]):
                return PermissionResult(True, action_key)
        return PermissionResult(False, action_key, "action not granted")

    def _check_scope(self, user: AuthUser, action_key: str) -> PermissionResult:
        if action_key in user.actions:
            return PermissionResult(True, action_key)
        if is_admin(user, self._admin_role) and action_key.endswith(
            f"{SCOPE_MARKER}{ScopeMode.ANY.value}",
        ):
            return PermissionResult(True, action_key)
        return PermissionResult(False, action_key, "scope not granted")
