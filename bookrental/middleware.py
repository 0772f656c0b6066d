"""Role checks run after authentication has stored the caller's identity."""

from __future__ import annotations

from http import HTTPStatus

from .context import Handler, RequestContext
from .models import ADMIN_ROLE, USER_ROLE

_FORBIDDEN = "Forbidden: insufficient permissions"


def _reject(ctx: RequestContext, status: HTTPStatus, message: str) -> None:
    ctx.abort_with_json(status, {"success": False, "message": message, "data": None})


def require_role(required_role: str) -> Handler:
    """A handler that lets the request through only for callers with the given role."""

    def check(ctx: RequestContext) -> None:
        if "role" not in ctx:
            _reject(ctx, HTTPStatus.UNAUTHORIZED, "Unauthorized: role not found in context")
            return
        if ctx.get("role") != required_role:
            _reject(ctx, HTTPStatus.FORBIDDEN, _FORBIDDEN)

    return check


def require_admin() -> Handler:
    """A handler that admits administrators only."""
    return require_role(ADMIN_ROLE)


def require_user() -> Handler:
    """A handler that admits regular users only."""
    return require_role(USER_ROLE)


def require_admin_or_same_user() -> Handler:
    """A handler that admits administrators, or users acting on their own id."""

    def check(ctx: RequestContext) -> None:
        if "role" not in ctx or "user_id" not in ctx:
            _reject(
                ctx,
                HTTPStatus.UNAUTHORIZED,
                "Unauthorized: user information not found in context",
            )
            return
        if ctx.get("role") == ADMIN_ROLE:
            return
        requested = ctx.param("id")
        if not requested or requested == ctx.get("user_id"):
            return
        _reject(ctx, HTTPStatus.FORBIDDEN, _FORBIDDEN)

    return check