"""HTTP handlers for registration, login and the user resource."""

from __future__ import annotations

from typing import Any, Protocol

from .context import (
    RequestContext,
    bad_request,
    created,
    forbidden,
    internal_server_error,
    not_found,
    ok,
)
from .models import (
    ADMIN_ROLE,
    USER_ROLE,
    LoginResponse,
    User,
    UserCreate,
    UserLogin,
    UserUpdate,
    ValidationError,
)


class UserService(Protocol):
    """User operations the controller relies on; failures raise."""

    def register(self, user_create: UserCreate) -> User: ...

    def get_by_id(self, user_id: str) -> User | None: ...

    def get_all(self) -> list[User]: ...

    def update(self, user_id: str, user_update: UserUpdate) -> User: ...

    def delete(self, user_id: str) -> None: ...

    def login(self, user_login: UserLogin, token_repo: Any) -> LoginResponse: ...


class UserController:
    """Registers and logs in users and manages user records."""

    def __init__(self, user_service: UserService, token_repo: Any) -> None:
        self.user_service = user_service
        self.token_repo = token_repo

    def register(self, ctx: RequestContext) -> None:
        """POST /register."""
        try:
            user_create = ctx.bind_json(UserCreate)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return
        try:
            user = self.user_service.register(user_create)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        created(ctx, user)

    def get_by_id(self, ctx: RequestContext) -> None:
        """GET /users/{id}."""
        try:
            user = self.user_service.get_by_id(ctx.param("id"))
        except Exception as exc:
            not_found(ctx, str(exc))
            return
        ok(ctx, user)

    def get_all(self, ctx: RequestContext) -> None:
        """GET /users."""
        try:
            users = self.user_service.get_all()
        except Exception as exc:
            internal_server_error(ctx, str(exc))
            return
        ok(ctx, users)

    def update(self, ctx: RequestContext) -> None:
        """PUT /users/{id}: users never change their email; admins not their own."""
        user_id = ctx.param("id")
        try:
            user_update = ctx.bind_json(UserUpdate)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return

        if user_update.email:
            role = ctx.get("role")
            if role == USER_ROLE:
                forbidden(ctx, "You are not allowed to change your email")
                return
            if role == ADMIN_ROLE and "user_id" in ctx and ctx.get("user_id") == user_id:
                forbidden(ctx, "Admin cannot change their own email")
                return

        try:
            user = self.user_service.update(user_id, user_update)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        ok(ctx, user)

    def delete(self, ctx: RequestContext) -> None:
        """DELETE /users/{id}."""
        try:
            self.user_service.delete(ctx.param("id"))
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        ok(ctx, {"deleted": True})

    def login(self, ctx: RequestContext) -> None:
        """POST /login."""
        try:
            user_login = ctx.bind_json(UserLogin)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return
        try:
            response = self.user_service.login(user_login, self.token_repo)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        ok(ctx, response)