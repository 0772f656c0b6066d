"""HTTP handlers for refreshing and revoking tokens."""

from __future__ import annotations

from typing import Protocol

from .context import RequestContext, bad_request, ok
from .models import LogoutRequest, RefreshTokenRequest, RefreshTokenResponse, ValidationError


class TokenService(Protocol):
    """Token operations the controller relies on; failures raise."""

    def refresh_token(self, request: RefreshTokenRequest) -> RefreshTokenResponse: ...

    def logout(self, request: LogoutRequest) -> None: ...


class TokenController:
    """Exchanges refresh tokens for new tokens and logs users out."""

    def __init__(self, token_service: TokenService) -> None:
        self.token_service = token_service

    def refresh_token(self, ctx: RequestContext) -> None:
        """POST /refresh-token."""
        try:
            request = ctx.bind_json(RefreshTokenRequest)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return
        try:
            response = self.token_service.refresh_token(request)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        ok(ctx, response)

    def logout(self, ctx: RequestContext) -> None:
        """POST /logout."""
        try:
            request = ctx.bind_json(LogoutRequest)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return
        try:
            self.token_service.logout(request)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        ok(ctx, {"logged_out": True})