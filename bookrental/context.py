"""Per-request state and JSON response helpers for HTTP handlers."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, field, is_dataclass
from http import HTTPStatus
from typing import Any

from .models import ValidationError, parse_request

Handler = Callable[["RequestContext"], None]


@dataclass
class RequestContext:
    """One request in flight: its input, the values handlers share, and the response."""

    method: str = "GET"
    path: str = "/"
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | str = b""
    values: dict[str, Any] = field(default_factory=dict)
    status: int = int(HTTPStatus.OK)
    response: Any = None
    aborted: bool = False

    def __post_init__(self) -> None:
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    def param(self, name: str) -> str:
        """A path parameter, or an empty string when absent."""
        return self.params.get(name, "")

    def get(self, key: str) -> Any:
        """A value set by an earlier handler, or None."""
        return self.values.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store a value for later handlers."""
        self.values[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def header(self, name: str) -> str:
        """A request header, matched case-insensitively, or an empty string."""
        return self.headers.get(name.lower(), "")

    def bind_json(self, model: type) -> Any:
        """Decode the body as JSON and build the given request model from it."""
        try:
            text = self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body
        except UnicodeDecodeError as exc:
            raise ValidationError(str(exc)) from exc
        if not text.strip():
            raise ValidationError("EOF")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(str(exc)) from exc
        return parse_request(model, data)

    def respond(self, status: int, body: Any) -> None:
        """Write a JSON response."""
        self.status = int(status)
        self.response = body

    def abort_with_json(self, status: int, body: Any) -> None:
        """Write a JSON response and stop the remaining handlers."""
        self.respond(status, body)
        self.aborted = True


def run_chain(ctx: RequestContext, *handlers: Handler) -> RequestContext:
    """Run handlers in order until one aborts the request."""
    for handler in handlers:
        if ctx.aborted:
            break
        handler(ctx)
    return ctx


def _jsonable(data: Any) -> Any:
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if isinstance(data, Mapping):
        return {key: _jsonable(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_jsonable(item) for item in data]
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    return data


def _success(ctx: RequestContext, status: HTTPStatus, data: Any) -> None:
    ctx.respond(status, {"success": True, "data": _jsonable(data)})


def _failure(ctx: RequestContext, status: HTTPStatus, message: str) -> None:
    ctx.respond(status, {"success": False, "message": message, "data": None})


def ok(ctx: RequestContext, data: Any) -> None:
    """Respond 200 with data."""
    _success(ctx, HTTPStatus.OK, data)


def created(ctx: RequestContext, data: Any) -> None:
    """Respond 201 with the created resource."""
    _success(ctx, HTTPStatus.CREATED, data)


def bad_request(ctx: RequestContext, message: str) -> None:
    """Respond 400 with an error message."""
    _failure(ctx, HTTPStatus.BAD_REQUEST, message)


def not_found(ctx: RequestContext, message: str) -> None:
    """Respond 404 with an error message."""
    _failure(ctx, HTTPStatus.NOT_FOUND, message)


def forbidden(ctx: RequestContext, message: str) -> None:
    """Respond 403 with an error message."""
    _failure(ctx, HTTPStatus.FORBIDDEN, message)


def internal_server_error(ctx: RequestContext, message: str) -> None:
    """Respond 500 with an error message."""
    _failure(ctx, HTTPStatus.INTERNAL_SERVER_ERROR, message)