"""Domain entities and the request and response payloads of the rental API."""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar

ADMIN_ROLE = "ADMIN"
USER_ROLE = "USER"

_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_REQUIRED = "required"
_OMITEMPTY = "omitempty"
_UUID = "uuid"
_EMAIL = "email"
_MIN_SIX = "min=6"


class ValidationError(ValueError):
    """Raised when a request payload cannot be decoded or fails validation."""


class TokenType(str, Enum):
    """Kind of an issued token."""

    ACCESS = "access"
    REFRESH = "refresh"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    text = value.isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


@dataclass
class User:
    """A registered user."""

    __tablename__: ClassVar[str] = "br_user"

    id: str = ""
    name: str = ""
    email: str = ""
    password: str = ""
    role: str = ""
    books: list[Book] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def before_create(self) -> None:
        """Fill in the identifier, default role and timestamps before insertion."""
        if not self.id:
            self.id = _new_id()
        if not self.role:
            self.role = USER_ROLE
        now = _now()
        self.created_at = self.created_at or now
        self.updated_at = self.updated_at or now

    def to_dict(self) -> dict[str, Any]:
        """JSON form of the user; the password hash is never included."""
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }
        if self.books:
            result["books"] = [book.to_dict() for book in self.books]
        result["created_at"] = _timestamp(self.created_at)
        result["updated_at"] = _timestamp(self.updated_at)
        return result


@dataclass
class Book:
    """A book owned by a user."""

    __tablename__: ClassVar[str] = "br_book"

    id: str = ""
    title: str = ""
    author: str = ""
    isbn: str = ""
    description: str = ""
    user_id: str = ""
    user: User | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def before_create(self) -> None:
        """Fill in the identifier and timestamps before insertion."""
        if not self.id:
            self.id = _new_id()
        now = _now()
        self.created_at = self.created_at or now
        self.updated_at = self.updated_at or now

    def to_dict(self) -> dict[str, Any]:
        """JSON form of the book; the owner is included only when loaded."""
        result: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "description": self.description,
            "user_id": self.user_id,
        }
        if self.user is not None:
            result["user"] = self.user.to_dict()
        result["created_at"] = _timestamp(self.created_at)
        result["updated_at"] = _timestamp(self.updated_at)
        return result


@dataclass
class IssuedToken:
    """A token handed out to a user, tracked so that it can be revoked."""

    __tablename__: ClassVar[str] = "br_issued_token"

    id: str = ""
    user_id: str = ""
    user: User | None = None
    token: str = ""
    token_type: str = ""
    expires_at: datetime | None = None
    is_revoked: bool = False
    revoked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def before_create(self) -> None:
        """Fill in the identifier and timestamps before insertion."""
        if not self.id:
            self.id = _new_id()
        now = _now()
        self.created_at = self.created_at or now
        self.updated_at = self.updated_at or now

    def to_dict(self) -> dict[str, Any]:
        """JSON form of the token record."""
        result: dict[str, Any] = {"id": self.id, "user_id": self.user_id}
        if self.user is not None:
            result["user"] = self.user.to_dict()
        result.update(
            token=self.token,
            token_type=self.token_type,
            expires_at=_timestamp(self.expires_at),
            is_revoked=self.is_revoked,
        )
        if self.revoked_at is not None:
            result["revoked_at"] = _timestamp(self.revoked_at)
        result["created_at"] = _timestamp(self.created_at)
        result["updated_at"] = _timestamp(self.updated_at)
        return result


def _bound(*tags: str) -> Any:
    return field(default="", metadata={"binding": tags})


@dataclass
class BookCreate:
    """Body of a book creation request."""

    title: str = _bound(_REQUIRED)
    author: str = _bound(_REQUIRED)
    isbn: str = _bound(_REQUIRED)
    description: str = _bound()
    user_id: str = _bound(_OMITEMPTY, _UUID)


@dataclass
class BookUpdate:
    """Body of a book update request; empty fields are left unchanged."""

    title: str = _bound()
    author: str = _bound()
    isbn: str = _bound()
    description: str = _bound()
    user_id: str = _bound(_OMITEMPTY, _UUID)


@dataclass
class BookCreateRequest:
    """Book data for creating a book on behalf of a user."""

    title: str = _bound()
    author: str = _bound()
    isbn: str = _bound()
    description: str = _bound()


@dataclass
class BookTransferRequest:
    """Body of a book ownership transfer request."""

    from_user_id: str = _bound(_REQUIRED, _UUID)
    to_user_id: str = _bound(_REQUIRED, _UUID)


@dataclass
class LogoutRequest:
    """Body of a logout request."""

    refresh_token: str = _bound(_REQUIRED)


@dataclass
class RefreshTokenRequest:
    """Body of a token refresh request."""

    refresh_token: str = _bound(_REQUIRED)


@dataclass
class UserCreate:
    """Body of a registration request."""

    name: str = _bound(_REQUIRED)
    email: str = _bound(_REQUIRED, _EMAIL)
    password: str = _bound(_REQUIRED, _MIN_SIX)


@dataclass
class UserUpdate:
    """Body of a user update request; empty fields are left unchanged."""

    name: str = _bound()
    email: str = _bound(_OMITEMPTY, _EMAIL)
    password: str = _bound(_OMITEMPTY, _MIN_SIX)


@dataclass
class UserLogin:
    """Body of a login request."""

    email: str = _bound(_REQUIRED, _EMAIL)
    password: str = _bound(_REQUIRED)


@dataclass
class RefreshTokenResponse:
    """Tokens issued by a refresh."""

    access_token: str
    refresh_token: str
    expires_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
        }


@dataclass
class LoginResponse:
    """The logged-in user together with freshly issued tokens."""

    user: User | None
    access_token: str
    refresh_token: str
    expires_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.user.to_dict() if self.user is not None else None,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
        }


@dataclass
class ErrorResponse:
    """A standard error body."""

    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error}


def _failed_tag(value: str, tags: tuple[str, ...]) -> str | None:
    if _OMITEMPTY in tags and value == "":
        return None
    for tag in tags:
        name, _, argument = tag.partition("=")
        if name == _REQUIRED and value == "":
            return name
        if name == _EMAIL and not _EMAIL_RE.match(value):
            return name
        if name == _UUID and not _UUID_RE.match(value):
            return name
        if name == "min" and len(value) < int(argument):
            return name
    return None


def parse_request(model: type, data: Any) -> Any:
    """Build a request model from decoded JSON, applying its binding rules."""
    specs = fields(model) if is_dataclass(model) and isinstance(model, type) else ()
    if not specs or any("binding" not in spec.metadata for spec in specs):
        raise TypeError(f"{model!r} is not a request model")
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"json: cannot unmarshal {type(data).__name__} into Go value of type {model.__name__}"
        )

    values: dict[str, str] = {}
    for spec in specs:
        raw = data.get(spec.name)
        if raw is None:
            raw = ""
        if not isinstance(raw, str):
            raise ValidationError(
                f"json: cannot unmarshal {type(raw).__name__} into field "
                f"{model.__name__}.{spec.name} of type string"
            )
        values[spec.name] = raw

    failures = [
        f"Key: '{model.__name__}.{spec.name}' Error:Field validation for "
        f"'{spec.name}' failed on the '{tag}' tag"
        for spec in specs
        if (tag := _failed_tag(values[spec.name], spec.metadata["binding"])) is not None
    ]
    if failures:
        raise ValidationError("\n".join(failures))
    return model(**values)