"""HTTP handlers for operations that involve both books and users."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .context import RequestContext, bad_request, created, forbidden, ok
from .models import (
    USER_ROLE,
    Book,
    BookCreateRequest,
    BookTransferRequest,
    User,
    ValidationError,
)


class BookUserService(Protocol):
    """Book operations that also touch users; failures raise."""

    def transfer_book_ownership(self, book_id: str, from_user_id: str, to_user_id: str) -> None: ...

    def create_book_with_user(self, book_create: BookCreateRequest, user_id: str) -> Book: ...


class UserRepository(Protocol):
    """User lookup; returns None when no user has the identifier."""

    def find_by_id(self, user_id: str) -> User | None: ...


def _bound(*tags: str) -> str:
    return field(default="", metadata={"binding": tags})


@dataclass
class _BookWithUser:
    title: str = _bound("required")
    author: str = _bound("required")
    isbn: str = _bound("required")
    description: str = _bound()
    user_id: str = _bound("required", "uuid")


class BookUserController:
    """Transfers books between users and creates books on a user's behalf."""

    def __init__(self, book_user_service: BookUserService, user_repo: UserRepository) -> None:
        self.book_user_service = book_user_service
        self.user_repo = user_repo

    def transfer_book_ownership(self, ctx: RequestContext) -> None:
        """POST /books/{id}/transfer: users may only hand their own books to other users."""
        book_id = ctx.param("id")
        try:
            request = ctx.bind_json(BookTransferRequest)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return

        if "role" in ctx and ctx.get("role") == USER_ROLE:
            if "user_id" in ctx and ctx.get("user_id") != request.from_user_id:
                forbidden(ctx, "You can only transfer books that you own")
                return
            try:
                target = self.user_repo.find_by_id(request.to_user_id)
            except Exception as exc:
                bad_request(ctx, str(exc))
                return
            if target is None:
                bad_request(ctx, "target user not found")
                return
            if target.role != USER_ROLE:
                forbidden(ctx, "You can only transfer books to other users")
                return

        try:
            self.book_user_service.transfer_book_ownership(
                book_id, request.from_user_id, request.to_user_id
            )
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        ok(ctx, {"transferred": True})

    def create_book_with_user(self, ctx: RequestContext) -> None:
        """POST /book-users: users may only create books for themselves."""
        try:
            request = ctx.bind_json(_BookWithUser)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return

        if "role" in ctx and ctx.get("role") == USER_ROLE:
            if "user_id" in ctx and ctx.get("user_id") != request.user_id:
                forbidden(ctx, "You can only create books for yourself")
                return

        book_create = BookCreateRequest(
            title=request.title,
            author=request.author,
            isbn=request.isbn,
            description=request.description,
        )
        try:
            book = self.book_user_service.create_book_with_user(book_create, request.user_id)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        created(ctx, book)