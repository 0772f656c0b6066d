"""HTTP handlers for the book resource."""

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
from .models import ADMIN_ROLE, USER_ROLE, Book, BookCreate, BookUpdate, ValidationError


class BookService(Protocol):
    """Operations on books that the controller relies on; failures raise."""

    def create(self, book_create: BookCreate) -> Book: ...

    def get_by_id(self, book_id: str) -> Book | None: ...

    def get_all(self) -> list[Book]: ...

    def update(self, book_id: str, book_update: BookUpdate) -> Book: ...

    def delete(self, book_id: str) -> None: ...


class BookController:
    """Create, read, update and delete books, with per-role ownership rules."""

    def __init__(self, book_service: BookService) -> None:
        self.book_service = book_service

    def _existing_book(self, ctx: RequestContext, book_id: str) -> Book | None:
        """The stored book, or None after a 404 has been written."""
        try:
            book = self.book_service.get_by_id(book_id)
        except Exception as exc:  # any service failure means the book is unavailable
            not_found(ctx, str(exc))
            return None
        if book is None:
            not_found(ctx, "book not found")
        return book

    @staticmethod
    def _identity(ctx: RequestContext) -> tuple[Any, Any] | None:
        """The caller's (user_id, role) when both were set by authentication."""
        if "user_id" in ctx and "role" in ctx:
            return ctx.get("user_id"), ctx.get("role")
        return None

    def create(self, ctx: RequestContext) -> None:
        """POST /books: a user always owns what they create; an admin may pick the owner."""
        try:
            book_create = ctx.bind_json(BookCreate)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return

        identity = self._identity(ctx)
        if identity is not None:
            user_id, role = identity
            if role == USER_ROLE:
                book_create.user_id = user_id
            elif role == ADMIN_ROLE and not book_create.user_id:
                book_create.user_id = user_id

        if not book_create.user_id:
            bad_request(ctx, "user_id is required")
            return

        try:
            book = self.book_service.create(book_create)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        created(ctx, book)

    def get_by_id(self, ctx: RequestContext) -> None:
        """GET /books/{id}."""
        book = self._existing_book(ctx, ctx.param("id"))
        if book is not None:
            ok(ctx, book)

    def get_all(self, ctx: RequestContext) -> None:
        """GET /books."""
        try:
            books = self.book_service.get_all()
        except Exception as exc:
            internal_server_error(ctx, str(exc))
            return
        ok(ctx, books)

    def update(self, ctx: RequestContext) -> None:
        """PUT /books/{id}: a user may update only their own books and never reassign them."""
        book_id = ctx.param("id")
        existing = self._existing_book(ctx, book_id)
        if existing is None:
            return

        try:
            book_update = ctx.bind_json(BookUpdate)
        except ValidationError as exc:
            bad_request(ctx, str(exc))
            return

        identity = self._identity(ctx)
        if identity is not None:
            user_id, role = identity
            if role == USER_ROLE:
                if existing.user_id != user_id:
                    forbidden(ctx, "You do not have permission to update this book")
                    return
                book_update.user_id = existing.user_id

        try:
            book = self.book_service.update(book_id, book_update)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        ok(ctx, book)

    def delete(self, ctx: RequestContext) -> None:
        """DELETE /books/{id}: a user may delete only their own books."""
        book_id = ctx.param("id")
        existing = self._existing_book(ctx, book_id)
        if existing is None:
            return

        identity = self._identity(ctx)
        if identity is not None:
            user_id, role = identity
            if role == USER_ROLE and existing.user_id != user_id:
                forbidden(ctx, "You do not have permission to delete this book")
                return

        try:
            self.book_service.delete(book_id)
        except Exception as exc:
            bad_request(ctx, str(exc))
            return
        ok(ctx, {"deleted": True})