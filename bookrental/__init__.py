"""Models, configuration, request context, role checks and controllers for a book rental API."""

__version__ = "1.0.0"
__all__ = [
    "book_controller",
    "book_user_controller",
    "config",
    "context",
    "middleware",
    "models",
    "token_controller",
    "user_controller",
]