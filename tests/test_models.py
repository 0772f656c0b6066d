import uuid
from datetime import datetime, timezone

import pytest

from bookrental.models import (
    ADMIN_ROLE,
    USER_ROLE,
    Book,
    BookCreate,
    BookCreateRequest,
    BookTransferRequest,
    BookUpdate,
    ErrorResponse,
    IssuedToken,
    LoginResponse,
    LogoutRequest,
    RefreshTokenRequest,
    RefreshTokenResponse,
    TokenType,
    User,
    UserCreate,
    UserLogin,
    UserUpdate,
    ValidationError,
    parse_request,
)

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_ID = "22222222-2222-2222-2222-222222222222"


def test_parse_book_create_valid():
    book = parse_request(
        BookCreate, {"title": "Book 1", "author": "Author 1", "isbn": "1234567890"}
    )
    assert book == BookCreate(title="Book 1", author="Author 1", isbn="1234567890")
    assert book.user_id == ""


def test_parse_book_create_with_uuid_owner():
    book = parse_request(
        BookCreate,
        {"title": "Book 1", "author": "Author 1", "isbn": "1234567890", "user_id": OWNER_ID},
    )
    assert book.user_id == OWNER_ID


def test_parse_book_create_missing_title():
    with pytest.raises(ValidationError, match="'required' tag"):
        parse_request(BookCreate, {"author": "Author 1", "isbn": "1234567890"})


def test_parse_reports_every_failing_field():
    with pytest.raises(ValidationError) as info:
        parse_request(BookCreate, {"isbn": "1234567890"})
    message = str(info.value)
    assert "BookCreate.title" in message
    assert "BookCreate.author" in message


def test_parse_book_create_rejects_bad_uuid():
    with pytest.raises(ValidationError, match="'uuid' tag"):
        parse_request(
            BookCreate,
            {"title": "Book 1", "author": "Author 1", "isbn": "1", "user_id": "user-1"},
        )


def test_parse_ignores_unknown_keys_and_null():
    update = parse_request(BookUpdate, {"title": "Updated", "unknown": 5, "author": None})
    assert update == BookUpdate(title="Updated")


def test_parse_rejects_non_string_value():
    with pytest.raises(ValidationError):
        parse_request(BookUpdate, {"title": 42})


def test_parse_rejects_non_object():
    with pytest.raises(ValidationError):
        parse_request(BookUpdate, ["title"])


def test_parse_rejects_non_request_model():
    with pytest.raises(TypeError):
        parse_request(User, {"name": "John Doe"})


def test_user_create_valid():
    created = parse_request(
        UserCreate, {"name": "John Doe", "email": "john@example.com", "password": "password"}
    )
    assert created.email == "john@example.com"
    assert created.password == "password"


def test_user_create_rejects_bad_email():
    with pytest.raises(ValidationError, match="'email' tag"):
        parse_request(
            UserCreate, {"name": "John Doe", "email": "not-an-email", "password": "password"}
        )


def test_user_create_rejects_short_password():
    with pytest.raises(ValidationError, match="'min' tag"):
        parse_request(
            UserCreate, {"name": "John Doe", "email": "john@example.com", "password": "token"}
        )


def test_user_update_allows_empty_fields():
    assert parse_request(UserUpdate, {}) == UserUpdate()


def test_user_update_checks_given_email():
    with pytest.raises(ValidationError):
        parse_request(UserUpdate, {"email": "broken"})


def test_user_login_requires_password():
    with pytest.raises(ValidationError):
        parse_request(UserLogin, {"email": "john@example.com"})


def test_transfer_request_requires_both_ids():
    with pytest.raises(ValidationError):
        parse_request(BookTransferRequest, {"from_user_id": OWNER_ID})
    request = parse_request(
        BookTransferRequest, {"from_user_id": OWNER_ID, "to_user_id": OTHER_ID}
    )
    assert (request.from_user_id, request.to_user_id) == (OWNER_ID, OTHER_ID)


def test_book_create_request_has_no_rules():
    assert parse_request(BookCreateRequest, {}) == BookCreateRequest()


@pytest.mark.parametrize("model", [LogoutRequest, RefreshTokenRequest])
def test_refresh_token_is_required(model):
    with pytest.raises(ValidationError):
        parse_request(model, {})
    assert parse_request(model, {"refresh_token": "token"}).refresh_token == "token"


def test_user_before_create_fills_defaults():
    user = User(name="John Doe", email="john@example.com")
    user.before_create()
    assert str(uuid.UUID(user.id)) == user.id
    assert user.role == USER_ROLE
    assert user.created_at is not None and user.updated_at is not None


def test_user_before_create_keeps_given_values():
    user = User(id="user-1", role=ADMIN_ROLE)
    user.before_create()
    assert (user.id, user.role) == ("user-1", ADMIN_ROLE)


def test_user_to_dict_hides_password():
    password = "password"
    data = User(id="user-1", name="John Doe", email="john@example.com",
                password=password, role=USER_ROLE).to_dict()
    assert "password" not in data
    assert "books" not in data
    assert data["email"] == "john@example.com"


def test_user_to_dict_lists_books():
    user = User(id="user-1", books=[Book(id="book-1", user_id="user-1")])
    assert [book["id"] for book in user.to_dict()["books"]] == ["book-1"]


def test_book_before_create_keeps_id():
    book = Book(id="book-1")
    book.before_create()
    assert book.id == "book-1"
    fresh = Book()
    fresh.before_create()
    assert uuid.UUID(fresh.id).version == 4


def test_book_to_dict_user_only_when_loaded():
    book = Book(id="book-1", title="Book 1", user_id="user-1")
    assert "user" not in book.to_dict()
    book.user = User(id="user-1", name="John Doe")
    assert book.to_dict()["user"]["name"] == "John Doe"


def test_timestamps_are_rfc3339():
    moment = datetime(2024, 4, 17, 12, 0, tzinfo=timezone.utc)
    data = Book(id="book-1", created_at=moment, updated_at=moment).to_dict()
    assert data["created_at"] == "2024-04-17T12:00:00Z"
    assert data["updated_at"] == data["created_at"]


def test_issued_token_to_dict_revoked_at_optional():
    record = IssuedToken(id="t1", user_id="user-1", token="token",
                         token_type=TokenType.ACCESS.value)
    data = record.to_dict()
    assert "revoked_at" not in data
    assert data["token_type"] == "access"
    assert data["is_revoked"] is False
    record.is_revoked = True
    record.revoked_at = datetime(2024, 4, 17, 12, 0, tzinfo=timezone.utc)
    assert record.to_dict()["revoked_at"] == "2024-04-17T12:00:00Z"


def test_issued_token_before_create():
    record = IssuedToken(token="token")
    record.before_create()
    assert uuid.UUID(record.id).version == 4


def test_token_type_from_value():
    assert TokenType("access") is TokenType.ACCESS
    assert TokenType("refresh") is TokenType.REFRESH
    with pytest.raises(ValueError):
        TokenType("session")


def test_table_names_on_instances():
    assert User().__tablename__ == "br_user"
    assert Book().__tablename__ == "br_book"
    assert IssuedToken().__tablename__ == "br_issued_token"


def test_login_response_to_dict():
    password = "password"
    response = LoginResponse(
        user=User(id="user-1", email="john@example.com", password=password),
        access_token="token",
        refresh_token="token",
        expires_at=1713345600,
    )
    data = response.to_dict()
    assert data["expires_at"] == 1713345600
    assert "password" not in data["user"]
    assert data["user"]["id"] == "user-1"


def test_refresh_and_error_responses():
    refresh = RefreshTokenResponse(access_token="token", refresh_token="token", expires_at=1713345600)
    assert refresh.to_dict() == {
        "access_token": "token",
        "refresh_token": "token",
        "expires_at": 1713345600,
    }
    assert ErrorResponse(error="Validation failed").to_dict() == {"error": "Validation failed"}