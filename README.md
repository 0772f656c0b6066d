# bookrental

The request-handling core of a small book rental API. It contains:

- request and response models, with their validation rules
- configuration loading
- a request context that does not depend on any web framework
- role checks
- controllers for users, books, tokens and book transfers

The controllers call services and repositories that you provide. They do not
depend on any web framework or database.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## What the package does not do

The package has no HTTP server, no routing and no command to start. It does
not store anything and has no services or repositories of its own.

It does not validate access tokens and does not hash passwords. Something
that runs before the handlers must authenticate the caller. That step stores
the caller's `user_id` and `role` on the `RequestContext`, and the role
checks and controllers rely on those values.

## Configuration

`bookrental.config.load_config(dotenv_path=None)` first reads a `.env` file,
if one exists. It looks at `dotenv_path` when you give one, and at `./.env`
otherwise. Variables that are already set in the environment take precedence
over the file.

It then builds a frozen `Config` that holds three sections:

- `database` (`DatabaseConfig`)
- `server` (`ServerConfig`)
- `admin` (`AdminConfig`)

Any variable that is missing or empty falls back to its default:

| Variable         | Default             |
|------------------|---------------------|
| `DB_HOST`        | `localhost`         |
| `DB_PORT`        | `5432`              |
| `DB_USER`        | `postgres`          |
| `DB_PASSWORD`    | `password`          |
| `DB_NAME`        | `book_rental`       |
| `DB_SSLMODE`     | `disable`           |
| `SERVER_PORT`    | `3000`              |
| `ADMIN_NAME`     | `Admin`             |
| `ADMIN_EMAIL`    | `admin@example.com` |
| `ADMIN_PASSWORD` | `password`          |

`DatabaseConfig.dsn()` returns the connection string in this form:

```
host=... port=... user=... password=... dbname=... sslmode=...
```

## Handling a request

`bookrental.context.RequestContext` is a dataclass with these fields:

- `method`
- `path`
- `params`, the path parameters
- `headers`, whose names are matched case-insensitively
- `body`, as bytes or str
- `values`, which handlers share with each other
- `status` and `response`, which hold the result
- `aborted`

Handlers read the request with:

- `param(name)`, which returns `""` when the parameter is absent
- `header(name)`, which returns `""` when the header is absent
- `get(key)`, which returns `None` when the key is absent
- `key in ctx`

A handler stores a value for later handlers with `set(key, value)`.

`bind_json(model)` decodes the body and builds a request model from it. It
raises `ValidationError` in these cases:

- the body is empty
- the body is not valid JSON
- the decoded value fails the model's rules

A handler writes the result with `respond(status, body)`. To write the result
and also stop later handlers, it uses `abort_with_json(status, body)`.

The helpers `ok`, `created`, `bad_request`, `not_found`, `forbidden` and
`internal_server_error` write responses with status 200, 201, 400, 404, 403
and 500.

- A success body is `{"success": True, "data": ...}`. If the data is a model,
  it is turned into a dict, with `to_dict()` where the model has one.
- A failure body is `{"success": False, "message": ..., "data": None}`.

`run_chain(ctx, *handlers)` calls the handlers in order. It stops after any
handler that aborts, and it returns `ctx`.

```python
from bookrental.book_controller import BookController
from bookrental.context import RequestContext, run_chain
from bookrental.middleware import require_user
from bookrental.models import Book


class InMemoryBooks:
    def __init__(self):
        self.books = {}

    def create(self, book_create):
        book = Book(**vars(book_create))
        book.before_create()
        self.books[book.id] = book
        return book

    def get_by_id(self, book_id):
        return self.books[book_id]

    def get_all(self):
        return list(self.books.values())

    def update(self, book_id, book_update):
        raise NotImplementedError

    def delete(self, book_id):
        del self.books[book_id]


controller = BookController(InMemoryBooks())
ctx = RequestContext(
    method="POST",
    path="/books",
    body=b'{"title": "Dune", "author": "Frank Herbert", "isbn": "978-0"}',
)
ctx.set("user_id", "11111111-1111-1111-1111-111111111111")
ctx.set("role", "USER")
run_chain(ctx, require_user(), controller.create)
print(ctx.status, ctx.response["data"]["user_id"])
```

## Role checks

The functions in `bookrental.middleware` each return a handler.

- `require_role(role)`, `require_admin()` and `require_user()`:
  - abort with 401 when no role is set on the context
  - abort with 403 when the role is a different one
- `require_admin_or_same_user()`:
  - aborts with 401 when either `role` or `user_id` is missing
  - lets an `ADMIN` through
  - lets a user through when the `id` path parameter is absent or equals
    their own `user_id`
  - aborts with 403 otherwise

## Controllers

Every controller method takes a `RequestContext`. Each one turns exceptions
raised by the services into error responses.

### `BookController(book_service)`

Methods: `create`, `get_by_id`, `get_all`, `update`, `delete`.

- A `USER` always owns the books they create.
- An `ADMIN` may name the owner with `user_id`. Without one, the admin owns
  the book.
- A book without an owner is rejected with 400.
- A `USER` may update or delete only their own books, and an update keeps the
  existing owner.
- A missing book is answered with 404.

### `BookUserController(book_user_service, user_repo)`

`transfer_book_ownership`:

- A `USER` may transfer only books they own.
- The target user is looked up through `user_repo.find_by_id`. It must exist
  and must have the `USER` role.

`create_book_with_user`: a `USER` may create books only for themselves.

### `TokenController(token_service)`

Methods: `refresh_token` and `logout`.

### `UserController(user_service, token_repo)`

Methods: `register`, `get_by_id`, `get_all`, `update`, `delete`, `login`.

- On update, a `USER` may not change their email.
- An `ADMIN` may not change their own email.

## Models

`bookrental.models` defines:

- the role constants `ADMIN_ROLE` and `USER_ROLE`
- `TokenType`, whose members are `access` and `refresh`
- the entities `User`, `Book` and `IssuedToken`
- the request models `BookCreate`, `BookUpdate`, `BookCreateRequest`,
  `BookTransferRequest`, `UserCreate`, `UserUpdate`, `UserLogin`,
  `RefreshTokenRequest` and `LogoutRequest`
- the response models `LoginResponse`, `RefreshTokenResponse` and
  `ErrorResponse`

Each entity has two methods:

- `before_create()` fills in a UUID, timestamps and, for `User`, the default
  `USER` role.
- `to_dict()` returns the JSON form. `User.to_dict()` never includes the
  password.

`parse_request(model, data)` builds a request model from decoded JSON and
applies its rules: required fields, e-mail format, UUID format and minimum
password length.

- It raises `ValidationError`, a subclass of `ValueError`, when the data
  breaks a rule.
- It raises `TypeError` when `model` is not a request model.