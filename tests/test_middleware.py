from http import HTTPStatus

from bookrental.context import RequestContext, run_chain
from bookrental.middleware import (
    require_admin,
    require_admin_or_same_user,
    require_role,
    require_user,
)
from bookrental.models import ADMIN_ROLE, USER_ROLE


def _protected(ctx):
    ctx.respond(HTTPStatus.OK, {"success": True})


def _run(middleware, values=None, params=None):
    ctx = RequestContext(path="/protected", params=params or {})

    def inject(c):
        for key, value in (values or {}).items():
            c.set(key, value)

    return run_chain(ctx, inject, middleware, _protected)


def test_require_role_success():
    ctx = _run(require_role(ADMIN_ROLE), {"role": ADMIN_ROLE})
    assert ctx.status == 200
    assert ctx.response == {"success": True}


def test_require_role_forbidden():
    ctx = _run(require_role(ADMIN_ROLE), {"role": USER_ROLE})
    assert ctx.status == 403
    assert "insufficient permissions" in ctx.response["message"]
    assert ctx.aborted


def test_require_role_missing_role():
    ctx = _run(require_role(ADMIN_ROLE))
    assert ctx.status == 401
    assert "role not found" in ctx.response["message"]
    assert ctx.response["success"] is False


def test_require_admin_success():
    ctx = _run(require_admin(), {"role": ADMIN_ROLE})
    assert ctx.status == 200


def test_require_admin_rejects_user():
    ctx = _run(require_admin(), {"role": USER_ROLE})
    assert ctx.status == 403


def test_require_user_success():
    ctx = _run(require_user(), {"role": USER_ROLE})
    assert ctx.status == 200


def test_require_admin_or_same_user_admin():
    ctx = _run(require_admin_or_same_user(), {"role": ADMIN_ROLE, "user_id": "user-1"})
    assert ctx.status == 200


def test_require_admin_or_same_user_same_user():
    ctx = _run(
        require_admin_or_same_user(),
        {"role": USER_ROLE, "user_id": "user-1"},
        {"id": "user-1"},
    )
    assert ctx.status == 200


def test_require_admin_or_same_user_no_id_param():
    ctx = _run(require_admin_or_same_user(), {"role": USER_ROLE, "user_id": "user-1"})
    assert ctx.status == 200


def test_require_admin_or_same_user_forbidden():
    ctx = _run(
        require_admin_or_same_user(),
        {"role": USER_ROLE, "user_id": "user-1"},
        {"id": "user-2"},
    )
    assert ctx.status == 403
    assert "insufficient permissions" in ctx.response["message"]


def test_require_admin_or_same_user_missing_context():
    ctx = _run(require_admin_or_same_user())
    assert ctx.status == 401
    assert "user information not found" in ctx.response["message"]