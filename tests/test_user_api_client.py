from __future__ import annotations

import json
from typing import Any, Optional
from unittest import mock

import pytest
import requests

from user_api_client import UserAPIClient


def make_response(status_code: int, body: Optional[Any] = None, url: str = "http://api.test") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response._content = b"" if body is None else json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture()
def session() -> mock.Mock:
    return mock.Mock(spec=requests.Session)


@pytest.fixture()
def api(session: mock.Mock) -> UserAPIClient:
    return UserAPIClient(base_url="http://api.test/", session=session, timeout=3)


def test_create_user_posts_json(api: UserAPIClient, session: mock.Mock) -> None:
    user = {"id": 1, "name": "Alice", "email": "alice@example.com"}
    session.request.return_value = make_response(201, user)

    data, error = api.create_user("Alice", "alice@example.com")

    assert error is None
    assert data == user
    session.request.assert_called_once_with(
        method="POST",
        url="http://api.test/api/v1/users",
        params=None,
        json={"name": "Alice", "email": "alice@example.com"},
        timeout=3,
    )


def test_error_body_is_parsed(api: UserAPIClient, session: mock.Mock) -> None:
    session.request.return_value = make_response(
        409, {"message": "User with this email already exists", "code": "DUPLICATE_EMAIL"}
    )

    data, error = api.create_user("Alice", "alice@example.com")

    assert data is None
    assert error == {
        "status_code": 409,
        "message": "User with this email already exists",
        "code": "DUPLICATE_EMAIL",
    }


def test_validation_error_detail_is_used_as_message(api: UserAPIClient, session: mock.Mock) -> None:
    session.request.return_value = make_response(422, {"detail": "limit too large"})

    page, error = api.list_users(limit=1000)

    assert page["users"] == []
    assert error["status_code"] == 422
    assert error["message"] == "limit too large"
    assert error["code"] is None


def test_list_users_only_sends_given_params(api: UserAPIClient, session: mock.Mock) -> None:
    page = {"users": [], "total": 0, "limit": 10, "offset": 0}
    session.request.return_value = make_response(200, page)

    assert api.list_users() == (page, None)
    assert session.request.call_args.kwargs["params"] is None

    api.list_users(limit=5, offset=10)
    assert session.request.call_args.kwargs["params"] == {"limit": 5, "offset": 10}


def test_update_user_sends_only_given_fields(api: UserAPIClient, session: mock.Mock) -> None:
    session.request.return_value = make_response(200, {"id": 3})

    api.update_user(3, email="new@example.com")

    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "PUT"
    assert kwargs["url"] == "http://api.test/api/v1/users/3"
    assert kwargs["json"] == {"email": "new@example.com"}


def test_delete_user(api: UserAPIClient, session: mock.Mock) -> None:
    session.request.return_value = make_response(204)
    assert api.delete_user(5) == (True, None)

    session.request.return_value = make_response(404, {"message": "User not found", "code": "USER_NOT_FOUND"})
    deleted, error = api.delete_user(5)
    assert deleted is False
    assert error["code"] == "USER_NOT_FOUND"


def test_connection_error_is_reported(api: UserAPIClient, session: mock.Mock) -> None:
    session.request.side_effect = requests.ConnectionError("connection refused")

    data, error = api.get_user(1)

    assert data is None
    assert error == {"status_code": None, "message": "connection refused", "code": None}
