from __future__ import annotations

import json
from unittest import mock

import pytest

import manage_users
from user_api_client import UserAPIClient


@pytest.fixture()
def client() -> mock.Mock:
    return mock.Mock(spec=UserAPIClient)


def test_create_prints_user(client: mock.Mock, capsys: pytest.CaptureFixture) -> None:
    client.create_user.return_value = ({"id": 1, "name": "Alice", "email": "a@x.com"}, None)

    code = manage_users.main(["create", "--name", "Alice", "--email", "a@x.com"], client=client)

    assert code == 0
    client.create_user.assert_called_once_with("Alice", "a@x.com")
    assert json.loads(capsys.readouterr().out)["id"] == 1


def test_list_passes_pagination(client: mock.Mock, capsys: pytest.CaptureFixture) -> None:
    client.list_users.return_value = ({"users": [], "total": 0, "limit": 5, "offset": 2}, None)

    assert manage_users.main(["list", "--limit", "5", "--offset", "2"], client=client) == 0
    client.list_users.assert_called_once_with(limit=5, offset=2)


def test_update_requires_a_field(client: mock.Mock, capsys: pytest.CaptureFixture) -> None:
    assert manage_users.main(["update", "3"], client=client) == 1
    client.update_user.assert_not_called()
    assert "Nothing to update" in capsys.readouterr().err


def test_update_sends_given_fields(client: mock.Mock) -> None:
    client.update_user.return_value = ({"id": 3}, None)

    assert manage_users.main(["update", "3", "--email", "new@x.com"], client=client) == 0
    client.update_user.assert_called_once_with(3, name=None, email="new@x.com")


def test_api_error_exits_with_1(client: mock.Mock, capsys: pytest.CaptureFixture) -> None:
    client.get_user.return_value = (
        None,
        {"status_code": 404, "message": "User not found", "code": "USER_NOT_FOUND"},
    )

    assert manage_users.main(["get", "9"], client=client) == 1
    assert "User not found [USER_NOT_FOUND]" in capsys.readouterr().err


def test_delete(client: mock.Mock, capsys: pytest.CaptureFixture) -> None:
    client.delete_user.return_value = (True, None)

    assert manage_users.main(["delete", "4"], client=client) == 0
    assert json.loads(capsys.readouterr().out) == {"deleted": 4}
