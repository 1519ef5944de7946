# tests/test_auth.py

from __future__ import annotations

import pytest
from fastapi import HTTPException

from auth.dependencies import (
    INVALID_KEY_MESSAGE,
    MISCONFIGURED_MESSAGE,
    MISSING_KEY_MESSAGE,
    check_api_key,
    is_protected_path,
)

from .fakes import TEST_API_KEY


def _status_and_detail(authorization, expected) -> tuple[int, str]:
    with pytest.raises(HTTPException) as excinfo:
        check_api_key(authorization, expected)
    return excinfo.value.status_code, excinfo.value.detail


def test_matching_key_passes() -> None:
    assert check_api_key("secret", "secret") is None


def test_surrounding_whitespace_is_ignored() -> None:
    assert check_api_key("  secret  ", "secret") is None


def test_missing_header_is_401() -> None:
    assert _status_and_detail(None, "secret") == (401, MISSING_KEY_MESSAGE)


def test_missing_header_wins_over_missing_server_key() -> None:
    assert _status_and_detail(None, None) == (401, MISSING_KEY_MESSAGE)


def test_unconfigured_server_key_is_500() -> None:
    assert _status_and_detail("secret", None) == (500, MISCONFIGURED_MESSAGE)
    assert _status_and_detail("secret", "") == (500, MISCONFIGURED_MESSAGE)


def test_blank_header_is_401() -> None:
    assert _status_and_detail("   ", "secret") == (401, MISSING_KEY_MESSAGE)


def test_wrong_key_is_403() -> None:
    assert _status_and_detail("WRONG_KEY", "secret") == (403, INVALID_KEY_MESSAGE)


def test_comparison_is_case_sensitive() -> None:
    assert _status_and_detail("SECRET", "secret") == (403, INVALID_KEY_MESSAGE)


def test_bearer_prefix_is_not_stripped() -> None:
    assert _status_and_detail("Bearer secret", "secret") == (403, INVALID_KEY_MESSAGE)


@pytest.mark.parametrize("path", ["/tasks", "/goals"])
def test_protected_route_without_header(client, path: str) -> None:
    res = client.get(path)
    assert res.status_code == 401
    assert res.json()["message"] == "API Key required in the Authorization header."


@pytest.mark.parametrize("path", ["/tasks", "/goals"])
def test_protected_route_with_wrong_key(client, path: str) -> None:
    res = client.get(path, headers={"Authorization": "WRONG_KEY"})
    assert res.status_code == 403
    assert res.json()["message"] == "Invalid API Key."


@pytest.mark.parametrize("path", ["/tasks", "/goals"])
def test_protected_route_with_valid_key(client, path: str) -> None:
    res = client.get(path, headers={"Authorization": TEST_API_KEY})
    assert res.status_code == 200
    assert res.json() == []


def test_protected_route_without_server_key(client, monkeypatch) -> None:
    monkeypatch.delenv("API_KEY")
    res = client.get("/tasks", headers={"Authorization": TEST_API_KEY})
    assert res.status_code == 500
    assert res.json()["message"] == "Server configuration error."


def test_gate_runs_before_body_validation(client) -> None:
    res = client.post("/goals", json={"name": "only a name"})
    assert res.status_code == 401


def test_item_routes_are_protected(client) -> None:
    assert client.get("/tasks/1").status_code == 401
    assert client.delete("/goals/1", headers={"Authorization": "nope"}).status_code == 403


def test_public_routes_need_no_key(client) -> None:
    assert client.get("/").status_code == 200
    assert client.get("/users").status_code == 200


@pytest.mark.parametrize("path", ["/tasks", "/goals"])
def test_gate_runs_before_json_parsing(client, path: str) -> None:
    res = client.post(path, content=b"{not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 401
    assert res.json()["message"] == MISSING_KEY_MESSAGE


@pytest.mark.parametrize(
    "method,path",
    [("GET", "/tasks/1/extra"), ("PUT", "/tasks/1"), ("PATCH", "/goals"), ("GET", "/goals/")],
)
def test_gate_covers_every_path_under_protected_prefix(client, method: str, path: str) -> None:
    res = client.request(method, path, follow_redirects=False)
    assert res.status_code == 401
    assert res.json() == {"message": MISSING_KEY_MESSAGE, "error": {}}


def test_wrong_key_on_unknown_sub_path_is_403(client) -> None:
    res = client.get("/tasks/1/extra", headers={"Authorization": "WRONG_KEY"})
    assert res.status_code == 403
    assert res.json()["message"] == INVALID_KEY_MESSAGE


def test_valid_key_on_unknown_sub_path_is_404(client) -> None:
    res = client.get("/tasks/1/extra", headers={"Authorization": TEST_API_KEY})
    assert res.status_code == 404


def test_similar_prefix_is_not_protected(client) -> None:
    assert client.get("/tasksx").status_code == 404


def test_unconfigured_server_key_on_unknown_sub_path(client, monkeypatch) -> None:
    monkeypatch.delenv("API_KEY")
    res = client.get("/goals/1/extra", headers={"Authorization": TEST_API_KEY})
    assert res.status_code == 500
    assert res.json()["message"] == MISCONFIGURED_MESSAGE


def test_is_protected_path() -> None:
    prefixes = ("/tasks", "/goals")
    assert is_protected_path("/tasks", prefixes)
    assert is_protected_path("/goals/7", prefixes)
    assert not is_protected_path("/", prefixes)
    assert not is_protected_path("/tasksx", prefixes)
    assert not is_protected_path("/users", prefixes)
