# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import main

from .fakes import TEST_API_KEY


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Every test starts from a known environment: memory store, known key,
    production error rendering.
    """
    monkeypatch.setenv("API_KEY", TEST_API_KEY)
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("APP_ENV", "production")
    for name in ("DATABASE_URL", "STATIC_DIR", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def app() -> FastAPI:
    return main.create_app()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    # Entering the client runs the lifespan, which wires the repositories.
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": TEST_API_KEY}


@pytest.fixture()
def new_task() -> dict[str, str]:
    return {"name": "Buy milk", "description": "Go to the store", "dueDate": "2025-12-01"}
