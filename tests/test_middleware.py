"""Tests for request ids, error rendering and the access log helpers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from relief_api.exceptions import DisasterNotFoundError
from relief_api.middleware import ErrorHandlerMiddleware, register_exception_handlers
from relief_api.middleware.request_logging import disaster_id_from_path


@pytest.fixture
def client():
    app = FastAPI()
    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    @app.get("/disasters/{disaster_id}")
    async def missing(disaster_id: str):
        raise DisasterNotFoundError(disaster_id)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.get("/ok")
    async def ok():
        return {"ok": True}

    return TestClient(app, raise_server_exceptions=False)


def test_domain_error_shape(client):
    response = client.get("/disasters/d-9")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] is True
    assert body["code"] == "DISASTER_NOT_FOUND"
    assert body["details"] == {"disaster_id": "d-9"}
    assert body["request_id"] == response.headers["X-Request-ID"]


def test_unexpected_error_hides_message(client):
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
    assert "secret" not in response.text


def test_well_formed_client_request_id_is_echoed(client):
    response = client.get("/ok", headers={"X-Request-ID": "trace-abc12345"})

    assert response.headers["X-Request-ID"] == "trace-abc12345"


def test_malformed_client_request_id_is_replaced(client):
    response = client.get("/ok", headers={"X-Request-ID": "bad id!"})

    assert response.headers["X-Request-ID"].startswith("req_")


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/disasters/abc", "abc"),
        ("/disasters/abc/resources", "abc"),
        ("/disasters", None),
        ("/geocode", None),
    ],
)
def test_disaster_id_from_path(path, expected):
    assert disaster_id_from_path(path) == expected
