from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from chessrules.engine.errors import EngineTerminal, IllegalMove
from chessrules.protocol.http.app import create_app


def test_error_envelope_for_http_exception() -> None:
    app: FastAPI = create_app()

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    body = r.json()
    assert "error" in body
    err = body["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"]
    assert err["request_id"] == r.headers["x-request-id"]


def test_rule_violations_keep_their_code() -> None:
    app: FastAPI = create_app()

    @app.get("/illegal")
    def illegal():  # type: ignore[no-redef]
        raise IllegalMove("illegal move e2e5")

    @app.get("/over")
    def over():  # type: ignore[no-redef]
        raise EngineTerminal("game is over (checkmate)")

    client = TestClient(app)
    r = client.get("/illegal")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "illegal_move"
    assert r.json()["error"]["message"] == "illegal move e2e5"

    r = client.get("/over")
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "engine_terminal"


def test_unhandled_exception_becomes_internal_error() -> None:
    app: FastAPI = create_app()

    @app.get("/crash")
    def crash():  # type: ignore[no-redef]
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    r = client.get("/crash")
    assert r.status_code == 500
    err = r.json()["error"]
    assert err["code"] == "internal_error"
    assert err["type"] == "server_error"
    assert "kaboom" not in err["message"]
