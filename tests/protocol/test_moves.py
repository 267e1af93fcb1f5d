from __future__ import annotations

from fastapi.testclient import TestClient

from chessrules.protocol.http.app import create_app


def _client_and_game() -> tuple[TestClient, str]:
    client = TestClient(create_app())
    game_id = client.post("/api/games").json()["game_id"]
    return client, game_id


def _move(client: TestClient, game_id: str, move: str):
    return client.post(f"/api/games/{game_id}/move", json={"move": move})


def test_select_lists_destinations() -> None:
    client, game_id = _client_and_game()
    r = client.get(f"/api/games/{game_id}/select/g1")
    assert r.status_code == 200
    assert r.json() == {"square": "g1", "destinations": ["f3", "h3"]}

    # Opponent piece and empty square give nothing
    assert client.get(f"/api/games/{game_id}/select/g8").json()["destinations"] == []
    assert client.get(f"/api/games/{game_id}/select/e4").json()["destinations"] == []


def test_select_invalid_square() -> None:
    client, game_id = _client_and_game()
    r = client.get(f"/api/games/{game_id}/select/z9")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "invalid_square"


def test_move_applies_and_returns_state() -> None:
    client, game_id = _client_and_game()
    r = _move(client, game_id, "e2e4")
    assert r.status_code == 200
    body = r.json()
    assert body["applied"] is True
    assert body["move"] == "e2e4"
    assert body["captured"] is None
    assert body["is_castle"] is False
    assert body["status"] == "in_progress"
    assert body["state"]["side_to_move"] == "black"
    assert " b " in body["state"]["fen"]


def test_move_errors() -> None:
    client, game_id = _client_and_game()

    r = _move(client, game_id, "e2e5")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "illegal_move"

    r = _move(client, game_id, "e7e5")
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "not_side_to_move"

    r = _move(client, game_id, "e4e5")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "no_piece_at_square"

    r = _move(client, game_id, "e7e8q")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "invalid_square"

    # Nothing above changed the game
    state = client.get(f"/api/games/{game_id}/state").json()
    assert state["side_to_move"] == "white"


def test_capture_is_reported() -> None:
    client, game_id = _client_and_game()
    for mv in ("e2e4", "d7d5"):
        assert _move(client, game_id, mv).status_code == 200
    body = _move(client, game_id, "e4d5").json()
    assert body["captured"] == {"kind": "pawn", "color": "black"}
    assert body["state"]["captured"]["black"] == [{"kind": "pawn", "color": "black"}]


def test_checkmate_then_terminal_conflict() -> None:
    client, game_id = _client_and_game()
    for mv in ("f2f3", "e7e5", "g2g4"):
        assert _move(client, game_id, mv).status_code == 200
    body = _move(client, game_id, "d8h4").json()
    assert body["status"] == "checkmate"
    assert body["state"]["in_check"] is True
    assert body["state"]["legal_moves"] == []

    r = _move(client, game_id, "a2a3")
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "engine_terminal"


def test_castle_over_http() -> None:
    client, game_id = _client_and_game()
    fen = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
    client.post(f"/api/games/{game_id}/position", json={"fen": fen})
    assert "g1" in client.get(f"/api/games/{game_id}/select/e1").json()["destinations"]
    body = _move(client, game_id, "e1c1").json()
    assert body["is_castle"] is True
    assert body["state"]["fen"].startswith("r3k2r/8/8/8/8/8/8/2KR3R b kq")


def test_perft_endpoint() -> None:
    client = TestClient(create_app())
    start = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
    r = client.post("/api/perft", json={"fen": start, "depth": 2})
    assert r.status_code == 200
    assert r.json() == {"nodes": 400, "depth": 2}

    r_bad = client.post("/api/perft", json={"fen": "bad", "depth": 1})
    assert r_bad.status_code == 400
    assert r_bad.json()["error"]["code"] == "invalid_fen"
    assert client.post("/api/perft", json={"fen": start, "depth": 9}).status_code == 422
