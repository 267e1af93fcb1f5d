from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
    rule_violation_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...engine.errors import RuleViolation
from ...engine.game import GameState
from ...engine.fen import parse_fen
from ...engine.move import parse_uci, str_to_square
from ...engine.perft import perft as perft_nodes
from ...engine.pieces import Piece
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)

MAX_PERFT_DEPTH = 4


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: str = Field(..., description="Move in long algebraic form, e.g., e2e4")


class PerftRequest(BaseModel):
    fen: str = Field(..., description="FEN string")
    depth: int = Field(default=1, ge=0, le=MAX_PERFT_DEPTH)


class PieceModel(BaseModel):
    kind: str
    color: str

    @classmethod
    def of(cls, piece: Piece) -> "PieceModel":
        return cls(kind=piece.kind.value, color=piece.color.value)


class GameStateModel(BaseModel):
    game_id: str
    fen: str
    side_to_move: str
    status: str
    in_check: bool
    legal_moves: List[str]
    captured: Dict[str, List[PieceModel]]
    board: str


class SelectResponse(BaseModel):
    square: str
    destinations: List[str]


class MoveResponse(BaseModel):
    applied: bool
    move: str
    captured: Optional[PieceModel]
    is_castle: bool
    status: str
    state: GameStateModel


def create_app() -> FastAPI:
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    # Basic logging setup
    logging.basicConfig(level=logging.INFO)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(RuleViolation, rule_violation_handler)
    app.add_exception_handler(Exception, exception_handler)

    # In-memory session store for games
    store = InMemorySessionStore()
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game_id = store.create(GameState.new())
        game = _require_game(store, game_id)
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameStateModel)
    async def get_state(game_id: str) -> GameStateModel:
        game = _require_game(store, game_id)
        with store.lock:
            return _state_model(game_id, game)

    @app.post("/api/games/{game_id}/position", response_model=GameStateModel)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameStateModel:
        _require_game(store, game_id)
        game = GameState.from_fen(req.fen)
        store.set(game_id, game)
        return _state_model(game_id, game)

    @app.get("/api/games/{game_id}/select/{square}", response_model=SelectResponse)
    async def select(game_id: str, square: str) -> SelectResponse:
        game = _require_game(store, game_id)
        sq = str_to_square(square)
        with store.lock:
            destinations = sorted(str(s) for s in game.select_piece(sq))
        return SelectResponse(square=str(sq), destinations=destinations)

    @app.post("/api/games/{game_id}/move", response_model=MoveResponse)
    async def make_move(game_id: str, req: MoveRequest) -> MoveResponse:
        game = _require_game(store, game_id)
        mv = parse_uci(req.move)
        with store.lock:
            result = game.apply_move(mv)
            return MoveResponse(
                applied=result.applied,
                move=mv.to_uci(),
                captured=PieceModel.of(result.captured) if result.captured else None,
                is_castle=result.is_castle,
                status=result.status.value,
                state=_state_model(game_id, game),
            )

    @app.delete("/api/games/{game_id}", status_code=204)
    async def delete_game(game_id: str) -> Response:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return Response(status_code=204)

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, int]:
        pos, side, _, _ = parse_fen(req.fen)
        return {"nodes": perft_nodes(pos, side, req.depth), "depth": req.depth}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> GameState:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _state_model(game_id: str, game: GameState) -> GameStateModel:
    return GameStateModel(
        game_id=game_id,
        fen=game.to_fen(),
        side_to_move=game.side_to_move.value,
        status=game.status.value,
        in_check=game.in_check(),
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        captured={
            color.value: [PieceModel.of(p) for p in pieces]
            for color, pieces in game.captured.items()
        },
        board=game.position.render(),
    )


# Default app for non-factory servers
app = create_app()
