from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, cast

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, model_validator
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import (
    MoveRejectedError,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import GameSession, InMemorySessionStore
from ...engine.board import Board
from ...engine.game import Game
from ...engine.perft import perft as perft_nodes


logger = logging.getLogger(__name__)


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    """Either ``notation`` or an external index pair (a8 = 0 .. h1 = 63)."""

    notation: Optional[str] = Field(default=None, description="SAN or coordinate move, e.g. Nf3")
    from_sq: Optional[int] = Field(default=None, description="Origin index, a8 = 0 .. h1 = 63")
    to_sq: Optional[int] = Field(default=None, description="Destination index, a8 = 0 .. h1 = 63")
    promotion: Optional[str] = Field(default=None, description="q, r, b or n")

    @model_validator(mode="after")
    def _exactly_one_form(self) -> "MoveRequest":
        has_index = self.from_sq is not None or self.to_sq is not None
        if self.notation is not None and has_index:
            raise ValueError("give either notation or from_sq/to_sq, not both")
        if self.notation is None and (self.from_sq is None or self.to_sq is None):
            raise ValueError("give notation, or both from_sq and to_sq")
        return self


class PerftRequest(BaseModel):
    fen: str = Field(..., description="FEN string")
    depth: int = Field(default=1, ge=0, le=5)


class GameState(BaseModel):
    game_id: str
    fen: str
    board: List[Tuple[int, int]]
    side_to_move: str
    legal_moves: List[str]
    in_check: bool
    checkmate: bool
    stalemate: bool
    game_over: bool
    last_move: Optional[str]
    move_history: List[str]


def create_app(log_level: str = "INFO") -> FastAPI:
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    logging.basicConfig(level=log_level.upper())

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    app.state.sessions = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=GameState)
    async def create_game() -> GameState:
        game_id = store.create(Game.new())
        session = _require_session(store, game_id)
        logger.info("game created", extra={"game_id": game_id})
        with session.lock:
            return _state(game_id, session.game)

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        session = _require_session(store, game_id)
        with session.lock:
            return _state(game_id, session.game)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        session = _require_session(store, game_id)
        with session.lock:
            game = session.game
            if req.notation is not None:
                accepted = game.move_by_algebraic(req.notation)
            else:
                accepted = game.move_by_index(
                    cast(int, req.from_sq), cast(int, req.to_sq), req.promotion
                )
            if not accepted:
                reason = game.last_rejection
                label = reason.value if reason else "rejected"
                raise MoveRejectedError(reason, f"illegal move ({label})")
            return _state(game_id, game)

    @app.post("/api/games/{game_id}/reset", response_model=GameState)
    async def reset(game_id: str) -> GameState:
        session = _require_session(store, game_id)
        with session.lock:
            session.game.reset()
            return _state(game_id, session.game)

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        session = _require_session(store, game_id)
        try:
            game = Game.from_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"invalid FEN: {e}")
        with session.lock:
            session.game = game
            return _state(game_id, game)

    @app.get("/api/games/{game_id}/render")
    async def render(game_id: str) -> Dict[str, str]:
        session = _require_session(store, game_id)
        with session.lock:
            return {"text": session.game.render()}

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"deleted": game_id}

    # CPU-bound: a plain def runs in the threadpool.
    @app.post("/api/perft")
    def perft(req: PerftRequest) -> Dict[str, int]:
        try:
            board = Board.from_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"invalid FEN: {e}")
        return {"nodes": perft_nodes(board, req.depth)}

    return app


def _require_session(store: InMemorySessionStore, game_id: str) -> GameSession:
    session = store.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _state(game_id: str, game: Game) -> GameState:
    history = list(game.history)
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        board=list(game.get_board()),
        side_to_move=game.side_to_move.name.lower(),
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        in_check=game.in_check(),
        checkmate=game.checkmate(),
        stalemate=game.stalemate(),
        game_over=game.game_over,
        last_move=history[-1] if history else None,
        move_history=history,
    )


# Default app for non-factory servers
app = create_app()
