"""FastAPI REST interface for the engine."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional

from tictactoe.config import CONFIG, configure_logging
from tictactoe.core.board import Board, InvalidBoardError, Player
from tictactoe.core.evaluator import Evaluator, NotTerminalError
from tictactoe.core.search import compute_best_move, compute_hint
from tictactoe.game import Game, GameMode, GameOverError, IllegalMoveError

configure_logging()

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared game instance (keeps the tally across requests).
game = Game()
_game_lock = threading.Lock()


class NewGameRequest(BaseModel):
    mode: Optional[str] = None
    difficulty: Optional[str] = None
    grid_size: Optional[int] = None


class MoveRequest(BaseModel):
    row: int
    col: int


class PositionRequest(BaseModel):
    board: List[List[Optional[str]]] = Field(..., description='Rows of "X", "O" or null')
    player: str = "O"


@app.get("/board")
def get_board():
    with _game_lock:
        return game.state()


@app.post("/new")
def new_game(req: NewGameRequest = NewGameRequest()):
    global game
    with _game_lock:
        try:
            game = Game(
                mode=game.mode if req.mode is None else req.mode,
                difficulty=game.difficulty if req.difficulty is None else req.difficulty,
                grid_size=game.grid_size if req.grid_size is None else req.grid_size,
                scoreboard=game.scoreboard,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return game.state()


@app.post("/move")
def make_move(req: MoveRequest):
    """Play for the side to move; in PVM the machine answers straight away."""
    with _game_lock:
        try:
            game.play(req.row, req.col)
            reply = None
            if game.mode is GameMode.PVM and not game.is_over:
                reply = game.machine_move()
        except (GameOverError, IllegalMoveError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        state = game.state()
        state["reply"] = list(reply) if reply else None
        return state


@app.post("/hint")
def get_hint():
    with _game_lock:
        if game.is_over:
            raise HTTPException(status_code=400, detail="Game is already over")
        cell = game.hint()
        return {"hint": list(cell) if cell else None, "player": game.current.value}


@app.post("/reset")
def reset_board():
    with _game_lock:
        game.new_game()
        return game.state()


def _parse_position(req: PositionRequest):
    try:
        return Board.from_rows(req.board), Player.parse(req.player)
    except InvalidBoardError as e:
        raise HTTPException(status_code=400, detail=f"Invalid position: {e}")


@app.post("/best-move")
def best_move(req: PositionRequest):
    """Stateless search on an arbitrary position."""
    board, player = _parse_position(req)
    cell = compute_best_move(board, player, board.size)
    return {"move": list(cell) if cell else None, "player": player.value}


@app.post("/suggest")
def suggest(req: PositionRequest):
    board, player = _parse_position(req)
    cell = compute_hint(board, player, board.size)
    return {"hint": list(cell) if cell else None, "player": player.value}


@app.post("/classify")
def classify(req: PositionRequest):
    board, player = _parse_position(req)
    evaluator = Evaluator()
    try:
        outcome = evaluator.classify(board, player)
    except NotTerminalError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"outcome": outcome.name, "score": int(outcome), "player": player.value}
