"""Game session: turn order, machine opponent, hints and a running tally."""

import logging
import random
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from tictactoe.config import CONFIG, GRID_SIZES
from tictactoe.core.board import Board, Cell, Player
from tictactoe.core.evaluator import Outcome
from tictactoe.core.search import SearchEngine, compute_best_move, compute_hint, random_move

logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    PVM = "PVM"
    PVP = "PVP"


class Difficulty(str, Enum):
    EASY = "Easy"
    HARD = "Hard"


class GameOverError(ValueError):
    pass


class IllegalMoveError(ValueError):
    pass


@dataclass
class Scoreboard:
    """Results since the session started. In PVP, wins/losses are X/O wins."""
    wins: int = 0
    losses: int = 0
    ties: int = 0

    def record(self, winner: Optional[Player]):
        if winner is Player.X:
            self.wins += 1
        elif winner is Player.O:
            self.losses += 1
        else:
            self.ties += 1


@dataclass
class MoveRecord:
    player: Player
    cell: Cell


@dataclass
class Game:
    mode: GameMode = None
    difficulty: Difficulty = None
    grid_size: int = None
    rng: random.Random = None
    engine: SearchEngine = None
    scoreboard: Scoreboard = field(default_factory=Scoreboard)

    # In PVM the human is X and always moves first.
    HUMAN = Player.X
    MACHINE = Player.O

    def __post_init__(self):
        cfg = CONFIG.game
        self.mode = GameMode(cfg.mode if self.mode is None else self.mode)
        self.difficulty = Difficulty(cfg.difficulty if self.difficulty is None else self.difficulty)
        self.grid_size = cfg.grid_size if self.grid_size is None else self.grid_size
        if self.grid_size not in GRID_SIZES:
            raise ValueError(f"Grid size must be one of {GRID_SIZES}, got {self.grid_size}")
        self.rng = self.rng or random.Random(cfg.seed)
        self.engine = self.engine or SearchEngine()
        self.new_game()

    def new_game(self):
        self.board = Board(self.grid_size)
        self.current = Player.X
        self.history: List[MoveRecord] = []
        logger.info("New %s game, %s, %dx%d", self.mode.value, self.difficulty.value,
                    self.grid_size, self.grid_size)

    @property
    def evaluator(self):
        return self.engine.evaluator

    @property
    def is_over(self) -> bool:
        return self.evaluator.is_terminal(self.board)

    @property
    def winner(self) -> Optional[Player]:
        return self.evaluator.winner(self.board)

    def outcome_for(self, player: Player) -> Optional[Outcome]:
        if not self.is_over:
            return None
        return self.evaluator.classify(self.board, player)

    @property
    def status(self) -> str:
        if not self.is_over:
            return f"Player {self.current.value}'s turn"
        winner = self.winner
        if winner is None:
            return "It's a tie!"
        if self.mode is GameMode.PVM:
            return "You win!" if winner is self.HUMAN else "You lose, machine wins!"
        return f"Player {winner.value} wins!"

    def _apply(self, cell: Cell):
        player = self.current
        self.board.place(cell, player)
        self.history.append(MoveRecord(player, cell))
        logger.info("%s plays %s", player.value, cell)
        if self.is_over:
            self.scoreboard.record(self.winner)
            logger.info(self.status)
        else:
            self.current = player.opponent

    def play(self, row: int, col: int):
        """Human move for whoever's turn it is (only X's turn in PVM)."""
        if self.is_over:
            raise GameOverError("Game is already over")
        if self.mode is GameMode.PVM and self.current is not self.HUMAN:
            raise IllegalMoveError("It's the machine's turn")
        if not (0 <= row < self.grid_size and 0 <= col < self.grid_size):
            raise IllegalMoveError(f"Invalid position ({row}, {col})")
        if self.board.get((row, col)) is not None:
            raise IllegalMoveError(f"Cell ({row}, {col}) is already occupied")
        self._apply((row, col))

    def machine_move(self) -> Cell:
        """Easy plays at random; Hard searches when the board is small enough."""
        if self.mode is not GameMode.PVM:
            raise IllegalMoveError("There is no machine player in PVP mode")
        if self.is_over:
            raise GameOverError("Game is already over")
        if self.current is not self.MACHINE:
            raise IllegalMoveError("It's the human's turn")

        if self.difficulty is Difficulty.EASY:
            cell = random_move(self.board, self.rng)
        else:
            cell = compute_best_move(self.board, self.MACHINE, self.grid_size,
                                     rng=self.rng, engine=self.engine)
        self._apply(cell)
        return cell

    def hint(self) -> Optional[Cell]:
        """Suggested cell for the side to move; nothing is played."""
        if self.is_over:
            return None
        return compute_hint(self.board, self.current, self.grid_size,
                            rng=self.rng, engine=self.engine)

    def state(self) -> Dict[str, Any]:
        winner = self.winner
        line = self.evaluator.winning_line(winner, self.board) if winner else None
        return {
            "board": self.board.rows(),
            "size": self.grid_size,
            "mode": self.mode.value,
            "difficulty": self.difficulty.value,
            "turn": self.current.value,
            "is_over": self.is_over,
            "winner": winner.value if winner else None,
            "winning_line": [list(c) for c in line] if line else None,
            "status": self.status,
            "history": [[m.player.value, list(m.cell)] for m in self.history],
            "scoreboard": asdict(self.scoreboard),
        }
