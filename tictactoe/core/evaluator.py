from enum import Enum
from typing import Dict, List, Optional

from tictactoe.core.board import Board, Cell, Player


class NotTerminalError(ValueError):
    """Raised when an outcome is requested for a game still in progress."""


class Outcome(int, Enum):
    WIN = 1
    TIE = 0
    LOSS = -1


class Evaluator:
    """Terminal-state detection and classification for N x N boards.

    Only full rows, full columns and the two full diagonals count as lines,
    2 * N + 2 candidates in total. The evaluator never mutates the board.
    """

    def __init__(self):
        self._lines: Dict[int, List[List[Cell]]] = {}

    def lines(self, size: int) -> List[List[Cell]]:
        if size in self._lines:
            return self._lines[size]
        rows = [[(r, c) for c in range(size)] for r in range(size)]
        cols = [[(r, c) for r in range(size)] for c in range(size)]
        diag = [(i, i) for i in range(size)]
        anti = [(i, size - 1 - i) for i in range(size)]
        self._lines[size] = rows + cols + [diag, anti]
        return self._lines[size]

    def winning_line(self, player: Player, board: Board) -> Optional[List[Cell]]:
        cells = board.cells
        for line in self.lines(board.size):
            if all(cells[r][c] is player for r, c in line):
                return line
        return None

    def has_line(self, player: Player, board: Board) -> bool:
        return self.winning_line(player, board) is not None

    def is_terminal(self, board: Board) -> bool:
        if self.has_line(Player.X, board) or self.has_line(Player.O, board):
            return True
        return board.is_full()

    def winner(self, board: Board) -> Optional[Player]:
        """X is checked first; both holding a line is unreachable in play."""
        for player in (Player.X, Player.O):
            if self.has_line(player, board):
                return player
        return None

    def classify(self, board: Board, reference: Player) -> Outcome:
        if not self.is_terminal(board):
            raise NotTerminalError("classify() requires a finished game")
        # reference player's line wins if both somehow have one
        if self.has_line(reference, board):
            return Outcome.WIN
        if self.has_line(reference.opponent, board):
            return Outcome.LOSS
        return Outcome.TIE
