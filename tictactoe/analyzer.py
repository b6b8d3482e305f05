# tictactoe/analyzer.py
import logging
from typing import Any, Dict, List, Optional, Sequence

from tictactoe.config import CONFIG
from tictactoe.core.board import Board, Cell, InvalidBoardError, Player
from tictactoe.core.search import SearchEngine

logger = logging.getLogger(__name__)

# labels by how many outcome steps (win -> tie -> loss) the move gives away
LABELS = {0: "Best move", 1: "Mistake", 2: "Blunder"}


class Analyzer:
    def __init__(self, search_engine: Optional[SearchEngine] = None):
        self.search_engine = search_engine or SearchEngine()

    def _value_after(self, board: Board, player: Player, cell: Cell) -> int:
        """Game-theoretic value for ``player`` after playing ``cell``."""
        with board.placed(cell, player):
            return self.search_engine.search(board, player.opponent, maximizer=player).score

    def classify_move(self, board: Board, player: Player, cell: Cell) -> Dict[str, Any]:
        """
        Classify a single move.
        - board: position BEFORE the move (unchanged by this function).
        - player: the side making the move.
        - cell: the chosen (row, col).
        Returns a dict with label, values and the engine's preferred cell.
        """
        if board.size > CONFIG.search.exhaustive_threshold:
            raise InvalidBoardError(f"Move review needs exhaustive search; {board.size}x{board.size} is too large")
        player = Player.parse(player)
        if self.search_engine.evaluator.is_terminal(board):
            raise InvalidBoardError("Game is already over")
        if board.get(cell) is not None:
            raise InvalidBoardError(f"Cell {cell} is already occupied")

        best = self.search_engine.search(board, player, maximizer=player)
        played_value = self._value_after(board, player, cell)

        with board.placed(cell, player):
            wins_now = self.search_engine.evaluator.has_line(player, board)

        loss = best.score - played_value
        if wins_now:
            label = "Winning move"
        else:
            label = LABELS[loss]

        return {
            "player": player.value,
            "move": list(cell),
            "best_move": list(best.move) if best.move else None,
            "best_value": best.score,
            "played_value": played_value,
            "delta_vs_best": loss,
            "label": label,
        }

    def analyze_game(self, moves: Sequence[Cell], size: int = 3) -> List[Dict[str, Any]]:
        """
        Replay ``moves`` from an empty board, X first, labelling each one.
        Stops at the end of the game; moves after it are rejected.
        """
        board = Board(size)
        evaluator = self.search_engine.evaluator
        player = Player.X
        report = []
        for cell in moves:
            cell = tuple(cell)
            if evaluator.is_terminal(board):
                raise InvalidBoardError(f"Move {cell} played after the game ended")
            report.append(self.classify_move(board, player, cell))
            board.place(cell, player)
            player = player.opponent
        logger.debug("Analyzed %d moves", len(report))
        return report
