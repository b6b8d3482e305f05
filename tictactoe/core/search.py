import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from tictactoe.config import CONFIG
from tictactoe.core.board import Board, Cell, InvalidBoardError, Player
from tictactoe.core.evaluator import Evaluator, Outcome
from tictactoe.core.transposition import TranspositionTable
from tictactoe.core.utils import format_info

logger = logging.getLogger(__name__)

# scores are Outcome values in [-1, 1]
INF = 2

BoardLike = Union[Board, Sequence[Sequence]]


@dataclass
class SearchResult:
    score: int
    move: Optional[Cell]
    nodes: int = 0


class _Search:
    """State of one root invocation: the maximizing side, node count and table.

    Depth is tracked but never weighs the score: a win at depth 9 is worth
    the same +1 as a win at depth 1.
    """

    def __init__(self, evaluator: Evaluator, maximizer: Player, pruning: bool,
                 tt: Optional[TranspositionTable]):
        self.evaluator = evaluator
        self.maximizer = maximizer
        self.pruning = pruning
        self.tt = tt
        self.nodes = 0

    def minimax(self, board: Board, mover: Player, depth: int,
                alpha: int, beta: int) -> Tuple[int, Optional[Cell]]:
        self.nodes += 1
        if self.evaluator.is_terminal(board):
            return int(self.evaluator.classify(board, self.maximizer)), None

        if depth > 0 and self.tt is not None:
            entry = self.tt.get(board, mover)
            if entry is not None:
                return entry.value, None

        alpha_orig, beta_orig = alpha, beta
        maximizing = mover is self.maximizer
        best = -INF if maximizing else INF
        best_move = None

        for cell in board.empty_cells():
            with board.placed(cell, mover):
                score, _ = self.minimax(board, mover.opponent, depth + 1, alpha, beta)

            # strict comparison: the earliest cell in row-major order keeps ties
            if maximizing:
                if score > best:
                    best, best_move = score, cell
                if self.pruning:
                    alpha = max(alpha, best)
                    if alpha >= beta or best == Outcome.WIN:
                        break
            else:
                if score < best:
                    best, best_move = score, cell
                if self.pruning:
                    beta = min(beta, best)
                    if alpha >= beta or best == Outcome.LOSS:
                        break

        # fail-soft: values inside the original window are exact
        if self.tt is not None and alpha_orig < best < beta_orig:
            self.tt.store(board, mover, best)
        return best, best_move


class SearchEngine:
    """Exhaustive minimax over every empty cell, alternating max/min roles.

    The engine keeps no state between calls. The caller's board is mutated
    only through scoped place/undo pairs and is identical afterwards.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None,
                 use_pruning: Optional[bool] = None,
                 use_transposition: Optional[bool] = None,
                 threads: Optional[int] = None):
        cfg = CONFIG.search
        self.evaluator = evaluator or Evaluator()
        self.use_pruning = cfg.use_pruning if use_pruning is None else use_pruning
        self.use_transposition = cfg.use_transposition if use_transposition is None else use_transposition
        self.threads = cfg.threads if threads is None else threads

    def _new_search(self, board: Board, maximizer: Player) -> _Search:
        tt = TranspositionTable(board.size) if self.use_transposition else None
        return _Search(self.evaluator, maximizer, self.use_pruning, tt)

    def search(self, board: Board, mover: Player, maximizer: Optional[Player] = None) -> SearchResult:
        """Value of the position for ``maximizer`` with ``mover`` to play.

        ``move`` is None when the board is already terminal.
        """
        _check_board(board)
        mover = Player.parse(mover)
        maximizer = mover if maximizer is None else Player.parse(maximizer)
        start = time.time()

        if self.threads > 1 and not self.evaluator.is_terminal(board):
            result = self._search_parallel(board, mover, maximizer)
        else:
            s = self._new_search(board, maximizer)
            score, move = s.minimax(board, mover, 0, -INF, INF)
            result = SearchResult(score, move, s.nodes)

        logger.debug(format_info(mover, result.score, result.move, result.nodes, time.time() - start))
        return result

    def _search_parallel(self, board: Board, mover: Player, maximizer: Player) -> SearchResult:
        """Each root move searched on a private board copy.

        Results are merged in row-major order, not completion order, so the
        tie-break matches the sequential search.
        """
        def worker(cell: Cell) -> Tuple[int, int]:
            private = board.copy()
            private.place(cell, mover)
            s = self._new_search(private, maximizer)
            score, _ = s.minimax(private, mover.opponent, 1, -INF, INF)
            return score, s.nodes

        cells = board.empty_cells()
        with ThreadPoolExecutor(max_workers=self.threads) as pool:
            results = list(pool.map(worker, cells))

        maximizing = mover is maximizer
        best = -INF if maximizing else INF
        best_move = None
        nodes = 1
        for cell, (score, n) in zip(cells, results):
            nodes += n
            if (maximizing and score > best) or (not maximizing and score < best):
                best, best_move = score, cell
        return SearchResult(best, best_move, nodes)

    def best_move(self, board: Board, mover: Player) -> Optional[Cell]:
        """Cell to play for ``mover``, or None when no move is available."""
        return self.search(board, mover, maximizer=mover).move

    def hint(self, board: Board, for_player: Player) -> Optional[Cell]:
        """Suggested cell for ``for_player``; the board is left as it was."""
        return self.search(board, for_player, maximizer=for_player).move


def _check_board(board):
    if not isinstance(board, Board):
        raise InvalidBoardError(f"Expected a Board, got {type(board).__name__}")
    n = board.size
    if len(board.cells) != n or any(len(row) != n for row in board.cells):
        raise InvalidBoardError(f"Board is not {n}x{n}")


def _as_board(board: BoardLike, size: Optional[int]) -> Board:
    if not isinstance(board, Board):
        board = Board.from_rows(board)
    _check_board(board)
    if size is not None and size != board.size:
        raise InvalidBoardError(f"Size {size} does not match a {board.size}x{board.size} board")
    return board


def random_move(board: Board, rng: random.Random) -> Optional[Cell]:
    """Uniformly random empty cell, or None if the game is over."""
    if Evaluator().is_terminal(board):
        return None
    empty: List[Cell] = board.empty_cells()
    return rng.choice(empty)


def _pick(board: BoardLike, player, size: Optional[int], rng: Optional[random.Random],
          engine: Optional[SearchEngine], threshold: Optional[int]) -> Optional[Cell]:
    board = _as_board(board, size)
    player = Player.parse(player)
    if threshold is None:
        threshold = CONFIG.search.exhaustive_threshold
    if board.size > threshold:
        logger.debug("%dx%d board is above the exhaustive threshold (%d), picking at random",
                     board.size, board.size, threshold)
        return random_move(board, rng or random.Random())
    return (engine or SearchEngine()).search(board, player, maximizer=player).move


def compute_best_move(board: BoardLike, mover, size: Optional[int] = None, *,
                      rng: Optional[random.Random] = None,
                      engine: Optional[SearchEngine] = None,
                      threshold: Optional[int] = None) -> Optional[Cell]:
    """Cell for ``mover`` to play; exhaustive up to the threshold size, random above it."""
    return _pick(board, mover, size, rng, engine, threshold)


def compute_hint(board: BoardLike, for_player, size: Optional[int] = None, *,
                 rng: Optional[random.Random] = None,
                 engine: Optional[SearchEngine] = None,
                 threshold: Optional[int] = None) -> Optional[Cell]:
    """Recommended cell for ``for_player`` without committing it."""
    return _pick(board, for_player, size, rng, engine, threshold)
