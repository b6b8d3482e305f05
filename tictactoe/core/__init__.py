"""Core engine components: board, evaluator, search, and transposition table."""

from .board import Board, Cell, InvalidBoardError, Player
from .evaluator import Evaluator, NotTerminalError, Outcome
from .search import SearchEngine, SearchResult, compute_best_move, compute_hint, random_move
from .transposition import TranspositionTable
