"""N x N grid of marks with place/clear primitives and row-major move listing."""

from collections import abc
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

Cell = Tuple[int, int]

MIN_SIZE = 3
EMPTY_SYMBOLS = (" ", "_", ".", "-")


class InvalidBoardError(ValueError):
    """Malformed board shape, unknown cell symbol, or illegal placement."""


class Player(str, Enum):
    X = "X"
    O = "O"

    @property
    def opponent(self) -> "Player":
        return Player.O if self is Player.X else Player.X

    @classmethod
    def parse(cls, value) -> "Player":
        """Accept a Player or its symbol (case-insensitive)."""
        if isinstance(value, Player):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise InvalidBoardError(f"Unknown player: {value!r}") from None


def _parse_cell(value) -> Optional[Player]:
    if value is None or isinstance(value, Player):
        return value
    if isinstance(value, str):
        if value in EMPTY_SYMBOLS or value == "":
            return None
        if value.upper() in ("X", "O"):
            return Player(value.upper())
    raise InvalidBoardError(f"Unknown cell value: {value!r}")


class Board:
    def __init__(self, size: int = 3):
        """Empty size x size board."""
        if not isinstance(size, int) or size < MIN_SIZE:
            raise InvalidBoardError(f"Board size must be an integer >= {MIN_SIZE}, got {size!r}")
        self.size = size
        self.cells: List[List[Optional[Player]]] = [[None] * size for _ in range(size)]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence]) -> "Board":
        """Build from a square matrix of Player / "X" / "O" / None / "_" values.

        Rejects ragged or non-square input before anything is evaluated.
        """
        if isinstance(rows, str) or not isinstance(rows, abc.Sequence):
            raise InvalidBoardError(f"Expected a sequence of rows, got {type(rows).__name__}")
        n = len(rows)
        if n < MIN_SIZE:
            raise InvalidBoardError(f"Board needs at least {MIN_SIZE} rows, got {n}")
        for i, row in enumerate(rows):
            if isinstance(row, str) or not isinstance(row, abc.Sequence):
                raise InvalidBoardError(f"Row {i} is not a sequence")
            if len(row) != n:
                raise InvalidBoardError(f"Row {i} has {len(row)} cells, expected {n}")
        board = cls(n)
        board.cells = [[_parse_cell(v) for v in row] for row in rows]
        return board

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """Parse rows separated by '/' or newlines, e.g. "XX_/OO_/___"."""
        lines = [ln.strip() for ln in text.replace("/", "\n").splitlines() if ln.strip()]
        return cls.from_rows([list(ln) for ln in lines])

    def copy(self) -> "Board":
        b = Board(self.size)
        b.cells = [row[:] for row in self.cells]
        return b

    def rows(self) -> List[List[Optional[str]]]:
        """Plain symbols, None for empty."""
        return [[c.value if c else None for c in row] for row in self.cells]

    def _check_cell(self, cell: Cell):
        r, c = cell
        if not (0 <= r < self.size and 0 <= c < self.size):
            raise InvalidBoardError(f"Cell {cell} is outside a {self.size}x{self.size} board")

    def get(self, cell: Cell) -> Optional[Player]:
        self._check_cell(cell)
        return self.cells[cell[0]][cell[1]]

    def place(self, cell: Cell, player: Player):
        """Put a mark on an empty cell."""
        self._check_cell(cell)
        r, c = cell
        if self.cells[r][c] is not None:
            raise InvalidBoardError(f"Cell {cell} is already occupied by {self.cells[r][c].value}")
        self.cells[r][c] = player

    def clear(self, cell: Cell):
        """Remove the mark from an occupied cell."""
        self._check_cell(cell)
        r, c = cell
        if self.cells[r][c] is None:
            raise InvalidBoardError(f"Cell {cell} is already empty")
        self.cells[r][c] = None

    @contextmanager
    def placed(self, cell: Cell, player: Player) -> Iterator["Board"]:
        """Place a mark for the duration of the block; undone on every exit path."""
        self.place(cell, player)
        try:
            yield self
        finally:
            self.clear(cell)

    def empty_cells(self) -> List[Cell]:
        """Empty cells in row-major order."""
        return [
            (r, c)
            for r in range(self.size)
            for c in range(self.size)
            if self.cells[r][c] is None
        ]

    def is_full(self) -> bool:
        return all(cell is not None for row in self.cells for cell in row)

    def count(self, player: Player) -> int:
        return sum(1 for row in self.cells for cell in row if cell is player)

    def key(self) -> str:
        """Compact row-major string, '_' for empty."""
        return "".join(c.value if c else "_" for row in self.cells for c in row)

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self):
        return f"Board.from_string({'/'.join(self.key()[i:i + self.size] for i in range(0, self.size ** 2, self.size))!r})"

    def __str__(self):
        sep = "\n" + "+".join(["---"] * self.size) + "\n"
        return sep.join(
            "|".join(f" {c.value if c else ' '} " for c in row) for row in self.cells
        )
