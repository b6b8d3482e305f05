"""Zobrist hashing and a transposition table for tic-tac-toe positions.

This module provides two main classes:

- Zobrist: random keys for every (cell, mark) pair plus one key for the side
  to move. Keys are drawn from a ``random.Random`` seeded with 0 unless a
  seed is given, so every table built for a size hashes the same way.

- TranspositionTable: a thread-safe dict keyed by zobrist keys. Each entry
  keeps the board key for collision detection and the exact minimax value of
  the position for the mover stored with it.

A table is only meaningful for one maximizing side, so the search engine
creates a fresh one for each root call and drops it afterwards.

Usage (example):

    tt = TranspositionTable(board.size)
    tt.store(board, Player.O, value=0)
    entry = tt.get(board, Player.O)
    if entry is not None:
        print(entry.key, entry.value)
"""
from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from tictactoe.core.board import Board, Player


@dataclass
class TTEntry:
    key: str
    mover: Player
    value: int

    def __iter__(self):
        return iter((self.key, self.mover, self.value))


class Zobrist:
    def __init__(self, size: int, rng: Optional[random.Random] = None):
        rng = rng or random.Random(0)
        self.size = size
        self.table: Dict[Player, List[int]] = {
            p: [rng.getrandbits(64) for _ in range(size * size)] for p in Player
        }
        self.side = rng.getrandbits(64)

    def hash(self, board: Board, mover: Player) -> int:
        h = 0
        n = self.size
        for r, row in enumerate(board.cells):
            for c, cell in enumerate(row):
                if cell is not None:
                    h ^= self.table[cell][r * n + c]
        # side: xor when O to move (convention)
        if mover is Player.O:
            h ^= self.side
        return h


class TranspositionTable:
    """Thread-safe table of exact position values.

    Methods:
      - get(board, mover) -> Optional[TTEntry]
      - store(board, mover, value)
      - clear()
      - key(board, mover) -> int  (zobrist key)
    """

    def __init__(self, size: int, seed: int = 0):
        self.z = Zobrist(size, random.Random(seed))
        self._table: Dict[int, TTEntry] = {}
        self._lock = threading.Lock()

    def key(self, board: Board, mover: Player) -> int:
        return self.z.hash(board, mover)

    def get(self, board: Board, mover: Player) -> Optional[TTEntry]:
        k = self.key(board, mover)
        with self._lock:
            entry = self._table.get(k)
        if entry is None:
            return None
        # verify board to avoid rare collisions
        if entry.key != board.key() or entry.mover is not mover:
            return None
        return entry

    def store(self, board: Board, mover: Player, value: int):
        k = self.key(board, mover)
        entry = TTEntry(board.key(), mover, value)
        with self._lock:
            self._table[k] = entry

    def clear(self):
        with self._lock:
            self._table.clear()

    def __len__(self):
        with self._lock:
            return len(self._table)
