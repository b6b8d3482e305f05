"""Tic-tac-toe engine: exhaustive adversarial search for N x N grids."""

__version__ = "1.0.0"
