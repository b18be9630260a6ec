"""
Minesweeper game engine.

Provides board management, cell state, outcome records and a
Gymnasium environment wrapper.
"""
from .cell import Cell, MINE
from .outcomes import (
    FlagOutcome,
    Outcome,
    RevealOutcome,
    TerminalOutcome,
    Verdict,
)
from .board import (
    Board,
    BoardConfig,
    GameState,
    OutOfBoundsError,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
)
from .environment import MinesweeperEnv

__all__ = [
    "Cell",
    "MINE",
    "Outcome",
    "RevealOutcome",
    "FlagOutcome",
    "TerminalOutcome",
    "Verdict",
    "Board",
    "BoardConfig",
    "GameState",
    "OutOfBoundsError",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "MinesweeperEnv",
]
