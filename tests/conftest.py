"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path
from typing import Iterable, List

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Board, BoardConfig, Cell


# ============================================================================
# Test Doubles
# ============================================================================

class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedRandom:
    """Random source whose randrange results are given up front."""

    def __init__(self, values: Iterable[int]) -> None:
        self.values: List[int] = list(values)

    def randrange(self, stop: int) -> int:
        value = self.values.pop(0)
        assert 0 <= value < stop
        return value


# ============================================================================
# Invariant Helpers
# ============================================================================

def count_adjacent_mines(board: Board, x: int, y: int) -> int:
    """Mine count around (x, y), computed from the mine positions alone."""
    mines = set(board.mine_positions())
    return sum(
        1
        for nx in range(x - 1, x + 2)
        for ny in range(y - 1, y + 2)
        if (nx, ny) != (x, y) and (nx, ny) in mines
    )


def assert_consistent(board: Board) -> None:
    """Check the board invariants that must hold after any action."""
    mines = board.mine_positions()
    assert len(mines) == board.mine_count
    assert len(set(mines)) == len(mines)

    hidden_safe = 0
    for y in range(board.height):
        for x in range(board.width):
            cell = board.get_cell(x, y)
            if cell.is_mine:
                continue
            assert cell.value == count_adjacent_mines(board, x, y)
            hidden = sum(1 for n in board.neighbors(x, y) if not n.is_visible)
            assert board.edge_count(x, y) == hidden
            if not cell.is_visible:
                hidden_safe += 1
    assert board.squares_left == hidden_safe


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    """A clock starting at zero."""
    return FakeClock()


@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines and a fixed seed."""
    return Board(rng=random.Random(1234))


@pytest.fixture
def empty_board(clock: FakeClock) -> Board:
    """Create a board with no mines for flood testing."""
    return Board(BoardConfig(5, 5, 0), clock=clock)


@pytest.fixture
def center_mine_board(clock: FakeClock) -> Board:
    """3x3 board with its only mine in the middle."""
    return Board.from_layout(["...", ".X.", "..."], clock=clock)


@pytest.fixture
def two_mine_board(clock: FakeClock) -> Board:
    """3x2 board where every free cell touches a mine.

    Values:
        X 2 X
        1 2 1
    """
    return Board.from_layout(["X.X", "..."], clock=clock)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell(0, 0)


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(0, 0, raw=10)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)


# ============================================================================
# Helper Fixtures
# ============================================================================

@pytest.fixture
def check_consistent():
    """Invariant checker for boards."""
    return assert_consistent


@pytest.fixture
def scripted_rng():
    """Factory for random sources with fixed randrange results."""
    return ScriptedRandom
