"""
Cell module for Minesweeper game.

Represents individual cells on the game board: their position,
content (mine/number) and visual state (hidden/visible/flagged).
"""
from dataclasses import dataclass
from typing import Union


# ============================================================================
# Constants
# ============================================================================

# Symbol reported for a mine in place of its number
MINE = "X"

# Any raw value at or above this threshold encodes a mine
MINE_THRESHOLD = 10

CellValue = Union[int, str]


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        x: Column of the cell.
        y: Row of the cell.
        raw: Stored number. Counts adjacent mines (0-8), or marks the
            cell as a mine once it reaches MINE_THRESHOLD.
        is_visible: Whether the cell has been revealed.
        is_flagged: Whether the player has flagged the cell.
    """

    x: int
    y: int
    raw: int = 0
    is_visible: bool = False
    is_flagged: bool = False

    @property
    def is_mine(self) -> bool:
        """Check if cell holds a mine."""
        return self.raw >= MINE_THRESHOLD

    @property
    def value(self) -> CellValue:
        """Adjacent mine count, or MINE for a mine cell."""
        return MINE if self.is_mine else self.raw

    @value.setter
    def value(self, value: int) -> None:
        self.raw = value

    def increment(self) -> None:
        """Add one to the stored number."""
        self.raw += 1

    def decrement(self) -> None:
        """Subtract one from the stored number unless the cell is a mine."""
        if not self.is_mine:
            self.raw -= 1

    def toggle_flag(self) -> bool:
        """
        Switch the flag on or off.

        Returns:
            The new flag state.
        """
        self.is_flagged = not self.is_flagged
        return self.is_flagged

    @property
    def is_clickable(self) -> bool:
        """Neither flagged nor visible."""
        return not self.is_flagged and not self.is_visible

    def to_observation(self) -> int:
        """
        Convert cell to observation value for an agent.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        if not self.is_visible:
            return -2 if self.is_flagged else -1
        if self.is_mine:
            return 9
        return self.raw
