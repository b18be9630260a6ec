"""
Board module for Minesweeper game.

Implements the game engine: mine placement, cell revealing, flagging,
chord clears and win/lose detection. Every player action returns the
ordered list of outcomes it caused.

Cells live in a flat list indexed by ``y * width + x``; a parallel
``edges`` array holds, for every cell, how many of its neighbors are
still not visible.
"""
import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .cell import Cell, MINE, MINE_THRESHOLD
from .outcomes import (
    FlagOutcome,
    Outcome,
    RevealOutcome,
    TerminalOutcome,
    Verdict,
    terminal_last,
)

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


class OutOfBoundsError(IndexError):
    """Raised when a position lies outside the board."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(
            f"Position ({x}, {y}) is outside the {width}x{height} board"
        )
        self.x = x
        self.y = y


@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        if self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        # At least one free square, so placement and relocation terminate
        max_mines = self.width * self.height - 1
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)


# ============================================================================
# Board Class
# ============================================================================

@dataclass(eq=False)
class Board:
    """
    Minesweeper game board.

    Owns the grid of cells and the edge counts, places mines, and turns
    player actions (click, flag, chord clear) into outcome lists.

    Attributes:
        config: Board dimensions and mine count.
        rng: Random source for mine placement and relocation.
        clock: Returns the current time in seconds, used for the game timer.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    rng: random.Random = field(default_factory=random.Random, repr=False)
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _cells: List[Cell] = field(default_factory=list, init=False, repr=False)
    _adjacency: List[Tuple[int, ...]] = field(
        default_factory=list, init=False, repr=False
    )
    _edges: Optional[np.ndarray] = field(default=None, init=False, repr=False)
    _squares_left: int = field(default=0, init=False)
    _move_count: int = field(default=0, init=False)
    _started: bool = field(default=False, init=False)
    _game_state: GameState = field(default=GameState.PLAYING, init=False)
    _last_position: Position = field(default=(-1, -1), init=False)
    _started_at: Optional[float] = field(default=None, init=False, repr=False)
    _elapsed: Optional[int] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Start the first game after dataclass creation."""
        self._setup(self.config)

    @classmethod
    def from_layout(
        cls,
        layout: Sequence[str],
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> "Board":
        """
        Build a board with mines at fixed positions.

        Args:
            layout: One string per row; MINE marks a mine, '.' a free cell.
            rng: Random source used if the first click must move a mine.
            clock: Time source for the game timer.

        Returns:
            Board ready for its first move.
        """
        rows = list(layout)
        if not rows or any(len(row) != len(rows[0]) for row in rows):
            raise ValueError("Layout rows must be non-empty and equally wide")
        mines = []
        for y, row in enumerate(rows):
            for x, char in enumerate(row):
                if char == MINE:
                    mines.append((x, y))
                elif char != ".":
                    raise ValueError(f"Unknown layout character {char!r}")

        config = BoardConfig(len(rows[0]), len(rows), len(mines))
        board = cls(config)
        if rng is not None:
            board.rng = rng
        if clock is not None:
            board.clock = clock
        board._setup(config, mines)
        return board

    # ========================================================================
    # Game Setup (Low-level)
    # ========================================================================

    def new_game(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        mine_count: Optional[int] = None,
    ) -> None:
        """
        Start a new game, discarding the current one.

        Any argument left out keeps its value from the current config.
        """
        config = BoardConfig(
            self.config.width if width is None else width,
            self.config.height if height is None else height,
            self.config.num_mines if mine_count is None else mine_count,
        )
        self._setup(config)

    def reset(self) -> None:
        """Start a new game with the same configuration."""
        self._setup(self.config)

    def _setup(
        self,
        config: BoardConfig,
        mines: Optional[Sequence[Position]] = None,
    ) -> None:
        self.config = config
        width, height = config.width, config.height
        self._cells = [
            Cell(x, y) for y in range(height) for x in range(width)
        ]
        self._adjacency = [
            tuple(self._neighbor_indices(x, y))
            for y in range(height)
            for x in range(width)
        ]

        if mines is None:
            self._add_mines(config.num_mines)
        else:
            for x, y in mines:
                self._make_mine(self._index(x, y))

        self._build_edges()
        self._squares_left = width * height - config.num_mines
        self._move_count = 0
        self._started = False
        self._game_state = GameState.PLAYING
        self._last_position = (-1, -1)
        self._started_at = None
        self._elapsed = None
        logger.debug(
            "New %dx%d game with %d mines", width, height, config.num_mines
        )

    def _add_mines(self, count: int) -> None:
        """Place mines by picking random squares until enough are free."""
        while count > 0:
            index = self._random_index()
            if not self._cells[index].is_mine:
                self._make_mine(index)
                count -= 1

    def _make_mine(self, index: int) -> None:
        self._cells[index].raw = MINE_THRESHOLD
        for neighbor in self._adjacency[index]:
            self._cells[neighbor].increment()

    def _random_index(self) -> int:
        x = self.rng.randrange(self.config.width)
        y = self.rng.randrange(self.config.height)
        return y * self.config.width + x

    def _relocate_mine(self, index: int) -> None:
        """
        Move the mine at ``index`` to a random free square.

        The vacated square gets the count of mines around it, and its
        neighbors lose the count the old mine contributed.
        """
        target = self._random_index()
        while self._cells[target].is_mine:
            target = self._random_index()
        self._make_mine(target)

        old_neighbors = [self._cells[n] for n in self._adjacency[index]]
        for cell in old_neighbors:
            cell.decrement()
        self._cells[index].raw = sum(1 for c in old_neighbors if c.is_mine)

        self._build_edges()
        moved_to = self._cells[target]
        logger.debug(
            "First click hit a mine, moved it to (%d, %d)",
            moved_to.x, moved_to.y,
        )

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _index(self, x: int, y: int) -> int:
        """Flat index of a position, raising if it is off the board."""
        width, height = self.config.width, self.config.height
        if not (0 <= x < width and 0 <= y < height):
            raise OutOfBoundsError(x, y, width, height)
        return y * width + x

    def _neighbor_indices(self, x: int, y: int) -> List[int]:
        """
        Indices of the up to 8 cells around (x, y), clipped at the border.

        Ordered row by row, then column by column.
        """
        width, height = self.config.width, self.config.height
        indices = []
        for ny in range(max(0, y - 1), min(y + 2, height)):
            for nx in range(max(0, x - 1), min(x + 2, width)):
                if nx != x or ny != y:
                    indices.append(ny * width + nx)
        return indices

    def _build_edges(self) -> None:
        """Count the non-visible neighbors of every cell from scratch."""
        self._edges = np.array(
            [
                sum(1 for n in neighbors if not self._cells[n].is_visible)
                for neighbors in self._adjacency
            ],
            dtype=np.int16,
        )

    def _update_edges(self, index: int) -> None:
        """Account for the cell at ``index`` having become visible."""
        for neighbor in self._adjacency[index]:
            if not self._cells[neighbor].is_mine:
                self._edges[neighbor] -= 1

    def _flag_count(self, index: int) -> int:
        return sum(1 for n in self._adjacency[index] if self._cells[n].is_flagged)

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def click(self, x: int, y: int) -> List[Outcome]:
        """
        Reveal the cell at (x, y).

        The first click never loses: a mine under it is moved elsewhere.
        A zero floods outwards; revealing the last free square wins.

        Args:
            x: Column to reveal.
            y: Row to reveal.

        Returns:
            Outcomes of the reveal, empty if the cell is flagged or visible.
        """
        index = self._index(x, y)
        if not self._cells[index].is_clickable:
            return []
        self._move_count += 1
        self._last_position = (x, y)
        return self._game_mechanics(index)

    def _game_mechanics(self, index: int) -> List[Outcome]:
        cell = self._cells[index]
        if self._move_count == 1:
            self._start_timer()
            if cell.is_mine:
                self._relocate_mine(index)

        cell.is_visible = True
        cell.is_flagged = False

        if cell.is_mine:
            self._update_edges(index)
            return self._game_over(index, Verdict.LOSE)
        if cell.raw == 0:
            outcomes = self._flood_reveal(index)
        else:
            outcomes = [self._expose(index)]

        if self._squares_left == 0:
            outcomes += self._game_over(index, Verdict.WIN)
        return outcomes

    def _expose(self, index: int) -> RevealOutcome:
        cell = self._cells[index]
        cell.is_visible = True
        cell.is_flagged = False
        self._squares_left -= 1
        self._update_edges(index)
        return RevealOutcome(cell.x, cell.y, cell.value)

    def _flood_reveal(self, start: int) -> List[Outcome]:
        """
        Reveal a zero and everything reachable through other zeros.

        Depth-first, visiting neighbors in enumeration order, so outcomes
        come out as a recursive walk would produce them.
        """
        outcomes: List[Outcome] = [self._expose(start)]
        stack = list(reversed(self._adjacency[start]))
        while stack:
            index = stack.pop()
            cell = self._cells[index]
            if cell.is_visible:
                continue
            outcomes.append(self._expose(index))
            if cell.raw == 0:
                stack.extend(reversed(self._adjacency[index]))
        return outcomes

    def _game_over(self, index: int, verdict: Verdict) -> List[Outcome]:
        """Expose every hidden cell and append the terminal record."""
        if self._game_state is GameState.PLAYING:
            self._game_state = (
                GameState.WON if verdict is Verdict.WIN else GameState.LOST
            )
        outcomes: List[Outcome] = [
            RevealOutcome(c.x, c.y, c.value)
            for c in self._cells
            if not c.is_visible
        ]
        cell = self._cells[index]
        elapsed = self._stop_timer()
        outcomes.append(TerminalOutcome(cell.x, cell.y, verdict, elapsed))
        logger.debug(
            "Game over: %s at (%d, %d) after %d moves",
            verdict.value, cell.x, cell.y, self._move_count,
        )
        return outcomes

    def toggle_flag(self, x: int, y: int) -> List[Outcome]:
        """
        Toggle the flag on a cell, visible or not.

        Returns:
            A single outcome carrying the new flag state.
        """
        index = self._index(x, y)
        self._last_position = (x, y)
        flagged = self._cells[index].toggle_flag()
        return [FlagOutcome(x, y, flagged)]

    def clear_neighbors(self, x: int, y: int) -> List[Outcome]:
        """
        Chord clear: click every clickable neighbor of a satisfied number.

        Eligible only when the cell is visible and its number equals the
        count of flagged neighbors. Terminal outcomes sort to the end.

        Returns:
            Combined outcomes of the clicks, empty if not eligible.
        """
        targets = self.clickable_neighbors(x, y)
        if not targets:
            return []
        self._last_position = (x, y)
        outcomes: List[Outcome] = []
        for nx, ny in targets:
            outcomes.extend(self.click(nx, ny))
        return terminal_last(outcomes)

    def clickable_neighbors(self, x: int, y: int) -> List[Position]:
        """Positions a chord clear at (x, y) would click."""
        index = self._index(x, y)
        cell = self._cells[index]
        if not cell.is_visible or cell.value != self._flag_count(index):
            return []
        return [
            (self._cells[n].x, self._cells[n].y)
            for n in self._adjacency[index]
            if self._cells[n].is_clickable
        ]

    # ========================================================================
    # Timer
    # ========================================================================

    def _start_timer(self) -> None:
        self._started = True
        self._started_at = self.clock()
        self._elapsed = None

    def _stop_timer(self) -> int:
        """Freeze the elapsed whole seconds; later calls return the same."""
        if self._elapsed is None:
            self._elapsed = self.elapsed
        return self._elapsed

    @property
    def elapsed(self) -> int:
        """Whole seconds since the first move, frozen once the game ends."""
        if self._elapsed is not None:
            return self._elapsed
        if self._started_at is None:
            return 0
        return int(self.clock() - self._started_at)

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def mine_count(self) -> int:
        return self.config.num_mines

    @property
    def squares_left(self) -> int:
        """Non-mine cells not yet revealed."""
        return self._squares_left

    @property
    def move_count(self) -> int:
        return self._move_count

    @property
    def started(self) -> bool:
        return self._started

    @property
    def over(self) -> bool:
        return self._game_state is not GameState.PLAYING

    @property
    def game_state(self) -> GameState:
        return self._game_state

    @property
    def last_position(self) -> Position:
        """Coordinates of the last action, (-1, -1) before any."""
        return self._last_position

    @property
    def edges(self) -> np.ndarray:
        """Read-only (height, width) view of the non-visible neighbor counts.

        Exact for non-mine cells; reveals never update a mine's count.
        """
        view = self._edges.reshape(self.config.height, self.config.width)
        view.flags.writeable = False
        return view

    def get_cell(self, x: int, y: int) -> Cell:
        """Get cell at position, raising OutOfBoundsError if invalid."""
        return self._cells[self._index(x, y)]

    def neighbors(self, x: int, y: int) -> List[Cell]:
        """Cells around (x, y), clipped at the board border."""
        return [self._cells[n] for n in self._adjacency[self._index(x, y)]]

    def edge_count(self, x: int, y: int) -> int:
        """
        Number of neighbors of (x, y) that are not visible.

        Exact for non-mine cells; reveals never update a mine's count.
        """
        return int(self._edges[self._index(x, y)])

    def is_edge(self, x: int, y: int) -> bool:
        """Check if a visible cell still borders a hidden one."""
        index = self._index(x, y)
        return bool(self._cells[index].is_visible and self._edges[index] > 0)

    def neighboring_flag_count(self, x: int, y: int) -> int:
        return self._flag_count(self._index(x, y))

    def mine_positions(self) -> List[Position]:
        """Positions of every mine, row by row."""
        return [(c.x, c.y) for c in self._cells if c.is_mine]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array for an agent.

        Returns:
            2D numpy array of shape (height, width) where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.array(
            [cell.to_observation() for cell in self._cells], dtype=np.int8
        )
        return obs.reshape(self.config.height, self.config.width)

    def get_valid_actions(self) -> List[Position]:
        """
        Get list of cells that can be clicked.

        Returns:
            List of (x, y) positions neither flagged nor visible.
        """
        return [(c.x, c.y) for c in self._cells if c.is_clickable]

    def render(self) -> str:
        """
        Text picture of the board.

        Hidden cells show '*', flagged ones 'F', visible ones their value.
        """
        rule = "---" * (self.config.width + 2)
        lines = [rule]
        for y in range(self.config.height):
            row = self._cells[y * self.config.width:(y + 1) * self.config.width]
            lines.append("|  " + "".join(f" {_symbol(c)} " for c in row) + "  |")
        lines.append(rule)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


def _symbol(cell: Cell) -> str:
    if cell.is_visible:
        return str(cell.value)
    if cell.is_flagged:
        return "F"
    return "*"
