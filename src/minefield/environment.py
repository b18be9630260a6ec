"""
Gymnasium environment wrapper for Minesweeper.

Provides a standard RL interface over the board engine.
"""
from typing import Any, Dict, List, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig
from .outcomes import Outcome, RevealOutcome, Verdict


# ============================================================================
# Constants
# ============================================================================

REVEAL, FLAG, CHORD = range(3)
ACTION_KINDS = ("reveal", "flag", "chord")


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size 3 * width * height. Action ``a``
        performs kind ``a // (width * height)`` (reveal, flag, chord) on
        the cell with index ``a % (width * height)`` = ``y * width + x``.

    Rewards:
        - +1 per cell revealed by the action
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for an action that changed nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.board = Board(self.config)
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )

        self._cell_count = self.config.width * self.config.height
        self.action_space = spaces.Discrete(len(ACTION_KINDS) * self._cell_count)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for mine placement.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.board.rng.seed(seed)
        self.board.reset()
        self._steps = 0

        return self.board.get_observation(), self._get_info([])

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Encoded (kind, cell) action.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        kind, x, y = self.decode_action(action)
        self._steps += 1

        outcomes = self._perform(kind, x, y)
        reward = self._calculate_reward(outcomes)

        observation = self.board.get_observation()
        terminated = self.board.over
        truncated = False

        return observation, reward, terminated, truncated, self._get_info(outcomes)

    def decode_action(self, action: int) -> Tuple[int, int, int]:
        """Convert a flat action to (kind, x, y)."""
        kind, index = divmod(int(action), self._cell_count)
        y, x = divmod(index, self.config.width)
        return kind, x, y

    def encode_action(self, kind: int, x: int, y: int) -> int:
        """Convert (kind, x, y) to a flat action."""
        return kind * self._cell_count + y * self.config.width + x

    def _perform(self, kind: int, x: int, y: int) -> List[Outcome]:
        if self.board.over:
            return []
        if kind == REVEAL:
            return self.board.click(x, y)
        if kind == FLAG:
            return self.board.toggle_flag(x, y)
        return self.board.clear_neighbors(x, y)

    def _calculate_reward(self, outcomes: List[Outcome]) -> float:
        """
        Calculate reward for the outcomes of one action.

        Args:
            outcomes: What the action changed.

        Returns:
            Reward value.
        """
        if not outcomes:
            return -0.1

        for outcome in outcomes:
            if outcome.is_terminal:
                return 10.0 if outcome.state is Verdict.WIN else -10.0

        return float(sum(isinstance(o, RevealOutcome) for o in outcomes))

    def _get_info(self, outcomes: List[Outcome]) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "squares_left": self.board.squares_left,
            "game_state": self.board.game_state.name,
            "valid_actions": len(self.board.get_valid_actions()),
            "outcomes": [o.to_dict() for o in outcomes],
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self.board.render()
        if self.render_mode == "human":
            print(self.board.render())
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that would change something.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.board.over:
            return mask
        for y in range(self.config.height):
            for x in range(self.config.width):
                cell = self.board.get_cell(x, y)
                mask[self.encode_action(REVEAL, x, y)] = cell.is_clickable
                mask[self.encode_action(FLAG, x, y)] = not cell.is_visible
                mask[self.encode_action(CHORD, x, y)] = bool(
                    self.board.clickable_neighbors(x, y)
                )
        return mask
