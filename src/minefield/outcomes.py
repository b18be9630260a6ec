"""
Outcome records returned by board actions.

Each action produces an ordered list of outcomes, one per cell whose
visible state changed, optionally ending with a terminal win/loss record.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Union

from .cell import CellValue


class Verdict(Enum):
    """How a finished game ended."""

    WIN = "WIN"
    LOSE = "LOSE"


@dataclass(frozen=True)
class RevealOutcome:
    """A cell was revealed (or exposed at game end) with this value."""

    x: int
    y: int
    value: CellValue

    is_terminal = False

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "value": self.value}


@dataclass(frozen=True)
class FlagOutcome:
    """A cell's flag was switched to ``value``."""

    x: int
    y: int
    value: bool

    is_terminal = False

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "value": self.value}


@dataclass(frozen=True)
class TerminalOutcome:
    """
    The game ended.

    Attributes:
        x: Column of the action that ended the game.
        y: Row of the action that ended the game.
        state: Whether the game was won or lost.
        time: Whole seconds elapsed since the first move.
    """

    x: int
    y: int
    state: Verdict
    time: int

    is_terminal = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "state": self.state.value,
            "time": self.time,
        }


Outcome = Union[RevealOutcome, FlagOutcome, TerminalOutcome]


def terminal_last(outcomes: Iterable[Outcome]) -> List[Outcome]:
    """Stable partition: non-terminal outcomes first, terminal ones last."""
    outcomes = list(outcomes)
    return (
        [o for o in outcomes if not o.is_terminal]
        + [o for o in outcomes if o.is_terminal]
    )
