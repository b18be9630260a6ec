"""
Unit tests for Cell class.

Tests value encoding, flag toggling, clickability and observation
conversion.
"""
from minefield import Cell, MINE


# ============================================================================
# Cell Initialization Tests
# ============================================================================

class TestCellInitialization:
    """Test cell creation and default values."""

    def test_default_cell_is_not_mine(self, hidden_cell: Cell) -> None:
        """New cell should not be a mine by default."""
        assert hidden_cell.is_mine is False

    def test_default_cell_is_hidden_and_unflagged(
        self, hidden_cell: Cell
    ) -> None:
        """New cell should be neither visible nor flagged."""
        assert hidden_cell.is_visible is False
        assert hidden_cell.is_flagged is False

    def test_default_cell_has_zero_value(self, hidden_cell: Cell) -> None:
        """New cell should start at 0."""
        assert hidden_cell.value == 0

    def test_cell_keeps_position(self) -> None:
        """Cell should remember its coordinates."""
        cell = Cell(3, 7)
        assert (cell.x, cell.y) == (3, 7)


# ============================================================================
# Value Encoding Tests
# ============================================================================

class TestCellValue:
    """Test how numbers and mines are stored and reported."""

    def test_mine_reports_symbol(self, mine_cell: Cell) -> None:
        """A mine's value is always the mine symbol."""
        assert mine_cell.is_mine is True
        assert mine_cell.value == MINE

    def test_any_raw_above_threshold_is_mine(self) -> None:
        """Raw values beyond 10 still mean a mine."""
        cell = Cell(0, 0, raw=14)
        assert cell.value == MINE

    def test_increment_adds_one(self, hidden_cell: Cell) -> None:
        """Increment should raise the count."""
        hidden_cell.increment()
        hidden_cell.increment()
        assert hidden_cell.value == 2

    def test_increment_on_mine_keeps_mine(self, mine_cell: Cell) -> None:
        """Incrementing a mine leaves it a mine."""
        mine_cell.increment()
        assert mine_cell.value == MINE

    def test_decrement_subtracts_one(self) -> None:
        """Decrement should lower the count."""
        cell = Cell(0, 0, raw=3)
        cell.decrement()
        assert cell.value == 2

    def test_decrement_on_mine_is_noop(self, mine_cell: Cell) -> None:
        """Decrementing a mine must not turn it into a number."""
        mine_cell.decrement()
        assert mine_cell.raw == 10
        assert mine_cell.is_mine is True

    def test_value_setter_writes_raw(self, hidden_cell: Cell) -> None:
        """Setting value stores the raw number."""
        hidden_cell.value = 10
        assert hidden_cell.is_mine is True


# ============================================================================
# Cell Flag Tests
# ============================================================================

class TestCellFlag:
    """Test flag toggling and clickability."""

    def test_toggle_flag_returns_new_state(self, hidden_cell: Cell) -> None:
        """Toggling should return the resulting flag."""
        assert hidden_cell.toggle_flag() is True
        assert hidden_cell.toggle_flag() is False

    def test_toggle_flag_on_visible_cell(self, hidden_cell: Cell) -> None:
        """Cell itself does not refuse flags on visible cells."""
        hidden_cell.is_visible = True
        assert hidden_cell.toggle_flag() is True

    def test_hidden_cell_is_clickable(self, hidden_cell: Cell) -> None:
        """Hidden, unflagged cell can be clicked."""
        assert hidden_cell.is_clickable is True

    def test_flagged_cell_not_clickable(self, hidden_cell: Cell) -> None:
        """Flagged cell cannot be clicked."""
        hidden_cell.toggle_flag()
        assert hidden_cell.is_clickable is False

    def test_visible_cell_not_clickable(self, hidden_cell: Cell) -> None:
        """Visible cell cannot be clicked."""
        hidden_cell.is_visible = True
        assert hidden_cell.is_clickable is False


# ============================================================================
# Observation Tests
# ============================================================================

class TestCellObservation:
    """Test conversion to observation values."""

    def test_hidden_cell_observation(self, hidden_cell: Cell) -> None:
        """Hidden cell should be -1."""
        assert hidden_cell.to_observation() == -1

    def test_flagged_cell_observation(self, hidden_cell: Cell) -> None:
        """Flagged cell should be -2."""
        hidden_cell.toggle_flag()
        assert hidden_cell.to_observation() == -2

    def test_revealed_number_observation(self) -> None:
        """Revealed cell should show its count."""
        cell = Cell(0, 0, raw=3, is_visible=True)
        assert cell.to_observation() == 3

    def test_revealed_mine_observation(self, mine_cell: Cell) -> None:
        """Revealed mine should be 9."""
        mine_cell.is_visible = True
        assert mine_cell.to_observation() == 9
