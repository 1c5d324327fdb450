"""
Tests for grid checks.
"""

import pytest

from corrlib.correlation.validation import (
    check_loss_levels,
    check_matrix_dimensions,
    check_tenors,
    ordinal,
)
from corrlib.dates import Period
from corrlib.errors import InvalidInputError


def _tenors(*labels):
    return [Period.parse(t) for t in labels]


class TestOrdinal:
    """Tests for ordinal formatting."""
    
    def test_ordinals(self):
        """Test English ordinal suffixes."""
        assert [ordinal(n) for n in (1, 2, 3, 4)] == ["1st", "2nd", "3rd", "4th"]
        assert [ordinal(n) for n in (11, 12, 13)] == ["11th", "12th", "13th"]
        assert [ordinal(n) for n in (21, 22, 101, 111)] == ["21st", "22nd", "101st", "111th"]


class TestCheckTenors:
    """Tests for tenor checks."""
    
    def test_valid(self):
        """Test increasing positive tenors pass."""
        check_tenors(_tenors("3M", "6M", "1Y"))
    
    def test_first_not_positive(self):
        """Test a zero first tenor is rejected."""
        with pytest.raises(InvalidInputError, match="first tranche tenor"):
            check_tenors(_tenors("0M", "6M"))
    
    def test_non_increasing(self):
        """Test the message names the offending positions and values."""
        with pytest.raises(InvalidInputError) as excinfo:
            check_tenors(_tenors("3M", "1Y", "6M"))
        assert "2nd is 1Y" in str(excinfo.value)
        assert "3rd is 6M" in str(excinfo.value)
    
    def test_equal_tenors(self):
        """Test equivalent tenors are not strictly increasing."""
        with pytest.raises(InvalidInputError):
            check_tenors(_tenors("12M", "1Y"))
    
    def test_empty(self):
        """Test an empty tenor list is rejected."""
        with pytest.raises(InvalidInputError):
            check_tenors([])
    
    def test_unorderable_tenors(self):
        """Test weeks against months that cannot be ordered are rejected."""
        with pytest.raises(InvalidInputError, match="cannot order tranche tenors: 1st is 4W, 2nd is 1M"):
            check_tenors(_tenors("4W", "1M"))


class TestCheckLossLevels:
    """Tests for loss level checks."""
    
    def test_valid(self):
        """Test increasing levels in (0, 1] pass."""
        check_loss_levels([0.03, 0.07, 0.10, 1.0])
    
    def test_first_not_positive(self):
        """Test a zero first level is rejected."""
        with pytest.raises(InvalidInputError, match="first loss level is not positive"):
            check_loss_levels([0.0, 0.07])
    
    def test_first_above_one(self):
        """Test a first level above 100% is rejected."""
        with pytest.raises(InvalidInputError, match="larger than 100%"):
            check_loss_levels([1.5])
    
    def test_later_above_one(self):
        """Test a later level above 100% is rejected with its position."""
        with pytest.raises(InvalidInputError, match="3rd loss level larger than 100%"):
            check_loss_levels([0.03, 0.07, 1.2])
    
    def test_non_increasing(self):
        """Test the message names the offending positions and values."""
        with pytest.raises(InvalidInputError, match="2nd is 0.07, 3rd is 0.05"):
            check_loss_levels([0.03, 0.07, 0.05])


class TestCheckMatrixDimensions:
    """Tests for snapshot dimension checks."""
    
    def test_valid(self):
        """Test matching dimensions pass."""
        check_matrix_dimensions(3, 2, 3, 2)
    
    def test_row_mismatch(self):
        """Test a row count mismatch is reported."""
        with pytest.raises(InvalidInputError, match="loss levels \\(3\\) and number of rows \\(2\\)"):
            check_matrix_dimensions(2, 2, 3, 2)
    
    def test_column_mismatch(self):
        """Test a column count mismatch is reported."""
        with pytest.raises(InvalidInputError, match="tranche tenors \\(2\\) and number of columns \\(3\\)"):
            check_matrix_dimensions(3, 3, 3, 2)
