"""
Unit tests for dates module.
"""

from datetime import date
import pytest

from corrlib.conventions import BusinessDayConvention, DateGenerationRule
from corrlib.dates import (
    Calendar,
    Period,
    TimeUnit,
    add_period,
    cds_maturity,
    make_schedule,
    next_twentieth,
    previous_twentieth,
)


class TestPeriod:
    """Tests for Period parsing and ordering."""
    
    def test_parse(self):
        """Test parsing tenor strings."""
        assert Period.parse("3M") == Period(3, TimeUnit.MONTHS)
        assert Period.parse("5y") == Period(5, TimeUnit.YEARS)
        assert Period.parse("2W") == Period(2, TimeUnit.WEEKS)
        assert Period.parse(" 10D ") == Period(10, TimeUnit.DAYS)
    
    def test_parse_invalid(self):
        """Test invalid tenor raises error."""
        with pytest.raises(ValueError):
            Period.parse("invalid")
        with pytest.raises(ValueError):
            Period.parse("3X")
    
    def test_str(self):
        """Test string round trip."""
        assert str(Period.parse("6M")) == "6M"
    
    def test_equivalent_periods_are_equal(self):
        """Test 1Y equals 12M and 1W equals 7D."""
        assert Period.parse("1Y") == Period.parse("12M")
        assert Period.parse("1W") == Period.parse("7D")
        assert hash(Period.parse("1Y")) == hash(Period.parse("12M"))
    
    def test_ordering_same_family(self):
        """Test exact comparisons within months/years."""
        assert Period.parse("3M") < Period.parse("1Y")
        assert Period.parse("2Y") > Period.parse("18M")
        assert Period.parse("6M") <= Period.parse("6M")
    
    def test_ordering_across_families(self):
        """Test comparisons through day bounds."""
        assert Period.parse("2W") < Period.parse("1M")
        assert Period.parse("1M") < Period.parse("5W")
        assert Period.parse("1Y") > Period.parse("300D")
    
    def test_undecidable_comparison(self):
        """Test 1M against 30D cannot be decided."""
        with pytest.raises(ValueError, match="undecidable"):
            Period.parse("1M") < Period.parse("30D")
    
    def test_zero_period(self):
        """Test zero-length periods sort below positive ones."""
        assert Period(0, TimeUnit.DAYS) < Period.parse("1D")
        assert Period(0, TimeUnit.MONTHS) == Period(0, TimeUnit.DAYS)
    
    def test_sorting(self):
        """Test a list of tenors sorts correctly."""
        tenors = [Period.parse(t) for t in ["1Y", "3M", "5Y", "6M"]]
        assert [str(t) for t in sorted(tenors)] == ["3M", "6M", "1Y", "5Y"]


class TestAddPeriod:
    """Tests for unadjusted period arithmetic."""
    
    def test_add_months(self):
        """Test adding month tenors."""
        assert add_period(date(2024, 1, 15), "3M") == date(2024, 4, 15)
    
    def test_add_years(self):
        """Test adding year tenors."""
        assert add_period(date(2024, 1, 15), "5Y") == date(2029, 1, 15)
    
    def test_month_end_clamped(self):
        """Test Jan 31 plus 1M lands on Feb 29 in a leap year."""
        assert add_period(date(2024, 1, 31), "1M") == date(2024, 2, 29)
    
    def test_end_of_month_flag(self):
        """Test end of month rolling keeps month ends."""
        assert add_period(date(2024, 2, 29), "1M", end_of_month=True) == date(2024, 3, 31)
    
    def test_add_negative(self):
        """Test negative periods go backwards."""
        assert add_period(date(2024, 4, 15), "-3M") == date(2024, 1, 15)


class TestCalendar:
    """Tests for Calendar."""
    
    def test_advance_business_days(self):
        """Test day periods count business days."""
        cal = Calendar()
        assert cal.advance(date(2024, 1, 19), 1) == date(2024, 1, 22)
        assert cal.advance(date(2024, 1, 22), -1) == date(2024, 1, 19)
        assert cal.advance(date(2024, 1, 19), "3D") == date(2024, 1, 24)
    
    def test_advance_zero_adjusts(self):
        """Test advancing by zero days only adjusts."""
        assert Calendar().advance(date(2024, 1, 13), 0) == date(2024, 1, 15)
    
    def test_advance_months_then_adjust(self):
        """Test month periods add then adjust."""
        cal = Calendar()
        # 2024-10-13 is a Sunday
        result = cal.advance(date(2023, 10, 13), "1Y", BusinessDayConvention.FOLLOWING)
        assert result == date(2024, 10, 14)
    
    def test_advance_skips_holidays(self):
        """Test holidays are skipped."""
        cal = Calendar(holidays=[date(2024, 1, 22)])
        assert cal.advance(date(2024, 1, 19), 1) == date(2024, 1, 23)
    
    def test_adjust(self):
        """Test calendar adjustment delegates to the convention."""
        cal = Calendar()
        assert cal.adjust(date(2024, 3, 30), BusinessDayConvention.MODIFIED_FOLLOWING) == date(2024, 3, 29)
        assert cal.is_holiday(date(2024, 3, 30))


class TestTwentieths:
    """Tests for CDS roll date helpers."""
    
    def test_next_twentieth_imm(self):
        """Test next IMM twentieth."""
        assert next_twentieth(date(2024, 10, 18), DateGenerationRule.CDS) == date(2024, 12, 20)
        assert next_twentieth(date(2024, 12, 20), DateGenerationRule.CDS) == date(2024, 12, 20)
    
    def test_next_twentieth_plain(self):
        """Test Twentieth rule uses every month."""
        assert next_twentieth(date(2024, 10, 18), DateGenerationRule.TWENTIETH) == date(2024, 10, 20)
        assert next_twentieth(date(2024, 10, 21), DateGenerationRule.TWENTIETH) == date(2024, 11, 20)
    
    def test_previous_twentieth(self):
        """Test previous IMM twentieth."""
        assert previous_twentieth(date(2024, 10, 18), DateGenerationRule.CDS2015) == date(2024, 9, 20)
        assert previous_twentieth(date(2024, 3, 19), DateGenerationRule.CDS) == date(2023, 12, 20)


class TestCdsMaturity:
    """Tests for standard CDS maturities."""
    
    def test_cds2015_before_december_roll(self):
        """Test a trade in October matures in December."""
        assert cds_maturity(date(2024, 10, 18), "5Y", DateGenerationRule.CDS2015) == date(2029, 12, 20)
    
    def test_cds2015_after_december_anchor(self):
        """Test a December 20th anchor steps back one quarter under CDS2015."""
        assert cds_maturity(date(2024, 12, 21), "5Y", DateGenerationRule.CDS2015) == date(2029, 12, 20)
    
    def test_cds_quarterly_roll(self):
        """Test the pre-2015 rule rolls every quarter."""
        assert cds_maturity(date(2024, 12, 21), "5Y", DateGenerationRule.CDS) == date(2030, 3, 20)
    
    def test_cds2015_zero_tenor_on_roll(self):
        """Test 0M on a June/December anchor has no maturity."""
        assert cds_maturity(date(2024, 12, 21), "0M", DateGenerationRule.CDS2015) is None
    
    def test_rejects_non_quarterly_tenor(self):
        """Test tenors must be whole quarters."""
        with pytest.raises(ValueError, match="multiple of 3 months"):
            cds_maturity(date(2024, 10, 18), "7M", DateGenerationRule.CDS)
    
    def test_rejects_non_cds_rule(self):
        """Test only CDS rules are accepted."""
        with pytest.raises(ValueError):
            cds_maturity(date(2024, 10, 18), "5Y", DateGenerationRule.BACKWARD)
    
    def test_old_cds_rejects_zero_tenor(self):
        """Test OldCDS refuses a 0M tenor."""
        with pytest.raises(ValueError):
            cds_maturity(date(2024, 10, 18), "0M", DateGenerationRule.OLD_CDS)


class TestSchedule:
    """Tests for schedule generation."""
    
    def test_backward_quarterly(self):
        """Test quarterly backward schedule."""
        schedule = make_schedule(date(2024, 1, 15), date(2025, 1, 15), frequency=4)
        assert schedule.dates == [
            date(2024, 1, 15),
            date(2024, 4, 15),
            date(2024, 7, 15),
            date(2024, 10, 15),
            date(2025, 1, 15),
        ]
        assert len(schedule) == 5
    
    def test_zero_rule(self):
        """Test Zero rule only keeps the end points."""
        schedule = make_schedule(
            date(2024, 1, 15), date(2025, 1, 15), rule=DateGenerationRule.ZERO
        )
        assert schedule.dates == [date(2024, 1, 15), date(2025, 1, 15)]
    
    def test_forward_appends_termination_stub(self):
        """Test Forward rule ends on the termination date."""
        schedule = make_schedule(
            date(2024, 1, 15), date(2024, 8, 1), rule=DateGenerationRule.FORWARD
        )
        assert schedule.dates[-2] == date(2024, 7, 15)
        assert schedule.end_date == date(2024, 8, 1)
        assert schedule.is_regular[-1] is False
    
    def test_cds2015_schedule(self):
        """Test CDS2015 schedule starts on the previous roll and ends on maturity."""
        end = cds_maturity(date(2024, 10, 18), "1Y", DateGenerationRule.CDS2015)
        schedule = make_schedule(
            date(2024, 10, 18), end, rule=DateGenerationRule.CDS2015
        )
        assert schedule.start_date == date(2024, 9, 20)
        assert schedule.dates[1] == date(2024, 12, 20)
        # 2025-12-20 is a Saturday, left unadjusted for CDS schedules
        assert schedule.end_date == date(2025, 12, 20)
    
    def test_old_cds_short_stub(self):
        """Test OldCDS keeps the start unadjusted and skips a stub under 30 days."""
        schedule = make_schedule(
            date(2024, 12, 1), date(2025, 12, 20), rule=DateGenerationRule.OLD_CDS
        )
        # 2024-12-01 is a Sunday; 2024-12-20 is only 19 days away
        assert schedule.dates == [
            date(2024, 12, 1),
            date(2025, 3, 20),
            date(2025, 6, 20),
            date(2025, 9, 22),
            date(2025, 12, 20),
        ]
        assert schedule.is_regular == [False, True, True, True]

    def test_cds_schedule_steps_back_a_quarter(self):
        """Test the CDS rule keeps the previous twentieth as first date."""
        schedule = make_schedule(
            date(2024, 12, 1), date(2025, 12, 20), rule=DateGenerationRule.CDS
        )
        assert schedule.dates[:3] == [date(2024, 9, 20), date(2024, 12, 20), date(2025, 3, 20)]
        assert schedule.end_date == date(2025, 12, 20)

    def test_twentieth_imm_rolls_termination(self):
        """Test a termination off the IMM roll moves to the next IMM twentieth."""
        schedule = make_schedule(
            date(2024, 1, 15), date(2025, 1, 15), rule=DateGenerationRule.TWENTIETH_IMM
        )
        assert schedule.dates[1] == date(2024, 3, 20)
        assert schedule.end_date == date(2025, 3, 20)
    
    def test_invalid_frequency(self):
        """Test unsupported frequencies are rejected."""
        with pytest.raises(ValueError):
            make_schedule(date(2024, 1, 15), date(2025, 1, 15), frequency=5)
    
    def test_end_before_start(self):
        """Test reversed dates are rejected."""
        with pytest.raises(ValueError):
            make_schedule(date(2025, 1, 15), date(2024, 1, 15))
