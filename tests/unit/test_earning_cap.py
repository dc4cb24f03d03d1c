"""
Tests for the earning cap variants.

Tests cover:
- Capped remaining room and reached detection
- Mapping of the stored max_earning column to a variant
- Entry properties built on the cap
"""

from decimal import Decimal

from app.models.earning_cap import UNCAPPED, Capped, Uncapped, cap_from_column


class TestCapped:
    """Test Capped variant."""

    def test_remaining_room(self):
        """Remaining is limit minus earned."""
        assert Capped(Decimal("200")).remaining(Decimal("190")) == Decimal("10")

    def test_remaining_never_negative(self):
        """Overshoot clamps to zero."""
        assert Capped(Decimal("200")).remaining(Decimal("250")) == Decimal("0")

    def test_is_reached_at_limit(self):
        """Earned equal to the limit counts as reached."""
        cap = Capped(Decimal("200"))
        assert cap.is_reached(Decimal("200"))
        assert not cap.is_reached(Decimal("199.99999999"))

    def test_zero_limit_is_exhausted(self):
        """A zero limit is a cap with no room, not an uncapped entry."""
        cap = Capped(Decimal("0"))
        assert cap.remaining(Decimal("0")) == Decimal("0")
        assert cap.is_reached(Decimal("0"))


class TestCapFromColumn:
    """Test mapping of max_earning to a cap variant."""

    def test_null_is_uncapped(self):
        assert cap_from_column(None) is UNCAPPED
        assert isinstance(cap_from_column(None), Uncapped)

    def test_number_is_capped(self):
        assert cap_from_column(Decimal("180")) == Capped(Decimal("180"))

    def test_zero_is_capped(self):
        assert cap_from_column(Decimal("0")) == Capped(Decimal("0"))


class TestEntryCapProperties:
    """Test StakingEntry helpers built on the cap."""

    def test_remaining_cap_for_capped_entry(self, entry_factory):
        entry = entry_factory(max_earning="200", total_earned="150")
        assert entry.remaining_cap == Decimal("50")

    def test_remaining_cap_for_uncapped_entry(self, entry_factory):
        entry = entry_factory(max_earning=None)
        assert entry.remaining_cap is None
        assert entry.earning_cap is UNCAPPED

    def test_is_active(self, entry_factory):
        assert entry_factory().is_active
