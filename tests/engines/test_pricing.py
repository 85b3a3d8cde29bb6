"""
Tests for the Pricing Engine.

Covers:
- Sub-total, discount, charges and tax in the documented order
- Half-up rounding applied once at the end
- Validation of lines and adjustments
- Packing-list totals
- Reordering and splitting lines never changes the total
"""

from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradedoc_engines.pricing import (
    PackingTotals,
    PriceCalculator,
    PricedLine,
    WeighedLine,
    compute,
)
from tradedoc_kernel.exceptions import InvalidFieldValueError


def priced(quantity: str, unit_price: str) -> PricedLine:
    return PricedLine(Decimal(quantity), Decimal(unit_price))


class TestCompute:

    def setup_method(self):
        self.calculator = PriceCalculator()

    def test_plain_sum(self):
        result = self.calculator.compute([priced("2", "10.00"), priced("3", "5.50")])

        assert result.sub_total == Decimal("36.50")
        assert result.total == Decimal("36.50")
        assert result.discount_amount == Decimal("0.00")
        assert result.tax_amount == Decimal("0.00")

    def test_discount_then_charges_then_tax(self):
        result = self.calculator.compute(
            [priced("20", "42.00")],
            discount_percentage=Decimal("5"),
            additional_charges=Decimal("25"),
            tax_percentage=Decimal("10"),
        )

        assert result.sub_total == Decimal("840.00")
        assert result.discount_amount == Decimal("42.00")
        assert result.after_discount == Decimal("798.00")
        # Tax applies to the discounted amount, not to the charges
        assert result.tax_amount == Decimal("79.80")
        assert result.total == Decimal("902.80")

    def test_rounding_happens_once_at_the_end(self):
        result = compute(
            [priced("3", "19.99")],
            discount_percentage=Decimal("10"),
            tax_percentage=Decimal("5"),
        )

        assert result.total == Decimal("56.67")

    def test_half_up_rounding(self):
        result = compute([priced("1", "0.005")])

        assert result.total == Decimal("0.01")

    def test_empty_lines_total_is_charges(self):
        result = compute([], additional_charges=Decimal("12.5"))

        assert result.sub_total == Decimal("0.00")
        assert result.total == Decimal("12.50")

    def test_full_discount(self):
        result = compute([priced("4", "25")], discount_percentage=Decimal("100"))

        assert result.total == Decimal("0.00")


class TestValidation:

    @pytest.mark.parametrize(
        "line,field",
        [
            (priced("0", "1.00"), "items[1].quantity"),
            (priced("-2", "1.00"), "items[1].quantity"),
            (priced("1", "0"), "items[1].unit_price"),
        ],
    )
    def test_bad_line_names_its_index(self, line, field):
        with pytest.raises(InvalidFieldValueError) as exc_info:
            compute([priced("1", "1"), line])

        assert exc_info.value.field == field

    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"discount_percentage": Decimal("-1")}, "discount_percentage"),
            ({"discount_percentage": Decimal("100.01")}, "discount_percentage"),
            ({"additional_charges": Decimal("-0.01")}, "additional_charges"),
            ({"tax_percentage": Decimal("-5")}, "tax_percentage"),
        ],
    )
    def test_bad_adjustment(self, kwargs, field):
        with pytest.raises(InvalidFieldValueError) as exc_info:
            compute([priced("1", "1")], **kwargs)

        assert exc_info.value.field == field


class TestPackingTotals:

    def setup_method(self):
        self.calculator = PriceCalculator()

    def test_sums_declared_values(self):
        totals = self.calculator.packing_totals([
            WeighedLine(Decimal("12.5"), Decimal("10"), 2),
            WeighedLine(Decimal("7.5"), None, 3),
        ])

        assert totals == PackingTotals(Decimal("20.0"), Decimal("10"), 5)

    def test_nothing_declared_is_null(self):
        totals = self.calculator.packing_totals([WeighedLine(), WeighedLine()])

        assert totals == PackingTotals(None, None, None)

    def test_negative_weight_rejected(self):
        with pytest.raises(InvalidFieldValueError) as exc_info:
            self.calculator.packing_totals([WeighedLine(gross_weight=Decimal("-1"))])

        assert exc_info.value.field == "items[0].gross_weight"


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

quantities = st.decimals(min_value=Decimal("0.01"), max_value=Decimal("10000"), places=2)
prices = st.decimals(min_value=Decimal("0.01"), max_value=Decimal("100000"), places=2)
percentages = st.one_of(
    st.none(),
    st.decimals(min_value=Decimal("0"), max_value=Decimal("100"), places=2),
)
lines = st.lists(st.builds(PricedLine, quantities, prices), min_size=1, max_size=8)


class TestPricingProperties:

    @given(lines=lines, discount=percentages, tax=percentages, data=st.data())
    @settings(max_examples=150)
    def test_reordering_lines_keeps_total(self, lines, discount, tax, data):
        shuffled = data.draw(st.permutations(lines))

        assert compute(shuffled, discount, None, tax).total == compute(lines, discount, None, tax).total

    @given(lines=lines, discount=percentages, tax=percentages, index=st.integers(min_value=0))
    @settings(max_examples=150)
    def test_splitting_a_line_keeps_total(self, lines, discount, tax, index):
        """A line of quantity q equals two lines of q/2 at the same price."""
        index %= len(lines)
        target = lines[index]
        half = PricedLine(target.quantity / 2, target.unit_price)
        split = lines[:index] + [half, half] + lines[index + 1:]

        assert compute(split, discount, None, tax).total == compute(lines, discount, None, tax).total

    @given(lines=lines, tax=percentages)
    def test_discount_never_increases_total(self, lines, tax):
        without = compute(lines, None, None, tax).total
        with_discount = compute(lines, Decimal("15"), None, tax).total

        assert with_discount <= without
