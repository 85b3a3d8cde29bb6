"""
Pricing Engine - document totals from line items.

Pure functions with no I/O.  Decimal throughout; floats never appear.

Order of operations:
    sub_total       = sum(quantity * unit_price)        exact
    discount_amount = sub_total * discount% / 100
    after_discount  = sub_total - discount_amount
    tax_amount      = after_discount * tax% / 100
    total           = after_discount + additional_charges + tax_amount

Every output is rounded once, half-up to 2 places, at the end.  Line
sub-totals are not rounded, so the total does not change when lines are
reordered or a line is split into two lines of half the quantity.

Usage:
    from decimal import Decimal
    from tradedoc_engines.pricing import PriceCalculator, PricedLine

    result = PriceCalculator().compute(
        [PricedLine(Decimal("3"), Decimal("19.99"))],
        discount_percentage=Decimal("10"),
        tax_percentage=Decimal("5"),
    )
    print(result.total)  # 56.67
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from tradedoc_kernel.db.types import round_money
from tradedoc_kernel.exceptions import InvalidFieldValueError
from tradedoc_kernel.logging_config import get_logger

logger = get_logger("engines.pricing")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PricedLine:
    """Quantity and unit price of one line item."""

    quantity: Decimal
    unit_price: Decimal

    @property
    def sub_total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class PriceBreakdown:
    sub_total: Decimal
    discount_amount: Decimal
    after_discount: Decimal
    tax_amount: Decimal
    additional_charges: Decimal
    total: Decimal


@dataclass(frozen=True)
class WeighedLine:
    """Packing-list weights of one line item (all optional)."""

    gross_weight: Decimal | None = None
    net_weight: Decimal | None = None
    packages: int | None = None


@dataclass(frozen=True)
class PackingTotals:
    """Null when the summed value is zero (nothing declared)."""

    total_gross_weight: Decimal | None
    total_net_weight: Decimal | None
    total_packages: int | None


def validate_line(index: int, quantity: Decimal, unit_price: Decimal) -> None:
    """Raise InvalidFieldValueError naming ``items[index].<field>``."""
    if quantity <= ZERO:
        raise InvalidFieldValueError(f"items[{index}].quantity", "must be greater than 0")
    if unit_price <= ZERO:
        raise InvalidFieldValueError(f"items[{index}].unit_price", "must be greater than 0")


def validate_adjustments(
    discount_percentage: Decimal | None,
    additional_charges: Decimal | None,
    tax_percentage: Decimal | None,
) -> None:
    if discount_percentage is not None:
        if discount_percentage < ZERO:
            raise InvalidFieldValueError("discount_percentage", "must not be negative")
        if discount_percentage > HUNDRED:
            raise InvalidFieldValueError("discount_percentage", "must not exceed 100")
    if additional_charges is not None and additional_charges < ZERO:
        raise InvalidFieldValueError("additional_charges", "must not be negative")
    if tax_percentage is not None and tax_percentage < ZERO:
        raise InvalidFieldValueError("tax_percentage", "must not be negative")


class PriceCalculator:
    """
    Compute document totals.

    Pure - no I/O, no database access.  Raises on the first invalid input;
    nothing is partially computed.
    """

    def compute(
        self,
        lines: Sequence[PricedLine],
        discount_percentage: Decimal | None = None,
        additional_charges: Decimal | None = None,
        tax_percentage: Decimal | None = None,
    ) -> PriceBreakdown:
        """
        Args:
            lines: Line items (may be empty; the total is then the charges).
            discount_percentage: 0..100, None means 0.
            additional_charges: >= 0, None means 0.
            tax_percentage: >= 0, applied after the discount. None means 0.

        Raises:
            InvalidFieldValueError: on a non-positive quantity or unit price,
                or an out-of-range adjustment.
        """
        for index, line in enumerate(lines):
            validate_line(index, line.quantity, line.unit_price)
        validate_adjustments(discount_percentage, additional_charges, tax_percentage)

        discount = discount_percentage or ZERO
        charges = additional_charges or ZERO
        tax_rate = tax_percentage or ZERO

        sub_total = sum((line.sub_total for line in lines), ZERO)
        discount_amount = sub_total * discount / HUNDRED
        after_discount = sub_total - discount_amount
        tax_amount = after_discount * tax_rate / HUNDRED
        total = after_discount + charges + tax_amount

        result = PriceBreakdown(
            sub_total=round_money(sub_total),
            discount_amount=round_money(discount_amount),
            after_discount=round_money(after_discount),
            tax_amount=round_money(tax_amount),
            additional_charges=round_money(charges),
            total=round_money(total),
        )

        logger.debug(
            "price_computed",
            extra={
                "line_count": len(lines),
                "sub_total": str(result.sub_total),
                "total": str(result.total),
            },
        )
        return result

    def packing_totals(self, lines: Sequence[WeighedLine]) -> PackingTotals:
        """
        Sum packing-list weights and package counts.

        Raises:
            InvalidFieldValueError: on a negative weight or package count.
        """
        gross = ZERO
        net = ZERO
        packages = 0
        for index, line in enumerate(lines):
            if line.gross_weight is not None:
                if line.gross_weight < ZERO:
                    raise InvalidFieldValueError(f"items[{index}].gross_weight", "must not be negative")
                gross += line.gross_weight
            if line.net_weight is not None:
                if line.net_weight < ZERO:
                    raise InvalidFieldValueError(f"items[{index}].net_weight", "must not be negative")
                net += line.net_weight
            if line.packages is not None:
                if line.packages < 0:
                    raise InvalidFieldValueError(f"items[{index}].packages", "must not be negative")
                packages += line.packages

        return PackingTotals(
            total_gross_weight=gross if gross > ZERO else None,
            total_net_weight=net if net > ZERO else None,
            total_packages=packages if packages > 0 else None,
        )


def compute(
    lines: Sequence[PricedLine],
    discount_percentage: Decimal | None = None,
    additional_charges: Decimal | None = None,
    tax_percentage: Decimal | None = None,
) -> PriceBreakdown:
    """Module-level shortcut for ``PriceCalculator().compute``."""
    return PriceCalculator().compute(
        lines,
        discount_percentage=discount_percentage,
        additional_charges=additional_charges,
        tax_percentage=tax_percentage,
    )
