"""
Trade document engines - pure calculation, no I/O.

Engines:
    pricing: document totals and packing-list weight totals
"""

from tradedoc_engines.pricing import (
    PackingTotals,
    PriceBreakdown,
    PriceCalculator,
    PricedLine,
    WeighedLine,
    compute,
)

__all__ = [
    "PackingTotals",
    "PriceBreakdown",
    "PriceCalculator",
    "PricedLine",
    "WeighedLine",
    "compute",
]
