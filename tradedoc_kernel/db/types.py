"""
Module: tradedoc_kernel.db.types
Responsibility: Annotated column aliases and the single money rounding
    function shared by models, engines and services.

No floats anywhere: every amount, percentage and weight is a Decimal.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric, String, Text

# 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

Percentage = Annotated[Decimal, Numeric(9, 4)]

Quantity = Annotated[Decimal, Numeric(38, 9)]

Currency = Annotated[str, String(3)]

CompanyName = Annotated[str, String(255)]

HumanCode = Annotated[str, String(40)]

StatusCode = Annotated[str, String(30)]

ShortText = Annotated[str, String(255)]

LongText = Annotated[str, Text]

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value (half-up, 2 places by default).

    This is the only rounding applied to document totals and invoice
    balances; intermediate values stay exact.
    """
    quantizer = Decimal(10) ** -decimal_places
    return value.quantize(quantizer, rounding=rounding)


def to_decimal(value: object) -> Decimal:
    """
    Convert a payload value to Decimal without passing through binary floats.

    Floats are converted via ``str`` so ``0.1`` becomes ``Decimal("0.1")``.

    Raises:
        ValueError: value is not numeric (bools included).
    """
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except ArithmeticError as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    else:
        raise ValueError(f"not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return result
