"""Conversion between raw token base units and human-readable amounts.

All conversions use ``Decimal`` so large base-unit values keep every digit.
Amounts headed on-chain are always rounded toward zero, never to nearest.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Union

Amount = Union[str, int, float, Decimal]


def _check_decimals(decimals: int) -> None:
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")


def to_base_units(amount: Amount, decimals: int) -> int:
    """Convert a human amount to integer base units, truncating toward zero."""
    _check_decimals(decimals)
    # str() keeps floats like 0.1 from dragging in their binary expansion.
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"not a number: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"amount is not finite: {amount}")
    # scaleb rounds to the context precision, so widen it to fit every digit.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + 1)
        scaled = value.scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def to_human(units: int, decimals: int) -> Decimal:
    _check_decimals(decimals)
    return Decimal(units).scaleb(-decimals)


def rescale(amount: int, from_decimals: int, to_decimals: int) -> int:
    """Re-express ``amount`` base units in a token with different precision.

    Scaling up is exact. Scaling down floor-divides and drops the remainder.
    """
    _check_decimals(from_decimals)
    _check_decimals(to_decimals)
    if to_decimals >= from_decimals:
        return amount * 10 ** (to_decimals - from_decimals)
    return amount // 10 ** (from_decimals - to_decimals)


def format_units(units: int, decimals: int) -> str:
    """Render base units for display, e.g. ``1,234.5``."""
    places = min(decimals, 6)
    value = to_human(units, decimals).quantize(
        Decimal(1).scaleb(-places), rounding=ROUND_DOWN
    )
    text = f"{value:,.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def share_pct(user_units: int, total_units: int) -> str:
    if total_units <= 0:
        return "0.00%"
    pct = Decimal(user_units) / Decimal(total_units) * 100
    return f"{pct:.2f}%"
