"""Presentation-boundary rounding for peso and dollar amounts"""

from decimal import Decimal, ROUND_HALF_UP, localcontext

CENT = Decimal("0.01")

# Largest amount a single record may carry, in pesos or dollars
MAX_AMOUNT = Decimal("999999999999999.99")


def to_cents(amount: Decimal) -> Decimal:
    """Round to two decimals. Only call this when presenting a value, never mid-computation."""
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
