from __future__ import annotations

from decimal import Decimal

MoneyLike = str | Decimal

_MONEY_Q = Decimal("0.01")


def quantize_money(value: Decimal, places: MoneyLike = _MONEY_Q) -> Decimal:
    """Quantize monetary values consistently across the codebase."""
    quant = Decimal(places)
    return value.quantize(quant)


def notional(quantity: Decimal, price_per_share: Decimal) -> Decimal:
    """Unrounded quantity x price."""
    return quantity * price_per_share


def total_matches_notional(
    quantity: Decimal, price_per_share: Decimal, total_amount: Decimal
) -> bool:
    """True when the supplied total equals quantity x price at cent precision."""
    return quantize_money(notional(quantity, price_per_share)) == quantize_money(
        total_amount
    )
