"""Return and risk metrics.

Monetary inputs are coerced to Decimal; results are floats because they are
ratios, not amounts.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import numpy as np

from portfoliodash.conv import to_dec_strict
from portfoliodash.errors import DivisionByZeroError, InvalidInputError

NumberLike = Decimal | int | float | str

# Annual risk-free rate, as a fraction.
RISK_FREE_RATE = 0.02


def calculate_roi(
    current_price: NumberLike,
    purchase_price: NumberLike,
    total_amount: NumberLike,
    quantity: NumberLike,
) -> float:
    """Percentage return of a position valued at ``current_price``.

    ``((current - purchase) * quantity / total_amount) * 100``. The total
    amount is the invested amount as recorded; it is not checked against
    ``purchase_price * quantity``.
    """
    total = to_dec_strict(total_amount)
    if total == 0:
        raise DivisionByZeroError("ROI is undefined for a zero total amount")
    gain = (to_dec_strict(current_price) - to_dec_strict(purchase_price)) * (
        to_dec_strict(quantity)
    )
    return float(gain / total * 100)


def calculate_volatility(prices: Iterable[NumberLike]) -> float:
    """Sample standard deviation (n - 1 denominator) of a price series."""
    values = [float(to_dec_strict(p)) for p in prices]
    if len(values) < 2:
        raise InvalidInputError(
            f"volatility needs at least 2 prices, got {len(values)}"
        )
    return float(np.std(np.asarray(values, dtype=float), ddof=1))


def calculate_sharpe_ratio(roi_percent: float, volatility: float) -> float:
    """(ROI as a fraction - RISK_FREE_RATE) / volatility.

    The ROI is a per-position figure and is not annualized, while the
    risk-free rate is annual; the ratio is indicative only.
    """
    if volatility == 0:
        raise DivisionByZeroError("Sharpe ratio is undefined for zero volatility")
    return (float(roi_percent) / 100 - RISK_FREE_RATE) / float(volatility)
