from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, raw: str) -> Side:
        """Parse a side cell; accepts the broker codes BOT/SLD as aliases."""
        key = (raw or "").strip().upper()
        side = _SIDE_ALIASES.get(key)
        if side is None:
            raise ValueError(f"Unknown transaction side: {raw!r}")
        return side


_SIDE_ALIASES = {
    "BUY": Side.BUY,
    "BOT": Side.BUY,
    "SELL": Side.SELL,
    "SLD": Side.SELL,
}


@dataclass(frozen=True)
class Transaction:
    """A single execution (fill) as reported by the broker.

    ``total_amount`` is kept exactly as supplied; it is not re-derived from
    ``quantity * price_per_share``.
    """

    exec_id: str
    date: str
    symbol: str
    side: Side
    quantity: Decimal
    price_per_share: Decimal
    total_amount: Decimal

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {self.quantity}")
        if self.price_per_share <= 0:
            raise ValueError(
                f"price per share must be positive, got {self.price_per_share}"
            )

    @property
    def is_buy(self) -> bool:
        return self.side is Side.BUY


@dataclass(frozen=True)
class ChartPoint:
    timestamp: dt.datetime
    close_price: Decimal


@dataclass(frozen=True)
class IndexEntry:
    symbol: str
    price: Decimal  # regular market price of the constituent


@dataclass(frozen=True)
class PriceQuote:
    symbol: str
    price: Decimal  # regular market price
    previous_close: Decimal
    day_high: Decimal
    day_low: Decimal
    currency: str
