"""Record builders for tests.

Production code builds records from CSV files via portfoliodash.model.readers.
Tests need records and files without going through a broker export, so these
helpers construct them directly.
"""

from __future__ import annotations

import csv
import datetime as dt
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Sequence

from portfoliodash.model import ChartPoint, IndexEntry, PriceQuote, Side, Transaction


def tx(
    exec_id: str = "0001",
    symbol: str = "AAPL",
    side: Side = Side.BUY,
    quantity: str = "100",
    price: str = "255.45",
    total: str | None = None,
    date: str = "20241224 11:46:53 EET",
) -> Transaction:
    qty = Decimal(quantity)
    pps = Decimal(price)
    return Transaction(
        exec_id=exec_id,
        date=date,
        symbol=symbol,
        side=side,
        quantity=qty,
        price_per_share=pps,
        total_amount=Decimal(total) if total is not None else qty * pps,
    )


def quote(symbol: str = "AAPL", price: str = "260.00") -> PriceQuote:
    p = Decimal(price)
    return PriceQuote(
        symbol=symbol,
        price=p,
        previous_close=p,
        day_high=p,
        day_low=p,
        currency="USD",
    )


def chart(*closes: str) -> list[ChartPoint]:
    start = dt.datetime(2024, 12, 24, 9, 30)
    return [
        ChartPoint(
            timestamp=start + dt.timedelta(minutes=5 * i), close_price=Decimal(c)
        )
        for i, c in enumerate(closes)
    ]


def index(*prices: str) -> list[IndexEntry]:
    return [
        IndexEntry(symbol=f"SYM{i}", price=Decimal(p)) for i, p in enumerate(prices)
    ]


def write_csv(path: Path, header: Sequence[str], rows: Iterable[Sequence[str]]) -> Path:
    with open(path, "w", newline="", encoding="utf-8") as fp:
        writer = csv.writer(fp)
        writer.writerow(header)
        writer.writerows(rows)
    return path
