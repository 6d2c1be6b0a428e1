from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Sequence

from portfoliodash.errors import MetricsError
from portfoliodash.model import ChartPoint, IndexEntry, PriceQuote, Transaction

from .metrics import calculate_roi, calculate_sharpe_ratio, calculate_volatility
from .sources import ExecutionSource, MarketDataSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardPayload:
    """Series and headline figures handed to a dashboard sink.

    ``dates`` lists every transaction date in file order, whereas
    ``roi_series`` and ``cumulative_roi_series`` only cover BUY transactions;
    ``roi_dates`` holds the dates that line up with them. ``benchmark_series``
    is positional and carries no date alignment.
    """

    dates: tuple[str, ...]
    roi_series: tuple[float, ...]
    cumulative_roi_series: tuple[float, ...]
    benchmark_series: tuple[Decimal, ...]
    sharpe_ratio: float | None
    roi_dates: tuple[str, ...] = ()
    volatility: float | None = None
    average_roi: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "dates": list(self.dates),
            "roi_dates": list(self.roi_dates),
            "roi_series": list(self.roi_series),
            "cumulative_roi_series": list(self.cumulative_roi_series),
            "benchmark_series": [str(v) for v in self.benchmark_series],
            "volatility": self.volatility,
            "average_roi": self.average_roi,
            "sharpe_ratio": self.sharpe_ratio,
        }


@dataclass(frozen=True)
class BuyRoiLine:
    exec_id: str
    symbol: str
    current_price: Decimal
    roi: float


def resolve_current_price(
    transaction: Transaction, quotes: Iterable[PriceQuote]
) -> Decimal:
    """Current market price for the transaction's symbol.

    Returns ``Decimal("0")`` when no quote matches; callers must read a zero
    price as "no quote found".
    """
    for quote in quotes:
        if quote.symbol == transaction.symbol:
            return quote.price
    logger.debug(
        "No quote for %s (exec %s); using price 0",
        transaction.symbol,
        transaction.exec_id,
    )
    return Decimal("0")


def compute_buy_roi(transaction: Transaction, quotes: Iterable[PriceQuote]) -> float:
    """Unrealized ROI of a BUY fill at the current quote."""
    if not transaction.is_buy:
        raise ValueError(
            f"buy ROI requested for {transaction.side.value} transaction "
            f"{transaction.exec_id}"
        )
    return calculate_roi(
        resolve_current_price(transaction, quotes),
        transaction.price_per_share,
        transaction.total_amount,
        transaction.quantity,
    )


def compute_sell_roi(
    sell_price: Decimal,
    buy_price: Decimal,
    quantity: Decimal,
    total_amount: Decimal,
) -> float:
    """Realized ROI of a closed round trip."""
    return calculate_roi(sell_price, buy_price, total_amount, quantity)


def cumulative_sum(values: Sequence[float]) -> list[float]:
    """Running total seeded at 0, one output per input."""
    return list(itertools.accumulate(values, initial=0.0))[1:]


def build_dashboard_payload(
    transactions: Sequence[Transaction],
    chart_points: Sequence[ChartPoint],
    index_entries: Sequence[IndexEntry],
    quotes: Sequence[PriceQuote],
    *,
    allow_missing_metrics: bool = False,
) -> DashboardPayload:
    """Assemble the dashboard series from already-loaded records.

    Empty transactions or quotes produce empty/zero series. Volatility needs
    at least two chart points and the Sharpe ratio a nonzero volatility;
    those failures propagate unless ``allow_missing_metrics`` is set, in which
    case volatility and Sharpe ratio are left as ``None``.
    """
    dates = tuple(tx.date for tx in transactions)

    buys = [tx for tx in transactions if tx.is_buy]
    roi_series = tuple(compute_buy_roi(tx, quotes) for tx in buys)
    cumulative = tuple(cumulative_sum(roi_series))

    benchmark = tuple(entry.price for entry in index_entries)

    average_roi = sum(roi_series) / len(roi_series) if roi_series else 0.0
    volatility: float | None = None
    sharpe: float | None = None
    try:
        volatility = calculate_volatility(p.close_price for p in chart_points)
        sharpe = calculate_sharpe_ratio(average_roi, volatility)
    except MetricsError as e:
        if not allow_missing_metrics:
            raise
        logger.warning("Risk metrics unavailable: %s", e)

    logger.debug(
        "Payload: %d date(s), %d BUY ROI value(s), %d benchmark value(s)",
        len(dates),
        len(roi_series),
        len(benchmark),
    )
    return DashboardPayload(
        dates=dates,
        roi_series=roi_series,
        cumulative_roi_series=cumulative,
        benchmark_series=benchmark,
        sharpe_ratio=sharpe,
        roi_dates=tuple(tx.date for tx in buys),
        volatility=volatility,
        average_roi=average_roi,
    )


class PortfolioAnalyzer:
    """Holds one snapshot of executions and market data and derives metrics."""

    def __init__(
        self,
        transactions: Iterable[Transaction],
        chart_points: Iterable[ChartPoint],
        index_entries: Iterable[IndexEntry],
        quotes: Iterable[PriceQuote],
    ) -> None:
        self.transactions: tuple[Transaction, ...] = tuple(transactions)
        self.chart_points: tuple[ChartPoint, ...] = tuple(chart_points)
        self.index_entries: tuple[IndexEntry, ...] = tuple(index_entries)
        self.quotes: tuple[PriceQuote, ...] = tuple(quotes)

    @classmethod
    def from_sources(
        cls, executions: ExecutionSource, market: MarketDataSource
    ) -> PortfolioAnalyzer:
        inst = cls(
            executions.fetch_executions(),
            market.fetch_chart(),
            market.fetch_index(),
            market.fetch_quotes(),
        )
        logger.info(
            "Loaded %d transaction(s), %d chart point(s), %d index entr(ies), "
            "%d quote(s)",
            len(inst.transactions),
            len(inst.chart_points),
            len(inst.index_entries),
            len(inst.quotes),
        )
        return inst

    def resolve_current_price(self, transaction: Transaction) -> Decimal:
        return resolve_current_price(transaction, self.quotes)

    def compute_buy_roi(self, transaction: Transaction) -> float:
        return compute_buy_roi(transaction, self.quotes)

    def compute_sell_roi(
        self,
        sell_price: Decimal,
        buy_price: Decimal,
        quantity: Decimal,
        total_amount: Decimal,
    ) -> float:
        return compute_sell_roi(sell_price, buy_price, quantity, total_amount)

    def calculate_volatility(self) -> float:
        return calculate_volatility(p.close_price for p in self.chart_points)

    def buy_roi_lines(self) -> list[BuyRoiLine]:
        lines = []
        for tx in self.transactions:
            if not tx.is_buy:
                continue
            price = self.resolve_current_price(tx)
            lines.append(
                BuyRoiLine(
                    exec_id=tx.exec_id,
                    symbol=tx.symbol,
                    current_price=price,
                    roi=self.compute_buy_roi(tx),
                )
            )
        return lines

    def build_dashboard_payload(
        self, *, allow_missing_metrics: bool = False
    ) -> DashboardPayload:
        return build_dashboard_payload(
            self.transactions,
            self.chart_points,
            self.index_entries,
            self.quotes,
            allow_missing_metrics=allow_missing_metrics,
        )
