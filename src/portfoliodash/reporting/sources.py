from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from portfoliodash.model import (
    ChartPoint,
    IndexEntry,
    ParseReport,
    PriceQuote,
    Transaction,
    read_chart_points,
    read_index_entries,
    read_quotes,
    read_transactions,
)


class ExecutionSource(Protocol):
    def fetch_executions(self) -> list[Transaction]:  # pragma: no cover - protocol
        ...


class MarketDataSource(Protocol):
    def fetch_chart(self) -> list[ChartPoint]:  # pragma: no cover - protocol
        ...

    def fetch_index(self) -> list[IndexEntry]:  # pragma: no cover - protocol
        ...

    def fetch_quotes(self) -> list[PriceQuote]:  # pragma: no cover - protocol
        ...


@dataclass
class CsvExecutionSource:
    """Executions previously exported to the 7-column CSV format."""

    path: Path
    reports: list[ParseReport] = field(default_factory=list, init=False)

    def fetch_executions(self) -> list[Transaction]:
        transactions, report = read_transactions(self.path)
        self.reports.append(report)
        return transactions


@dataclass
class CsvMarketDataSource:
    """Chart, benchmark index and quote snapshots for one reference instrument."""

    chart_path: Path
    index_path: Path
    quotes_path: Path
    reports: list[ParseReport] = field(default_factory=list, init=False)

    def fetch_chart(self) -> list[ChartPoint]:
        points, report = read_chart_points(self.chart_path)
        self.reports.append(report)
        return points

    def fetch_index(self) -> list[IndexEntry]:
        entries, report = read_index_entries(self.index_path)
        self.reports.append(report)
        return entries

    def fetch_quotes(self) -> list[PriceQuote]:
        quotes, report = read_quotes(self.quotes_path)
        self.reports.append(report)
        return quotes
