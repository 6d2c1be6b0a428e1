"""
Compute ROI, volatility and Sharpe ratio for broker executions and write a
dashboard workbook.

This module acts as the CLI orchestrator, delegating responsibilities to:
- Records and CSV readers/writer: portfoliodash.model
- Input channels: portfoliodash.reporting.sources
- Metrics and payload assembly: portfoliodash.reporting.analyzer
- Output writing: portfoliodash.reporting.dashboard_sink

Usage
-----
    python -m portfoliodash.cmd.cli \
        --executions ./executions.csv \
        --chart ./stock_chart_AAPL.csv \
        --index ./sp500.csv \
        --quotes ./stock_price_AAPL.csv \
        --output ./dashboard.xlsx -v

Input CSV schemas (first row is a header and is skipped):
    executions: ExecId,Date,StockSymbol,Side,Quantity,PricePerShare,TotalAmount
    chart:      Timestamp,ClosePrice          (YYYY-MM-DD HH:MM:SS)
    index:      Symbol,RegularMarketPrice
    quotes:     Symbol,RegularMarketPrice,PreviousClose,DayHigh,DayLow,Currency
"""

from __future__ import annotations

import argparse
import logging
from decimal import ROUND_HALF_UP, getcontext
from pathlib import Path

from portfoliodash.errors import MetricsError, ReaderError
from portfoliodash.logging import configure_logging, verbosity_to_level
from portfoliodash.model import merge_reports, write_transactions
from portfoliodash.reporting import (
    CsvExecutionSource,
    CsvMarketDataSource,
    ExcelDashboardSink,
    PortfolioAnalyzer,
)
from portfoliodash.reporting.dashboard_sink import format_ratio

# Monetary precision and rounding
getcontext().prec = 28
getcontext().rounding = ROUND_HALF_UP


def process_files(args: argparse.Namespace) -> Path:
    logger = logging.getLogger(__name__)

    executions = CsvExecutionSource(path=Path(args.executions))
    market = CsvMarketDataSource(
        chart_path=Path(args.chart),
        index_path=Path(args.index),
        quotes_path=Path(args.quotes),
    )

    try:
        analyzer = PortfolioAnalyzer.from_sources(executions, market)
    except ReaderError as e:
        logger.error("Aborting: malformed input at %s", e)
        raise SystemExit(2) from e
    merge_reports(executions.reports + market.reports).log_with(logger)

    try:
        lines = analyzer.buy_roi_lines()
    except MetricsError as e:
        logger.error("Cannot compute ROI of BUY transactions: %s", e)
        raise SystemExit(2) from e
    for line in lines:
        if line.current_price == 0:
            logger.warning(
                "No quote for %s (exec %s); ROI computed at price 0",
                line.symbol,
                line.exec_id,
            )
        logger.info("ROI (BUY) for transaction %s: %.2f%%", line.exec_id, line.roi)

    try:
        payload = analyzer.build_dashboard_payload(
            allow_missing_metrics=args.allow_missing_metrics
        )
    except MetricsError as e:
        logger.error("Cannot compute risk metrics: %s", e)
        logger.error(
            "Rerun with --allow-missing-metrics to write the dashboard with N/A "
            "placeholders."
        )
        raise SystemExit(2) from e

    logger.info("Volatility: %s", format_ratio(payload.volatility))
    logger.info("Sharpe Ratio: %s", format_ratio(payload.sharpe_ratio))

    if args.export_transactions:
        write_transactions(args.export_transactions, analyzer.transactions)

    sink = ExcelDashboardSink(out_path=Path(args.output))
    out_path = sink.write(payload)
    logger.info("Wrote dashboard to %s", out_path)
    return out_path


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Portfolio ROI / volatility / Sharpe ratio dashboard"
    )
    p.add_argument(
        "--executions",
        type=str,
        required=True,
        help="Executions CSV (ExecId,Date,StockSymbol,Side,Quantity,...)",
    )
    p.add_argument(
        "--chart",
        type=str,
        required=True,
        help="Close-price series CSV of the reference instrument",
    )
    p.add_argument(
        "--index",
        type=str,
        required=True,
        help="Benchmark index constituents CSV (Symbol,RegularMarketPrice)",
    )
    p.add_argument(
        "--quotes",
        type=str,
        required=True,
        help="Current quotes CSV used to value BUY transactions",
    )
    p.add_argument(
        "--output",
        type=str,
        default="dashboard.xlsx",
        help="Output workbook (default: dashboard.xlsx)",
    )
    p.add_argument(
        "--export-transactions",
        type=str,
        default=None,
        help="Also re-export the parsed transactions to this CSV path",
    )
    p.add_argument(
        "--allow-missing-metrics",
        action="store_true",
        help=(
            "Write the dashboard even when volatility or the Sharpe ratio "
            "cannot be computed, showing N/A instead."
        ),
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity: -v (INFO), -vv (DEBUG)",
    )
    return p


def main(argv: list[str] | None = None) -> None:
    parser = build_argparser()
    args = parser.parse_args(argv)

    configure_logging(level=verbosity_to_level(args.verbose))

    process_files(args)


if __name__ == "__main__":
    main()
