"""CSV readers for executions and market-data snapshots.

Every reader follows the same contract: the first row is a header and is
skipped, fields are comma separated, each data row must carry exactly the
expected number of fields, and the first malformed row aborts the read with a
``ReaderError``. Completely blank lines are ignored.

Non-fatal findings (e.g. a total amount that does not match quantity x price)
are collected in a ``ParseReport`` instead of changing the data.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, Sequence, TypeVar

from portfoliodash.conv import parse_timestamp, to_dec_strict
from portfoliodash.errors import ReaderError

from .money import notional, total_matches_notional
from .records import ChartPoint, IndexEntry, PriceQuote, Side, Transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")

EXECUTION_HEADER = (
    "ExecId",
    "Date",
    "StockSymbol",
    "Side",
    "Quantity",
    "PricePerShare",
    "TotalAmount",
)
CHART_HEADER = ("Timestamp", "ClosePrice")
INDEX_HEADER = ("Symbol", "RegularMarketPrice")
QUOTE_HEADER = (
    "Symbol",
    "RegularMarketPrice",
    "PreviousClose",
    "DayHigh",
    "DayLow",
    "Currency",
)


@dataclass(frozen=True)
class ParseIssue:
    line_no: int
    message: str
    row_preview: Sequence[str] | None = None
    source: str | None = None


@dataclass
class ParseReport:
    """Non-fatal data-quality warnings collected during a read."""

    source: str | None = None
    issues: list[ParseIssue] = field(default_factory=list)

    def warn(self, line_no: int, msg: str, row: Sequence[str] | None = None) -> None:
        self.issues.append(ParseIssue(line_no, msg, row, self.source))

    def log_with(self, log: logging.Logger) -> None:
        for i in self.issues:
            where = i.source or "<rows>"
            if i.row_preview is not None:
                log.warning(
                    "%s:%d: %s | row=%s", where, i.line_no, i.message, i.row_preview
                )
            else:
                log.warning("%s:%d: %s", where, i.line_no, i.message)


def merge_reports(reports: Sequence[ParseReport]) -> ParseReport:
    out = ParseReport()
    for r in reports:
        out.issues.extend(r.issues)
    return out


def _data_rows(
    rows: Iterable[Sequence[str]], width: int, source: str | None
) -> Iterator[tuple[int, list[str]]]:
    """Yield (line_no, stripped cells) for every data row after the header.

    Decoding and CSV syntax errors raised while iterating become ReaderError.
    """
    it = iter(rows)
    line_no = 0
    while True:
        line_no += 1
        try:
            row = next(it)
        except StopIteration:
            return
        except (UnicodeDecodeError, csv.Error) as e:
            raise ReaderError(str(e), line_no=line_no, path=source) from e
        if line_no == 1:
            continue
        if not row or all(not cell.strip() for cell in row):
            continue
        if len(row) != width:
            raise ReaderError(
                f"expected {width} fields, got {len(row)}",
                line_no=line_no,
                path=source,
            )
        yield line_no, [cell.strip() for cell in row]


def _parse_rows(
    rows: Iterable[Sequence[str]],
    width: int,
    build: Callable[[list[str]], T],
    source: str | None,
) -> Iterator[tuple[int, list[str], T]]:
    for line_no, cells in _data_rows(rows, width, source):
        try:
            record = build(cells)
        except (ValueError, ArithmeticError) as e:
            raise ReaderError(str(e), line_no=line_no, path=source) from e
        yield line_no, cells, record


def _read_file(
    path: str | Path,
    parse: Callable[..., tuple[list[T], ParseReport]],
    *,
    encoding: str = "utf-8",
) -> tuple[list[T], ParseReport]:
    with open(path, "r", encoding=encoding, newline="") as fp:
        records, report = parse(csv.reader(fp), source=str(path))
    logger.debug("Read %d record(s) from %s", len(records), path)
    return records, report


def _build_transaction(cells: list[str]) -> Transaction:
    exec_id, date, symbol, side, quantity, price, total = cells
    if not exec_id:
        raise ValueError("missing ExecId")
    if not symbol:
        raise ValueError("missing StockSymbol")
    return Transaction(
        exec_id=exec_id,
        date=date,
        symbol=symbol,
        side=Side.parse(side),
        quantity=to_dec_strict(quantity),
        price_per_share=to_dec_strict(price),
        total_amount=to_dec_strict(total),
    )


def parse_transaction_rows(
    rows: Iterable[Sequence[str]], *, source: str | None = None
) -> tuple[list[Transaction], ParseReport]:
    report = ParseReport(source=source)
    transactions: list[Transaction] = []
    seen: dict[str, int] = {}
    for line_no, cells, tx in _parse_rows(
        rows, len(EXECUTION_HEADER), _build_transaction, source
    ):
        if tx.exec_id in seen:
            report.warn(
                line_no,
                f"Duplicate ExecId {tx.exec_id!r} "
                f"(first seen on line {seen[tx.exec_id]})",
                cells,
            )
        else:
            seen[tx.exec_id] = line_no
        try:
            matches = total_matches_notional(
                tx.quantity, tx.price_per_share, tx.total_amount
            )
        except ArithmeticError:
            report.warn(
                line_no,
                f"TotalAmount {tx.total_amount} cannot be checked against "
                "Quantity x PricePerShare at cent precision; keeping supplied total",
                cells,
            )
        else:
            if not matches:
                report.warn(
                    line_no,
                    f"TotalAmount {tx.total_amount} differs from Quantity x "
                    f"PricePerShare {notional(tx.quantity, tx.price_per_share)}; "
                    "keeping supplied total",
                    cells,
                )
        transactions.append(tx)
    return transactions, report


def _build_chart_point(cells: list[str]) -> ChartPoint:
    timestamp, close = cells
    return ChartPoint(
        timestamp=parse_timestamp(timestamp), close_price=to_dec_strict(close)
    )


def parse_chart_rows(
    rows: Iterable[Sequence[str]], *, source: str | None = None
) -> tuple[list[ChartPoint], ParseReport]:
    points = [
        point
        for _, _, point in _parse_rows(
            rows, len(CHART_HEADER), _build_chart_point, source
        )
    ]
    return points, ParseReport(source=source)


def _build_index_entry(cells: list[str]) -> IndexEntry:
    symbol, price = cells
    if not symbol:
        raise ValueError("missing Symbol")
    return IndexEntry(symbol=symbol, price=to_dec_strict(price))


def parse_index_rows(
    rows: Iterable[Sequence[str]], *, source: str | None = None
) -> tuple[list[IndexEntry], ParseReport]:
    entries = [
        entry
        for _, _, entry in _parse_rows(
            rows, len(INDEX_HEADER), _build_index_entry, source
        )
    ]
    return entries, ParseReport(source=source)


def _build_quote(cells: list[str]) -> PriceQuote:
    symbol, price, prev_close, high, low, currency = cells
    if not symbol:
        raise ValueError("missing Symbol")
    return PriceQuote(
        symbol=symbol,
        price=to_dec_strict(price),
        previous_close=to_dec_strict(prev_close),
        day_high=to_dec_strict(high),
        day_low=to_dec_strict(low),
        currency=currency,
    )


def parse_quote_rows(
    rows: Iterable[Sequence[str]], *, source: str | None = None
) -> tuple[list[PriceQuote], ParseReport]:
    report = ParseReport(source=source)
    quotes: list[PriceQuote] = []
    seen: set[str] = set()
    for line_no, cells, quote in _parse_rows(
        rows, len(QUOTE_HEADER), _build_quote, source
    ):
        if quote.symbol in seen:
            report.warn(
                line_no,
                f"Duplicate quote for {quote.symbol}; the first one is used",
                cells,
            )
        seen.add(quote.symbol)
        quotes.append(quote)
    return quotes, report


def read_transactions(path: str | Path) -> tuple[list[Transaction], ParseReport]:
    return _read_file(path, parse_transaction_rows)


def read_chart_points(path: str | Path) -> tuple[list[ChartPoint], ParseReport]:
    return _read_file(path, parse_chart_rows)


def read_index_entries(path: str | Path) -> tuple[list[IndexEntry], ParseReport]:
    return _read_file(path, parse_index_rows)


def read_quotes(path: str | Path) -> tuple[list[PriceQuote], ParseReport]:
    return _read_file(path, parse_quote_rows)
